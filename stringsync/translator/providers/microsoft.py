"""Microsoft Translator Text API (v3) provider.

Docs: https://learn.microsoft.com/azure/ai-services/translator/reference/v3-0-translate
"""

from typing import List, Sequence

from stringsync.language_codes import Language
from stringsync.logger import get_logger
from stringsync.translator.exceptions import TranslationError, ALIGNMENT_MISMATCH, UNEXPECTED_LANGUAGE
from stringsync.translator.models import Translation, TranslationSource
from stringsync.translator.providers.base import TranslationProvider
from stringsync.translator.transport import ProviderRequest

logger = get_logger(__name__)

BASE_URL = "https://api.cognitive.microsofttranslator.com"
API_VERSION = "3.0"


class MicrosoftProvider(TranslationProvider):
    """Translates to all target languages in a single request."""

    name = "Microsoft"
    locale_style = "microsoft"
    supports_multiple_targets = True
    # Request limits: 1 000 array elements, 50 000 characters including spaces
    max_texts_per_request = 1_000
    max_chars_per_request = 50_000

    def __init__(self, subscription_key: str):
        self._subscription_key = subscription_key

    @property
    def base_url(self) -> str:
        return BASE_URL

    def build_request(
        self,
        sources: Sequence[TranslationSource],
        source_language: Language,
        target_languages: Sequence[Language],
    ) -> ProviderRequest:
        if not target_languages:
            raise ValueError("Microsoft request needs at least one target language")

        logger.info(self.describe(sources, source_language, target_languages))

        params = [("api-version", API_VERSION), ("from", source_language.provider_code(self.locale_style))]
        params.extend(("to", language.provider_code(self.locale_style)) for language in target_languages)

        return ProviderRequest(
            method="POST",
            path="/translate",
            headers={
                "Ocp-Apim-Subscription-Key": self._subscription_key,
                "Content-Type": "application/json",
            },
            body=self._encode_body([{"Text": source.text} for source in sources]),
            params=tuple(params),
        )

    def parse_response(
        self,
        content: bytes,
        sources: Sequence[TranslationSource],
        target_languages: Sequence[Language],
    ) -> List[Translation]:
        """
        Decode ``[{"translations": [{"text": ..., "to": ...}, ...]}, ...]``.

        The response holds one element per source text; each element carries
        one translation per requested target language.
        """
        data = self._decode_json(content, "TranslateResponse")
        if not isinstance(data, list):
            raise self._decode_shape_error("TranslateResponse", "expected an array")
        self._check_alignment(len(data), sources)

        translations = []
        for source, element in zip(sources, data):
            try:
                items = element["translations"]
                pairs = [(item["to"], item["text"]) for item in items]
            except (KeyError, TypeError) as e:
                raise self._decode_shape_error("TranslateResponse", f"missing field {e}") from e

            for locale, text in pairs:
                if not isinstance(locale, str) or not isinstance(text, str):
                    raise self._decode_shape_error(
                        "TranslateResponse", f"translation of '{source.text}' has a non-string 'to' or 'text'"
                    )

            if len(pairs) != len(target_languages):
                raise TranslationError(
                    f"Microsoft returned {len(pairs)} translations of '{source.text}' "
                    f"for {len(target_languages)} target languages",
                    code=ALIGNMENT_MISMATCH,
                    details={"provider": self.name, "key": source.key},
                )

            for locale, text in pairs:
                language = Language.with_locale(locale, self.locale_style)
                if language is None:
                    raise TranslationError(
                        f"Unexpected language code '{locale}' in Microsoft response",
                        code=UNEXPECTED_LANGUAGE,
                        details={"provider": self.name, "language": locale},
                    )
                translations.append(Translation(language=language, translated_text=text, key=source.key))

        return translations
