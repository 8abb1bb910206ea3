"""DeepL API provider.

Docs: https://developers.deepl.com/docs/api-reference/translate
"""

import json
from typing import List, Optional, Sequence

from stringsync.language_codes import Language
from stringsync.logger import get_logger
from stringsync.translator.models import Translation, TranslationSource
from stringsync.translator.providers.base import TranslationProvider
from stringsync.translator.transport import ProviderRequest

logger = get_logger(__name__)

FREE_BASE_URL = "https://api-free.deepl.com"
PRO_BASE_URL = "https://api.deepl.com"
FREE_KEY_SUFFIX = ":fx"


def is_free_api_key(api_key: str) -> bool:
    """DeepL Free keys end in ':fx' and must use the api-free host."""
    return api_key.endswith(FREE_KEY_SUFFIX)


class DeepLProvider(TranslationProvider):
    """Translates to one target language per request."""

    name = "DeepL"
    locale_style = "deepl"
    supports_multiple_targets = False
    # Up to 50 texts per request, 128 KiB total request size
    max_texts_per_request = 50
    max_chars_per_request = 100_000

    def __init__(self, api_key: str):
        self._api_key = api_key
        # Fixed at construction
        self._base_url = FREE_BASE_URL if is_free_api_key(api_key) else PRO_BASE_URL

    @property
    def base_url(self) -> str:
        return self._base_url

    def build_request(
        self,
        sources: Sequence[TranslationSource],
        source_language: Language,
        target_languages: Sequence[Language],
    ) -> ProviderRequest:
        target_language = self._single_target(target_languages)
        logger.info(self.describe(sources, source_language, target_languages))

        payload = {
            "text": [source.text for source in sources],
            "source_lang": source_language.provider_code(self.locale_style, target=False),
            "target_lang": target_language.provider_code(self.locale_style, target=True),
        }
        return ProviderRequest(
            method="POST",
            path="/v2/translate",
            headers={
                "Authorization": f"DeepL-Auth-Key {self._api_key}",
                "Content-Type": "application/json",
            },
            body=self._encode_body(payload),
        )

    def parse_response(
        self,
        content: bytes,
        sources: Sequence[TranslationSource],
        target_languages: Sequence[Language],
    ) -> List[Translation]:
        """Decode ``{"translations": [{"detected_source_language": ..., "text": ...}]}``."""
        target_language = self._single_target(target_languages)
        data = self._decode_json(content, "DeepLTranslateResponse")

        try:
            texts = [item["text"] for item in data["translations"]]
        except (KeyError, TypeError) as e:
            raise self._decode_shape_error("DeepLTranslateResponse", f"missing field {e}") from e

        for i, text in enumerate(texts):
            if not isinstance(text, str):
                raise self._decode_shape_error("DeepLTranslateResponse", f"translations[{i}].text is not a string")

        self._check_alignment(len(texts), sources)
        return [
            Translation(language=target_language, translated_text=text, key=source.key)
            for source, text in zip(sources, texts)
        ]

    def parse_error(self, content: bytes) -> Optional[str]:
        """DeepL reports errors as ``{"message": ..., "detail": ...}``."""
        # Plain-text and HTML bodies (403, 456) raise ValueError here
        data = json.loads(content)
        if not isinstance(data, dict):
            return None
        message = data.get("message")
        detail = data.get("detail")
        if message and detail:
            return f"{message} ({detail})"
        return message or detail
