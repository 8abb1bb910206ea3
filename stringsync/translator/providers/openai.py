"""OpenAI Chat Completions provider.

The model is prompted to act as a data extraction step: it receives one line
per source text and must answer with JSON only. The answer arrives as a string
inside the chat completion and is decoded by stringsync.translator.response.
"""

from typing import Any, Dict, List, Sequence

from stringsync.language_codes import Language
from stringsync.logger import get_logger
from stringsync.translator.models import Translation, TranslationSource
from stringsync.translator.providers.base import TranslationProvider
from stringsync.translator.response import parse_openai_translations
from stringsync.translator.transport import ProviderRequest

logger = get_logger(__name__)

BASE_URL = "https://api.openai.com"
MODEL = "gpt-4o"
TEMPERATURE = 0.0

SYSTEM_PROMPT = """You are an AI assistant specialized in data extraction and transformation. Translate the provided inputs from {source_language_name} to {target_language_name}.

You will be given:
1. A series of texts to translate, one per line.
2. A key for each text that tells you where it is used. It follows the text, prefixed with 'KEY:'.
3. An optional comment with additional context. It follows the key, prefixed with 'COMMENT:'. Lines without a comment contain 'COMMENT:N/A'.

Instructions:
- Use the 'KEY:' to determine the context of the translation.
- Use the 'COMMENT:' for additional context, if available.
- For buttons and other UI elements, keep translations very short.
- For marketing content, produce concise and engaging copy.
- Incorporate this additional context, if provided: {context}

Example input:
Save Changes KEY:L10n.Localizable.Home.okButton COMMENT:N/A
Limited Offer! Get 20% Off KEY:L10n.Localizable.Marketing.get20percentOff COMMENT:holiday promotion

Output format:
Return ONLY valid JSON adhering to this schema, with exactly one entry per input line in the same order:
{{
  "translations": [
    {{ "text": "Your translated text here" }}
  ]
}}

Important:
- Do not include any text, comments or keys outside the JSON structure.
- Ensure the JSON syntax is valid."""


def format_source_line(source: TranslationSource) -> str:
    """
    Format one source as a prompt line.

    Example:
        >>> format_source_line(TranslationSource(key="key.button", text="Love"))
        'Love KEY:key.button COMMENT:N/A'
    """
    comment = source.comment if source.comment is not None else "N/A"
    return f"{source.text} KEY:{source.key} COMMENT:{comment}"


class OpenAIProvider(TranslationProvider):
    """Translates to one target language per request."""

    name = "OpenAI"
    locale_style = "openai"
    supports_multiple_targets = False
    max_texts_per_request = 25
    max_chars_per_request = 1_000

    def __init__(self, api_key: str, context: str = ""):
        self._api_key = api_key
        self._context = context

    @property
    def base_url(self) -> str:
        return BASE_URL

    def build_messages(
        self,
        sources: Sequence[TranslationSource],
        source_language: Language,
        target_language: Language,
    ) -> List[Dict[str, str]]:
        system_message = SYSTEM_PROMPT.format(
            source_language_name=source_language.provider_code(self.locale_style),
            target_language_name=target_language.provider_code(self.locale_style),
            context=self._context,
        )
        user_message = "\n".join(format_source_line(source) for source in sources)
        return [
            {"role": "system", "content": system_message},
            {"role": "user", "content": user_message},
        ]

    def build_payload(
        self,
        sources: Sequence[TranslationSource],
        source_language: Language,
        target_language: Language,
    ) -> Dict[str, Any]:
        return {
            "model": MODEL,
            "messages": self.build_messages(sources, source_language, target_language),
            "temperature": TEMPERATURE,
        }

    def build_request(
        self,
        sources: Sequence[TranslationSource],
        source_language: Language,
        target_languages: Sequence[Language],
    ) -> ProviderRequest:
        target_language = self._single_target(target_languages)
        logger.info(self.describe(sources, source_language, target_languages))

        payload = self.build_payload(sources, source_language, target_language)
        return ProviderRequest(
            method="POST",
            path="/v1/chat/completions",
            headers={
                "Authorization": f"Bearer {self._api_key}",
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
        target_language = self._single_target(target_languages)
        texts = parse_openai_translations(content, expected_count=len(sources))
        return [
            Translation(language=target_language, translated_text=text, key=source.key)
            for source, text in zip(sources, texts)
        ]
