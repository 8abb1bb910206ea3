"""Abstract translation provider interface."""

import json
from abc import ABC, abstractmethod
from typing import Any, List, Optional, Sequence

from stringsync.language_codes import Language
from stringsync.translator.exceptions import (
    TranslationError,
    RequestEncodingError,
    DECODE_FAILED,
    ALIGNMENT_MISMATCH,
)
from stringsync.translator.models import Translation, TranslationSource
from stringsync.translator.transport import ProviderRequest


class TranslationProvider(ABC):
    """
    Base class for all translation providers.

    A provider turns sources into a ProviderRequest and decodes the provider's
    response body back into Translation records. Credentials are fixed when the
    provider is constructed and never change afterwards.
    """

    #: Display name used in log lines and error messages
    name: str = ''
    #: Provider key for Language.provider_code / Language.with_locale
    locale_style: str = ''
    #: Whether one request can cover several target languages
    supports_multiple_targets: bool = False
    max_texts_per_request: int = 25
    max_chars_per_request: int = 1_000

    @property
    @abstractmethod
    def base_url(self) -> str:
        ...

    @abstractmethod
    def build_request(
        self,
        sources: Sequence[TranslationSource],
        source_language: Language,
        target_languages: Sequence[Language],
    ) -> ProviderRequest:
        """Build the HTTP request translating ``sources``.

        Providers without multi-target support accept exactly one target.
        """
        ...

    @abstractmethod
    def parse_response(
        self,
        content: bytes,
        sources: Sequence[TranslationSource],
        target_languages: Sequence[Language],
    ) -> List[Translation]:
        """Decode a successful response body into translations.

        Translations are aligned with ``sources`` by position.
        """
        ...

    def parse_error(self, content: bytes) -> Optional[str]:
        """Extract the provider's error message from a 4xx body."""
        data = json.loads(content)
        if isinstance(data, dict) and 'error' in data:
            error_detail = data['error']
            if isinstance(error_detail, dict):
                return error_detail.get('message', str(error_detail))
            return str(error_detail)
        return None

    def describe(
        self,
        sources: Sequence[TranslationSource],
        source_language: Language,
        target_languages: Sequence[Language],
    ) -> str:
        targets = ', '.join(language.display_name for language in target_languages)
        return (
            f"Starting {self.name} request for {len(sources)} translations "
            f"from {source_language.display_name} to {targets}."
        )

    # Helpers shared by the concrete providers

    def _single_target(self, target_languages: Sequence[Language]) -> Language:
        if len(target_languages) != 1:
            raise ValueError(f"{self.name} translates to exactly one target language per request")
        return target_languages[0]

    def _encode_body(self, payload: Any) -> bytes:
        try:
            return json.dumps(payload, ensure_ascii=False, allow_nan=False).encode('utf-8')
        except (TypeError, ValueError) as e:
            raise RequestEncodingError(f"Failed to encode {self.name} request as JSON: {e}") from e

    def _decode_json(self, content: bytes, type_name: str) -> Any:
        try:
            return json.loads(content)
        except ValueError as e:
            raise TranslationError(
                f"Failed to convert response data to type '{type_name}'. Error: {e}",
                code=DECODE_FAILED,
                details={'provider': self.name, 'type': type_name},
            ) from e

    def _decode_shape_error(self, type_name: str, error: Any) -> TranslationError:
        return TranslationError(
            f"Failed to convert response data to type '{type_name}'. Error: {error}",
            code=DECODE_FAILED,
            details={'provider': self.name, 'type': type_name},
        )

    def _check_alignment(self, received: int, sources: Sequence[TranslationSource]) -> None:
        if received != len(sources):
            raise TranslationError(
                f"{self.name} returned {received} translations for {len(sources)} texts",
                code=ALIGNMENT_MISMATCH,
                details={'provider': self.name, 'expected': len(sources), 'received': received},
            )
