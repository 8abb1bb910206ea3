"""
Translation Service Module

This module provides the translator that coordinates provider requests:
- TranslationService: immutable provider selection and credentials
- Translator: batches sources, dispatches requests and aggregates translations

For provider-specific request/response handling, see translator/providers/.
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence

from stringsync.language_codes import Language
from stringsync.logger import get_logger
from stringsync.translator.batching import source_batches
from stringsync.translator.exceptions import TranslationError, INTERNAL_INCONSISTENCY
from stringsync.translator.models import Translation, TranslationSource
from stringsync.translator.providers import (
    TranslationProvider,
    MicrosoftProvider,
    DeepLProvider,
    OpenAIProvider,
)
from stringsync.translator.transport import HttpTransport, raise_for_status

logger = get_logger(__name__)


@dataclass(frozen=True)
class TranslationService:
    """The translation service to use and its credentials."""
    name: str
    api_key: str
    context: str = ""

    @classmethod
    def microsoft(cls, subscription_key: str) -> 'TranslationService':
        """Microsoft Translator Text API, keyed by the ``Ocp-Apim-Subscription-Key``."""
        return cls(name="microsoft", api_key=subscription_key)

    @classmethod
    def deepl(cls, api_key: str) -> 'TranslationService':
        return cls(name="deepl", api_key=api_key)

    @classmethod
    def openai(cls, api_key: str, context: str = "") -> 'TranslationService':
        """OpenAI chat completions; ``context`` is appended to the system prompt."""
        return cls(name="openai", api_key=api_key, context=context)

    def create_provider(self) -> TranslationProvider:
        if self.name == "microsoft":
            return MicrosoftProvider(subscription_key=self.api_key)
        if self.name == "deepl":
            return DeepLProvider(api_key=self.api_key)
        if self.name == "openai":
            return OpenAIProvider(api_key=self.api_key, context=self.context)
        raise ValueError(f"Unsupported translation service: {self.name}")

    def __repr__(self) -> str:
        return f"TranslationService(name={self.name!r})"


class Translator:
    """
    Translates sources from one language to one or more other languages.

    The provider is created once from the TranslationService; the translator
    keeps no other state between calls. Every call to translate() is a fresh,
    sequential attempt with no retries and no caching.
    """

    def __init__(self, service: TranslationService, transport=None, timeout: Any = 120):
        self.service = service
        self.provider = service.create_provider()
        # A transport created here is closed by close(); a passed one belongs to the caller
        self._owns_transport = transport is None
        self.transport = transport or HttpTransport(timeout=timeout)
        logger.info(f"Initialized translator with service: {self.provider.name} ({self.provider.base_url})")

    @classmethod
    def from_config(cls, config: Optional[Dict[str, Any]] = None, transport=None) -> 'Translator':
        """
        Create a translator for the service selected in the configuration.

        Raises:
            TranslationError: If the configured service is unknown or has no key.
        """
        from stringsync.config import load_config, validate_config, get_provider_key

        if config is None:
            config = load_config()
        provider = validate_config(config)
        api_key = get_provider_key(config, provider)

        if provider == "microsoft":
            service = TranslationService.microsoft(api_key)
        elif provider == "deepl":
            service = TranslationService.deepl(api_key)
        else:
            service = TranslationService.openai(api_key, context=config.get("openai", {}).get("context", ""))

        return cls(service, transport=transport, timeout=config.get("timeout", 120))

    def close(self) -> None:
        """Close the HTTP client of a transport this translator created."""
        if self._owns_transport:
            self.transport.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()

    def translate(
        self,
        sources: Sequence[TranslationSource],
        source_language: Language,
        target_languages: Sequence[Language],
    ) -> List[Translation]:
        """
        Translate the given sources.

        Args:
            sources: Texts to translate with their keys and comments
            source_language: Language of the sources
            target_languages: Languages to translate to

        Returns:
            Translations aligned with ``sources``. For providers translating one
            target per request, all translations of the first target come first;
            for Microsoft, every target of the first source comes first.

        Raises:
            TranslationError: On the first failure. Translations gathered before
                the failure are discarded.
        """
        sources = list(sources)
        target_languages = list(target_languages)
        if not sources or not target_languages:
            return []

        batches = source_batches(
            sources,
            max_count=self.provider.max_texts_per_request,
            max_chars=self.provider.max_chars_per_request,
        )
        logger.debug(
            f"Translating {len(sources)} strings in {len(batches)} batch(es) "
            f"from {source_language.code} to {', '.join(t.code for t in target_languages)}"
        )

        if self.provider.supports_multiple_targets:
            target_groups = [target_languages]
        else:
            target_groups = [[target_language] for target_language in target_languages]

        all_translations = []
        for targets in target_groups:
            for batch_idx, batch in enumerate(batches):
                logger.debug(f"Batch {batch_idx + 1}/{len(batches)}: {len(batch)} strings")
                all_translations.extend(self._translate_batch(batch, source_language, targets))

        expected = len(sources) * len(target_languages)
        if len(all_translations) != expected:
            raise TranslationError(
                f"Could not fetch translation(s): expected {expected}, got {len(all_translations)}",
                code=INTERNAL_INCONSISTENCY,
                details={"provider": self.provider.name},
            )

        logger.info(f"Successfully translated {len(sources)} strings into {len(target_languages)} language(s)")
        return all_translations

    def _translate_batch(
        self,
        batch: List[TranslationSource],
        source_language: Language,
        target_languages: List[Language],
    ) -> List[Translation]:
        provider = self.provider
        try:
            request = provider.build_request(batch, source_language, target_languages)
            response = self.transport.send(request, provider.base_url)
            raise_for_status(response, provider.name, provider.parse_error)
            return provider.parse_response(response.content, batch, target_languages)
        except TranslationError as e:
            e.details.setdefault("provider", provider.name)
            logger.error(f"{provider.name} translation failed: {e}")
            raise
