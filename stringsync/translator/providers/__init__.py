"""Translation provider registry."""

from stringsync.translator.providers.base import TranslationProvider
from stringsync.translator.providers.deepl import DeepLProvider
from stringsync.translator.providers.microsoft import MicrosoftProvider
from stringsync.translator.providers.openai import OpenAIProvider

PROVIDERS = {
    "microsoft": MicrosoftProvider,
    "deepl": DeepLProvider,
    "openai": OpenAIProvider,
}

__all__ = [
    "PROVIDERS",
    "TranslationProvider",
    "MicrosoftProvider",
    "DeepLProvider",
    "OpenAIProvider",
]
