"""
stringsync - translate UI strings through Microsoft Translator, DeepL or OpenAI.
"""

from stringsync.language_codes import Language
from stringsync.translator import (
    TranslationError,
    Translation,
    TranslationSource,
    TranslationService,
    Translator,
)

__version__ = "0.1.0"

__all__ = [
    'Language',
    'TranslationError',
    'Translation',
    'TranslationSource',
    'TranslationService',
    'Translator',
]
