"""
Translation Data Classes

Contains the input and output records of a translation call.
"""

from dataclasses import dataclass
from typing import Optional

from stringsync.language_codes import Language


@dataclass(frozen=True)
class TranslationSource:
    """A string to translate."""
    key: str                        # Key in the strings file, not necessarily unique
    text: str                       # Text to be translated
    comment: Optional[str] = None   # Comment left for translators, used as context


@dataclass(frozen=True)
class Translation:
    """One translated string for one target language."""
    language: Language
    translated_text: str
    key: str
