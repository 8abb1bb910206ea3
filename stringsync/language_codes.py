"""
Language catalog and provider locale spellings.

Every supported language is a member of the Language enumeration whose value is
its canonical locale code (the spelling Microsoft Translator uses, e.g. 'de',
'zh-Hans', 'pt-PT'). Each translation provider spells languages differently:

- microsoft: canonical code ('de', 'zh-Hans')
- deepl: upper case codes, with regional variants required for some targets
  ('DE', 'EN-US', 'PT-BR', 'ZH-HANS')
- openai: English display name used inside the prompt ('German')

Looking a language up by a provider's spelling is a partial function:
unknown codes return None.
"""

from enum import Enum
from typing import Dict, Optional

PROVIDERS = ('microsoft', 'deepl', 'openai')


class Language(Enum):
    ARABIC = 'ar'
    BULGARIAN = 'bg'
    CATALAN = 'ca'
    CHINESE_SIMPLIFIED = 'zh-Hans'
    CHINESE_TRADITIONAL = 'zh-Hant'
    CROATIAN = 'hr'
    CZECH = 'cs'
    DANISH = 'da'
    DUTCH = 'nl'
    ENGLISH = 'en'
    ESTONIAN = 'et'
    FINNISH = 'fi'
    FRENCH = 'fr'
    GERMAN = 'de'
    GREEK = 'el'
    HEBREW = 'he'
    HINDI = 'hi'
    HUNGARIAN = 'hu'
    INDONESIAN = 'id'
    ITALIAN = 'it'
    JAPANESE = 'ja'
    KOREAN = 'ko'
    LATVIAN = 'lv'
    LITHUANIAN = 'lt'
    MALAY = 'ms'
    NORWEGIAN = 'nb'
    PERSIAN = 'fa'
    POLISH = 'pl'
    PORTUGUESE_BRAZIL = 'pt'
    PORTUGUESE_PORTUGAL = 'pt-PT'
    ROMANIAN = 'ro'
    RUSSIAN = 'ru'
    SLOVAK = 'sk'
    SLOVENIAN = 'sl'
    SPANISH = 'es'
    SWEDISH = 'sv'
    THAI = 'th'
    TURKISH = 'tr'
    UKRAINIAN = 'uk'
    VIETNAMESE = 'vi'

    @property
    def code(self) -> str:
        return self.value

    @property
    def display_name(self) -> str:
        return LANGUAGE_NAMES[self]

    @classmethod
    def from_code(cls, code: str) -> 'Language':
        """
        Get a language from its canonical code.

        Raises:
            ValueError: If the code is unknown

        Examples:
            >>> Language.from_code('de')
            <Language.GERMAN: 'de'>
        """
        language = cls.with_locale(code, 'microsoft')
        if language is None:
            raise ValueError(f"Unknown language code '{code}'")
        return language

    @classmethod
    def with_locale(cls, locale: str, provider: str = 'microsoft') -> Optional['Language']:
        """
        Find the language a provider means by the given locale spelling.

        Matching ignores case, so 'zh-hans' and 'ZH-HANS' both resolve.

        Args:
            locale: Locale code as spelled by the provider
            provider: One of 'microsoft', 'deepl', 'openai'

        Returns:
            Language or None if the provider spelling is unknown

        Examples:
            >>> Language.with_locale('zh-Hans')
            <Language.CHINESE_SIMPLIFIED: 'zh-Hans'>
            >>> Language.with_locale('EN-US', 'deepl')
            <Language.ENGLISH: 'en'>
            >>> Language.with_locale('xx') is None
            True
        """
        if not locale:
            return None
        return _reverse_lookup(provider).get(locale.lower())

    def provider_code(self, provider: str, target: bool = True) -> str:
        """
        Get the spelling of this language for a provider.

        Args:
            provider: One of 'microsoft', 'deepl', 'openai'
            target: DeepL spells some target languages with a region
                ('EN-US') but the matching source language without ('EN')

        Raises:
            TranslationError: If the provider does not support this language
        """
        if provider == 'microsoft':
            return self.value
        if provider == 'openai':
            return self.display_name
        if provider == 'deepl':
            from stringsync.translator.exceptions import TranslationError, UNSUPPORTED_LANGUAGE

            table = DEEPL_TARGET_CODES if target else DEEPL_SOURCE_CODES
            if self in table:
                return table[self]
            raise TranslationError(
                f"DeepL does not support {self.display_name} as a "
                f"{'target' if target else 'source'} language",
                code=UNSUPPORTED_LANGUAGE,
                details={'provider': provider, 'language': self.value},
            )
        raise ValueError(f"Unknown provider '{provider}'")


LANGUAGE_NAMES: Dict[Language, str] = {
    Language.ARABIC: 'Arabic',
    Language.BULGARIAN: 'Bulgarian',
    Language.CATALAN: 'Catalan',
    Language.CHINESE_SIMPLIFIED: 'Chinese (Simplified)',
    Language.CHINESE_TRADITIONAL: 'Chinese (Traditional)',
    Language.CROATIAN: 'Croatian',
    Language.CZECH: 'Czech',
    Language.DANISH: 'Danish',
    Language.DUTCH: 'Dutch',
    Language.ENGLISH: 'English',
    Language.ESTONIAN: 'Estonian',
    Language.FINNISH: 'Finnish',
    Language.FRENCH: 'French',
    Language.GERMAN: 'German',
    Language.GREEK: 'Greek',
    Language.HEBREW: 'Hebrew',
    Language.HINDI: 'Hindi',
    Language.HUNGARIAN: 'Hungarian',
    Language.INDONESIAN: 'Indonesian',
    Language.ITALIAN: 'Italian',
    Language.JAPANESE: 'Japanese',
    Language.KOREAN: 'Korean',
    Language.LATVIAN: 'Latvian',
    Language.LITHUANIAN: 'Lithuanian',
    Language.MALAY: 'Malay',
    Language.NORWEGIAN: 'Norwegian (Bokmal)',
    Language.PERSIAN: 'Persian',
    Language.POLISH: 'Polish',
    Language.PORTUGUESE_BRAZIL: 'Portuguese (Brazil)',
    Language.PORTUGUESE_PORTUGAL: 'Portuguese (Portugal)',
    Language.ROMANIAN: 'Romanian',
    Language.RUSSIAN: 'Russian',
    Language.SLOVAK: 'Slovak',
    Language.SLOVENIAN: 'Slovenian',
    Language.SPANISH: 'Spanish',
    Language.SWEDISH: 'Swedish',
    Language.THAI: 'Thai',
    Language.TURKISH: 'Turkish',
    Language.UKRAINIAN: 'Ukrainian',
    Language.VIETNAMESE: 'Vietnamese',
}

# DeepL: https://developers.deepl.com/docs/resources/supported-languages
# Lists as of 2025. Hebrew, Thai and Vietnamese are supported as targets only.
_DEEPL_UNSUPPORTED = {
    Language.CATALAN,
    Language.CROATIAN,
    Language.HINDI,
    Language.MALAY,
    Language.PERSIAN,
}
_DEEPL_TARGET_ONLY = {
    Language.HEBREW,
    Language.THAI,
    Language.VIETNAMESE,
}

DEEPL_SOURCE_CODES: Dict[Language, str] = {
    language: language.value.split('-')[0].upper()
    for language in Language
    if language not in _DEEPL_UNSUPPORTED and language not in _DEEPL_TARGET_ONLY
}

DEEPL_TARGET_CODES: Dict[Language, str] = {
    **DEEPL_SOURCE_CODES,
    **{language: language.value.upper() for language in _DEEPL_TARGET_ONLY},
    Language.ENGLISH: 'EN-US',
    Language.PORTUGUESE_BRAZIL: 'PT-BR',
    Language.PORTUGUESE_PORTUGAL: 'PT-PT',
    Language.CHINESE_SIMPLIFIED: 'ZH-HANS',
    Language.CHINESE_TRADITIONAL: 'ZH-HANT',
}

_reverse_cache: Dict[str, Dict[str, Language]] = {}


def _reverse_lookup(provider: str) -> Dict[str, Language]:
    if provider in _reverse_cache:
        return _reverse_cache[provider]

    if provider == 'microsoft':
        table = {language.value.lower(): language for language in Language}
    elif provider == 'openai':
        table = {name.lower(): language for language, name in LANGUAGE_NAMES.items()}
    elif provider == 'deepl':
        # Target spellings win over the ambiguous base source spellings ('PT', 'ZH')
        table = {code.lower(): language for language, code in DEEPL_SOURCE_CODES.items()}
        table.update({code.lower(): language for language, code in DEEPL_TARGET_CODES.items()})
        table['en-gb'] = Language.ENGLISH
        table['en'] = Language.ENGLISH
        table['pt'] = Language.PORTUGUESE_BRAZIL
        table['zh'] = Language.CHINESE_SIMPLIFIED
    else:
        raise ValueError(f"Unknown provider '{provider}'")

    _reverse_cache[provider] = table
    return table


def is_valid_language_code(code: str) -> bool:
    """
    Check if a canonical language code is supported.

    Examples:
        >>> is_valid_language_code('de')
        True
        >>> is_valid_language_code('invalid')
        False
    """
    return Language.with_locale(code) is not None


def get_language_name(code: str) -> Optional[str]:
    """
    Get the full language name from a canonical code.

    Examples:
        >>> get_language_name('de')
        'German'
        >>> get_language_name('zh-Hans')
        'Chinese (Simplified)'
    """
    language = Language.with_locale(code)
    return language.display_name if language else None


def extract_base_language(code: str) -> str:
    """
    Extract base language from code (remove region or script).

    Examples:
        >>> extract_base_language('zh-Hans')
        'zh'
        >>> extract_base_language('fr')
        'fr'
    """
    return code.split('-')[0]


def get_all_language_codes() -> Dict[str, str]:
    """
    Get all supported language codes.

    Returns:
        Dict mapping canonical code to language name
    """
    return {language.value: name for language, name in LANGUAGE_NAMES.items()}
