import copy
import json
import os
from pathlib import Path
from typing import Any, Dict, Optional, Union

from stringsync.logger import get_logger
from stringsync.translator.exceptions import TranslationError, CONFIG_MISSING

logger = get_logger(__name__)

# Provider configuration constants
BUILTIN_PROVIDERS = ["microsoft", "deepl", "openai"]

BUILTIN_PROVIDER_DISPLAY_NAMES = {
    "microsoft": "Microsoft",
    "deepl": "DeepL",
    "openai": "OpenAI",
}

# Config section key holding each provider's credential
PROVIDER_KEY_FIELDS = {
    "microsoft": "subscription_key",
    "deepl": "api_key",
    "openai": "api_key",
}

# Environment variables override keys stored in the config file
ENV_KEY_OVERRIDES = {
    "microsoft": "STRINGSYNC_MICROSOFT_KEY",
    "deepl": "STRINGSYNC_DEEPL_KEY",
    "openai": "STRINGSYNC_OPENAI_KEY",
}

PLACEHOLDER_KEY = "YOUR_API_KEY_HERE"

# Get base directory (project root)
BASE_DIR = Path(__file__).parent.parent
CONFIG_DIR = BASE_DIR / "config"
CONFIG_FILE = CONFIG_DIR / "config.json"

# Default configuration template
DEFAULT_CONFIG = {
    "translation_service": "openai",
    "microsoft": {
        "subscription_key": PLACEHOLDER_KEY,
    },
    "deepl": {
        "api_key": PLACEHOLDER_KEY,
    },
    "openai": {
        "api_key": PLACEHOLDER_KEY,
        "context": "",
    },
    "timeout": 120,
    "log_mode": "info",
}


def _merge(base: Dict[str, Any], overrides: Dict[str, Any]) -> Dict[str, Any]:
    merged = copy.deepcopy(base)
    for key, value in overrides.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def _apply_env_overrides(config: Dict[str, Any]) -> Dict[str, Any]:
    for provider, env_name in ENV_KEY_OVERRIDES.items():
        value = os.environ.get(env_name)
        if value:
            config.setdefault(provider, {})[PROVIDER_KEY_FIELDS[provider]] = value
            logger.debug(f"Using {provider} key from ${env_name}")
    return config


def load_config(path: Optional[Union[str, Path]] = None) -> Dict[str, Any]:
    """
    Load the configuration.

    The JSON file is merged over DEFAULT_CONFIG, then credentials from the
    environment are applied. A missing file yields the defaults.

    Args:
        path: Config file, defaults to config/config.json in the project root
    """
    config_file = Path(path) if path else CONFIG_FILE

    if not config_file.exists():
        logger.debug(f"No config file at {config_file}, using defaults")
        return _apply_env_overrides(copy.deepcopy(DEFAULT_CONFIG))

    try:
        with open(config_file, 'r', encoding='utf-8') as f:
            stored = json.load(f)
    except json.JSONDecodeError as e:
        logger.error(f"Failed to parse config file {config_file}: {e}")
        logger.warning("Using default configuration")
        return _apply_env_overrides(copy.deepcopy(DEFAULT_CONFIG))

    if not isinstance(stored, dict):
        logger.warning(f"Config file {config_file} does not contain an object, using defaults")
        stored = {}

    logger.debug(f"Configuration loaded from {config_file}")
    return _apply_env_overrides(_merge(DEFAULT_CONFIG, stored))


def save_config(config: Dict[str, Any], path: Optional[Union[str, Path]] = None):
    """Save the configuration as JSON."""
    config_file = Path(path) if path else CONFIG_FILE
    config_file.parent.mkdir(parents=True, exist_ok=True)
    with open(config_file, 'w', encoding='utf-8') as f:
        json.dump(config, f, indent=4, ensure_ascii=False)
    logger.info(f"Configuration saved to {config_file}")


def get_provider_key(config: Dict[str, Any], provider: str) -> str:
    return config.get(provider, {}).get(PROVIDER_KEY_FIELDS[provider], '')


def validate_config(config: Dict[str, Any], provider_override: Optional[str] = None) -> str:
    """
    Validate that the selected translation service is properly set up.

    Args:
        config: Loaded configuration
        provider_override: Optional provider to validate instead of the configured one

    Returns:
        Name of the validated provider

    Raises:
        TranslationError: If configuration is invalid or missing, with code and details.
    """
    provider = provider_override or config.get('translation_service', '')

    if provider not in BUILTIN_PROVIDERS:
        raise TranslationError(
            f"Unknown translation service '{provider}'. Expected one of: {', '.join(BUILTIN_PROVIDERS)}",
            code=CONFIG_MISSING,
            details={"provider": provider, "missing_field": "translation_service"}
        )

    provider_config = config.get(provider)
    if not isinstance(provider_config, dict):
        raise TranslationError(
            f"{BUILTIN_PROVIDER_DISPLAY_NAMES[provider]} configuration not found",
            code=CONFIG_MISSING,
            details={"provider": provider}
        )

    key_field = PROVIDER_KEY_FIELDS[provider]
    api_key = provider_config.get(key_field, '')
    if not api_key or api_key == PLACEHOLDER_KEY:
        raise TranslationError(
            f"{BUILTIN_PROVIDER_DISPLAY_NAMES[provider]} {key_field} not configured. "
            f"Set it in {CONFIG_FILE.name} or ${ENV_KEY_OVERRIDES[provider]}.",
            code=CONFIG_MISSING,
            details={"provider": provider, "missing_field": key_field}
        )

    return provider
