"""
Translator Exceptions

This module contains the exception classes and error codes for the translator.
Separated to avoid circular imports between service.py, transport.py and the providers.

Every failure the translator surfaces is a TranslationError whose ``code`` is one
of the constants below. RequestEncodingError is the one exception outside that
taxonomy: it signals a request body that could not be serialized, which is a
programming error rather than a provider or network failure.
"""

from typing import Any, Dict, Optional

# Transport / HTTP status errors
NO_RESPONSE = "no_response"
EMPTY_BODY = "empty_body"
DECODE_FAILED = "decode_failed"
CLIENT_ERROR = "client_error"
SERVER_ERROR = "server_error"
UNEXPECTED_STATUS = "unexpected_status"
UNEXPECTED_RESPONSE = "unexpected_response"
EMPTY_MOCKED_RESPONSE = "empty_mocked_response"

# Translation assembly errors
INTERNAL_INCONSISTENCY = "internal_inconsistency"
ALIGNMENT_MISMATCH = "alignment_mismatch"
REFUSAL = "refusal"
UNEXPECTED_LANGUAGE = "unexpected_language"
UNSUPPORTED_LANGUAGE = "unsupported_language"

# Configuration errors
CONFIG_MISSING = "config_missing"


class TranslationError(Exception):
    """Translation service error with optional code and details."""

    def __init__(self, message: str, code: str = None, details: dict = None):
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details or {}

    @property
    def status_code(self) -> Optional[int]:
        """HTTP status code, when the error came from a provider response."""
        return self.details.get('status_code')

    def to_dict(self) -> Dict[str, Any]:
        return {
            'message': self.message,
            'code': self.code,
            'details': dict(self.details),
        }


class RequestEncodingError(RuntimeError):
    """A provider request body could not be serialized."""
