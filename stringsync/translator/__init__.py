"""
Translator Module

This module provides the multi-provider translation service and related utilities.
"""

from stringsync.translator.exceptions import TranslationError, RequestEncodingError
from stringsync.translator.models import Translation, TranslationSource
from stringsync.translator.batching import text_batches, source_batches
from stringsync.translator.transport import (
    HttpTransport,
    ReplayTransport,
    ProviderRequest,
    TransportResponse,
)
from stringsync.translator.service import TranslationService, Translator

__all__ = [
    'TranslationError',
    'RequestEncodingError',
    'Translation',
    'TranslationSource',
    'text_batches',
    'source_batches',
    'HttpTransport',
    'ReplayTransport',
    'ProviderRequest',
    'TransportResponse',
    'TranslationService',
    'Translator',
]
