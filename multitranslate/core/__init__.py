"""
Core dispatch modules
"""
from .models import (
    TranslationRequest,
    ProviderConfig,
    TranslationResult,
    TranslationResponse,
    StreamEvent,
)
from .exceptions import TranslationError, AllProvidersFailedError, InvalidRequestError
from .registry import ProviderRegistry, ProviderSpec, ProviderKind, build_default_registry
from .resolver import ConfigurationResolver, Resolution
from .events import EventSink, QueueEventSink, CallbackEventSink
from .dispatcher import TranslationDispatcher

__all__ = [
    'TranslationRequest',
    'ProviderConfig',
    'TranslationResult',
    'TranslationResponse',
    'StreamEvent',
    'TranslationError',
    'AllProvidersFailedError',
    'InvalidRequestError',
    'ProviderRegistry',
    'ProviderSpec',
    'ProviderKind',
    'build_default_registry',
    'ConfigurationResolver',
    'Resolution',
    'EventSink',
    'QueueEventSink',
    'CallbackEventSink',
    'TranslationDispatcher',
]
