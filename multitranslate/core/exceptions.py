"""
Custom exceptions for translation dispatch.

Every provider-level failure is a TranslationError subclass. Adapters raise them,
the dispatcher turns them into the `error` string of a result or stream event, so
one provider's failure never reaches its siblings.
"""
from typing import List, Optional


class TranslationError(Exception):
    """Base exception for all provider-level translation errors.

    Attributes:
        service: Display name of the provider that failed, when known
    """
    def __init__(self, message: str, service: Optional[str] = None):
        super().__init__(message)
        self.service = service


class ConfigurationMissingError(TranslationError):
    """Raised when a required credential is absent; no request was sent."""
    pass


class TransportError(TranslationError):
    """Raised when the provider could not be reached (connection, DNS, timeout)."""
    pass


class ProviderRejectedError(TranslationError):
    """Raised when the provider answered with a non-2xx status.

    Attributes:
        status_code: HTTP status returned by the provider
        body: Response body, kept as the error detail
    """
    def __init__(self, message: str, status_code: int = None, body: str = "",
                 service: Optional[str] = None):
        super().__init__(message, service=service)
        self.status_code = status_code
        self.body = body


class ResponseMalformedError(TranslationError):
    """Raised when a successful response lacks the translated text."""
    pass


class UnsupportedProviderError(TranslationError):
    """Raised when a requested name matches no registered provider."""
    pass


class TaskFailureError(TranslationError):
    """Raised when a provider task crashed, was cancelled or timed out."""
    pass


class AllProvidersFailedError(Exception):
    """Raised by the aggregate dispatch when no provider produced a translation.

    Attributes:
        failures: (service, error) pairs for every provider that was tried
    """
    def __init__(self, failures: List[tuple] = None):
        self.failures = failures or []
        if self.failures:
            detail = "; ".join(f"{name}: {error}" for name, error in self.failures)
            message = f"All translation services failed: {detail}"
        else:
            message = "No translation results"
        super().__init__(message)


class SinkDeliveryError(Exception):
    """Raised by an event sink that could not accept an event (full or closed)."""
    pass


class InvalidRequestError(ValueError):
    """Raised when a caller payload cannot be turned into a TranslationRequest."""
    pass
