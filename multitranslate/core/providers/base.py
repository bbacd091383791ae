"""
Base classes for translation provider adapters.

This module defines the abstract base class every adapter implements, the HTTP
client factory adapters use, and the helpers that turn httpx outcomes into the
three adapter-level failure causes (transport, rejected, malformed).
"""

from abc import ABC, abstractmethod
import json
from typing import Any, AsyncIterator, Awaitable, Callable, Optional

import httpx

from multitranslate.config import REQUEST_TIMEOUT, STREAM_REQUEST_TIMEOUT
from multitranslate.utils.unified_logger import get_logger, LogType
from ..exceptions import (
    ProviderRejectedError,
    ResponseMalformedError,
    TransportError,
)
from ..models import ProviderConfig, TranslationResult

ClientFactory = Callable[[float], httpx.AsyncClient]
DeltaCallback = Callable[[str], Awaitable[None]]

# Maximum number of body characters kept in a rejection message
ERROR_BODY_LIMIT = 500


def default_client_factory(timeout: float) -> httpx.AsyncClient:
    """Create an HTTP client with connection pooling and the given timeout."""
    return httpx.AsyncClient(
        limits=httpx.Limits(max_keepalive_connections=5, max_connections=10),
        timeout=httpx.Timeout(timeout),
    )


class TranslationProvider(ABC):
    """Abstract base class for translation provider adapters"""

    # Prefix for error messages, e.g. "OpenAI API request failed: ..."
    api_label: Optional[str] = None
    supports_streaming: bool = False
    default_timeout: float = REQUEST_TIMEOUT

    def __init__(self, display_name: str, client_factory: Optional[ClientFactory] = None):
        """
        Initialize the adapter.

        Args:
            display_name: Name reported in results (e.g. "Zhipu")
            client_factory: Builds the httpx client for one call; tests inject
                a factory backed by httpx.MockTransport
        """
        self.display_name = display_name
        self._client_factory = client_factory or default_client_factory
        self.logger = get_logger()

    @property
    def label(self) -> str:
        return self.api_label or self.display_name

    def _timeout(self, config: ProviderConfig, streaming: bool = False) -> float:
        if config.timeout:
            return config.timeout
        return STREAM_REQUEST_TIMEOUT if streaming else self.default_timeout

    def _open_client(self, timeout: float) -> httpx.AsyncClient:
        return self._client_factory(timeout)

    @abstractmethod
    async def translate(self, text: str, source_lang: str, target_lang: str,
                        config: ProviderConfig) -> TranslationResult:
        """
        Translate text in one request.

        Args:
            text: Source text
            source_lang: Source language code ("auto" allowed)
            target_lang: Target language code
            config: Resolved provider configuration

        Returns:
            TranslationResult carrying this adapter's display name and the text

        Raises:
            TranslationError: transport, rejection or malformed-response failure
        """
        pass

    async def translate_stream(self, text: str, source_lang: str, target_lang: str,
                               config: ProviderConfig, on_delta: DeltaCallback) -> str:
        """
        Translate text incrementally.

        `on_delta` is awaited once per non-empty fragment, in arrival order, before
        this coroutine returns. The return value is the concatenation of every
        fragment delivered.
        """
        raise NotImplementedError(f"{self.display_name} does not support streaming")

    # === HTTP helpers ===

    async def _request(self, client: httpx.AsyncClient, method: str, url: str,
                       **kwargs: Any) -> httpx.Response:
        """Send one request and return a 2xx response, raising typed errors otherwise."""
        self.logger.debug(f"{method} {url}", LogType.PROVIDER_REQUEST,
                          {'service': self.display_name})
        try:
            response = await client.request(method, url, **kwargs)
        except (httpx.HTTPError, httpx.InvalidURL, httpx.StreamError) as e:
            raise TransportError(f"{self.label} API request failed: {e}",
                                 service=self.display_name) from e
        if not response.is_success:
            self._reject(response.status_code, response.text)
        return response

    def _reject(self, status_code: int, body: str) -> None:
        body = (body or "")[:ERROR_BODY_LIMIT]
        raise ProviderRejectedError(
            f"{self.label} API error: {body or f'HTTP {status_code}'}",
            status_code=status_code,
            body=body,
            service=self.display_name,
        )

    def _parse_json(self, response: httpx.Response) -> Any:
        try:
            return response.json()
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise ResponseMalformedError(f"Failed to parse {self.label} response: {e}",
                                         service=self.display_name) from e

    def _missing_translation(self, message: str = "No translation in response") -> ResponseMalformedError:
        return ResponseMalformedError(message, service=self.display_name)

    async def _stream_data_lines(self, client: httpx.AsyncClient, method: str, url: str,
                                 **kwargs: Any) -> AsyncIterator[str]:
        """
        Open a streaming request and yield the payload of every `data:` line.

        Blank lines, comments and other SSE fields are skipped. Transport errors
        while reading become TransportError; a non-2xx status becomes
        ProviderRejectedError with the body read in full.
        """
        self.logger.debug(f"{method} {url} (stream)", LogType.PROVIDER_REQUEST,
                          {'service': self.display_name})
        try:
            async with client.stream(method, url, **kwargs) as response:
                if not response.is_success:
                    await response.aread()
                    self._reject(response.status_code, response.text)
                async for line in response.aiter_lines():
                    line = line.strip()
                    if not line.startswith("data:"):
                        continue
                    yield line[len("data:"):].strip()
        except (httpx.HTTPError, httpx.InvalidURL, httpx.StreamError) as e:
            raise TransportError(f"{self.label} stream error: {e}",
                                 service=self.display_name) from e

    async def _collect_stream(self, client: httpx.AsyncClient, method: str, url: str,
                              on_delta: DeltaCallback, **kwargs: Any) -> str:
        """
        Drive a `data:`-line stream, forwarding fragments to `on_delta`.

        Stops on the `[DONE]` sentinel, on a payload `_is_stream_end` accepts, or
        when the server closes the stream. Lines that are not valid JSON are
        skipped.

        Returns:
            The concatenation of every fragment forwarded

        Raises:
            ResponseMalformedError: if the stream carried only blank text or none
        """
        fragments = []
        lines = self._stream_data_lines(client, method, url, **kwargs)
        try:
            async for data in lines:
                if data == "[DONE]":
                    break
                try:
                    payload = json.loads(data)
                except json.JSONDecodeError:
                    continue
                fragment = self._stream_fragment(payload)
                if fragment:
                    fragments.append(fragment)
                    await on_delta(fragment)
                if self._is_stream_end(payload):
                    break
        finally:
            await lines.aclose()

        full_text = "".join(fragments)
        if not full_text.strip():
            raise self._missing_translation()
        return full_text

    def _stream_fragment(self, payload: Any) -> Optional[str]:
        """Extract the text fragment carried by one stream payload."""
        return None

    def _is_stream_end(self, payload: Any) -> bool:
        """Provider-specific end-of-stream marker carried inside a payload."""
        return False


def dig(data: Any, *path: Any) -> Any:
    """
    Walk nested dicts/lists, returning None as soon as a step is missing.

    Example:
        >>> dig({"choices": [{"message": {"content": "Hi"}}]}, "choices", 0, "message", "content")
        'Hi'
    """
    current = data
    for step in path:
        if isinstance(step, int):
            if not isinstance(current, list) or len(current) <= step:
                return None
        elif not isinstance(current, dict):
            return None
        current = current[step] if isinstance(step, int) else current.get(step)
        if current is None:
            return None
    return current
