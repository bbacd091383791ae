"""Unit tests for the OpenAI-compatible chat adapter."""

import json

import httpx
import pytest
from multitranslate.core.exceptions import (
    ProviderRejectedError,
    ResponseMalformedError,
    TransportError,
)
from multitranslate.core.models import ProviderConfig
from multitranslate.core.providers.chat import ChatCompletionProvider, build_system_prompt

HOST = "api.openai.com"


@pytest.fixture
def provider(backend):
    return ChatCompletionProvider("OpenAI", client_factory=backend.client_factory)


@pytest.fixture
def config():
    return ProviderConfig(api_key="sk-test")


class TestChatTranslate:
    """Test non-streaming chat completions."""

    @pytest.mark.asyncio
    async def test_success(self, backend, provider, config):
        """The message content is returned, stripped."""
        backend.json(HOST, {"choices": [{"message": {"content": "  Bonjour\n"}}]})

        result = await provider.translate("Hello", "en", "fr", config)

        assert result.name == "OpenAI"
        assert result.text == "Bonjour"

    @pytest.mark.asyncio
    async def test_request_shape(self, backend, provider, config):
        """Bearer auth, default model and the fixed system instruction are sent."""
        backend.json(HOST, {"choices": [{"message": {"content": "Bonjour"}}]})

        await provider.translate("Hello", "en", "fr", config)

        sent = backend.requests_to(HOST)[0]
        body = json.loads(sent.content)
        assert sent.method == "POST"
        assert sent.headers["Authorization"] == "Bearer sk-test"
        assert body["model"] == "gpt-3.5-turbo"
        assert body["messages"][0] == {"role": "system", "content": build_system_prompt("fr")}
        assert body["messages"][1] == {"role": "user", "content": "Hello"}
        assert "stream" not in body

    @pytest.mark.asyncio
    async def test_custom_endpoint_and_model(self, backend, provider):
        """apiUrl and model from the config are honoured."""
        backend.json("llm.local", {"choices": [{"message": {"content": "Hola"}}]})
        config = ProviderConfig(api_key="k", api_url="http://llm.local/v1/chat/completions", model="local-7b")

        result = await provider.translate("Hello", "en", "es", config)

        assert result.text == "Hola"
        assert json.loads(backend.requests_to("llm.local")[0].content)["model"] == "local-7b"

    @pytest.mark.asyncio
    async def test_non_2xx_keeps_body(self, backend, provider, config):
        """A rejected call carries the response body as detail."""
        backend.route(HOST, lambda request: httpx.Response(429, text="rate limited"))

        with pytest.raises(ProviderRejectedError) as exc_info:
            await provider.translate("Hello", "en", "fr", config)

        assert str(exc_info.value) == "OpenAI API error: rate limited"
        assert exc_info.value.status_code == 429

    @pytest.mark.asyncio
    async def test_empty_error_body_uses_status(self, backend, provider, config):
        """Without a body the status code is reported."""
        backend.route(HOST, lambda request: httpx.Response(503))

        with pytest.raises(ProviderRejectedError, match="HTTP 503"):
            await provider.translate("Hello", "en", "fr", config)

    @pytest.mark.asyncio
    async def test_transport_failure(self, backend, provider, config):
        """Connection errors become TransportError."""
        def refuse(request):
            raise httpx.ConnectError("connection refused", request=request)
        backend.route(HOST, refuse)

        with pytest.raises(TransportError, match="OpenAI API request failed: connection refused"):
            await provider.translate("Hello", "en", "fr", config)

    @pytest.mark.asyncio
    async def test_invalid_url_is_transport_failure(self, backend, provider, config):
        """An unusable endpoint URL becomes TransportError."""
        def invalid(request):
            raise httpx.InvalidURL("Invalid port: 'x'")
        backend.route(HOST, invalid)

        with pytest.raises(TransportError, match="OpenAI API request failed: Invalid port"):
            await provider.translate("Hello", "en", "fr", config)

    @pytest.mark.asyncio
    async def test_missing_content(self, backend, provider, config):
        """A 2xx answer without content is malformed."""
        backend.json(HOST, {"choices": []})

        with pytest.raises(ResponseMalformedError, match="No translation in response"):
            await provider.translate("Hello", "en", "fr", config)

    @pytest.mark.asyncio
    async def test_invalid_json(self, backend, provider, config):
        """An unparsable 2xx body is malformed."""
        backend.route(HOST, lambda request: httpx.Response(200, text="<html>"))

        with pytest.raises(ResponseMalformedError):
            await provider.translate("Hello", "en", "fr", config)


class TestChatStream:
    """Test streaming chat completions."""

    @pytest.mark.asyncio
    async def test_deltas_in_order(self, backend, provider, config):
        """Fragments are forwarded in arrival order and concatenated."""
        backend.sse(HOST, [
            json.dumps({"choices": [{"delta": {"role": "assistant"}}]}),
            json.dumps({"choices": [{"delta": {"content": "Bon"}}]}),
            "{broken",
            json.dumps({"choices": [{"delta": {"content": "jour"}}]}),
            "[DONE]",
            json.dumps({"choices": [{"delta": {"content": "ignored"}}]}),
        ])
        deltas = []

        async def on_delta(fragment):
            deltas.append(fragment)

        text = await provider.translate_stream("Hello", "en", "fr", config, on_delta)

        assert deltas == ["Bon", "jour"]
        assert text == "Bonjour"
        assert json.loads(backend.requests_to(HOST)[0].content)["stream"] is True

    @pytest.mark.asyncio
    async def test_whole_message_chunks(self, backend, provider, config):
        """Servers sending full messages instead of deltas are understood."""
        backend.sse(HOST, [json.dumps({"choices": [{"message": {"content": "Bonjour"}}]}), "[DONE]"])
        deltas = []

        async def on_delta(fragment):
            deltas.append(fragment)

        assert await provider.translate_stream("Hello", "en", "fr", config, on_delta) == "Bonjour"
        assert deltas == ["Bonjour"]

    @pytest.mark.asyncio
    async def test_empty_stream(self, backend, provider, config):
        """A stream without text is a failure, not an empty success."""
        backend.sse(HOST, ["[DONE]"])

        async def on_delta(fragment):
            raise AssertionError("no delta expected")

        with pytest.raises(ResponseMalformedError):
            await provider.translate_stream("Hello", "en", "fr", config, on_delta)

    @pytest.mark.asyncio
    async def test_whitespace_only_stream(self, backend, provider, config):
        """Blank fragments alone are malformed, as in the one-shot call."""
        backend.sse(HOST, [
            json.dumps({"choices": [{"delta": {"content": " "}}]}),
            json.dumps({"choices": [{"delta": {"content": "\n"}}]}),
            "[DONE]",
        ])

        async def on_delta(fragment):
            pass

        with pytest.raises(ResponseMalformedError):
            await provider.translate_stream("Hello", "en", "fr", config, on_delta)

    @pytest.mark.asyncio
    async def test_stream_error_is_transport_failure(self, backend, provider, config):
        """httpx stream-state errors surface as TransportError."""
        def closed(request):
            raise httpx.StreamClosed()
        backend.route(HOST, closed)

        async def on_delta(fragment):
            pass

        with pytest.raises(TransportError, match="OpenAI stream error"):
            await provider.translate_stream("Hello", "en", "fr", config, on_delta)
