"""Unit tests for the Baidu ERNIE adapter."""

import json

import httpx
import pytest
from multitranslate.core.exceptions import ResponseMalformedError
from multitranslate.core.models import ProviderConfig
from multitranslate.core.providers.ernie import ErnieProvider, model_endpoint

HOST = "aip.baidubce.com"


def ernie_backend(chat_response):
    def handler(request):
        if request.url.path == "/oauth/2.0/token":
            return httpx.Response(200, json={"access_token": "tok-1", "expires_in": 2592000})
        return chat_response(request)
    return handler


@pytest.fixture
def provider(backend):
    return ErnieProvider("Ernie", client_factory=backend.client_factory)


@pytest.fixture
def config():
    return ProviderConfig(api_key="ak", secret_key="sk", model="ernie-3.5-8k")


class TestErnieProvider:
    """Test token exchange and chat calls."""

    def test_model_endpoints(self):
        """Known models map to their paths; unknown ones use completions_pro."""
        assert model_endpoint("ernie-4.0-8k") == "completions_pro"
        assert model_endpoint("ernie-speed-8k") == "ernie_speed"
        assert model_endpoint("ernie-lite-8k") == "ernie_lite"
        assert model_endpoint("something-else") == "completions_pro"

    @pytest.mark.asyncio
    async def test_translate(self, backend, provider, config):
        """The token is exchanged, then the model endpoint is called with it."""
        backend.route(HOST, ernie_backend(lambda request: httpx.Response(200, json={"result": " 你好 "})))

        result = await provider.translate("Hello", "en", "zh", config)

        token_call, chat_call = backend.requests_to(HOST)
        assert result.text == "你好"
        assert token_call.url.params["client_id"] == "ak"
        assert token_call.url.params["client_secret"] == "sk"
        assert chat_call.url.path.endswith("/chat/completions")
        assert chat_call.url.params["access_token"] == "tok-1"
        assert "zh" in json.loads(chat_call.content)["messages"][0]["content"]

    @pytest.mark.asyncio
    async def test_missing_token(self, backend, provider, config):
        """A token response without access_token is malformed."""
        backend.json(HOST, {"error": "invalid_client"})

        with pytest.raises(ResponseMalformedError, match="No access token"):
            await provider.translate("Hello", "en", "zh", config)

    @pytest.mark.asyncio
    async def test_stream_until_is_end(self, backend, provider, config):
        """Stream fragments come from `result` and stop at is_end."""
        body = "".join(f"data: {json.dumps(chunk)}\n\n" for chunk in [
            {"result": "你", "is_end": False},
            {"result": "好", "is_end": True},
            {"result": "!", "is_end": False},
        ])
        backend.route(HOST, ernie_backend(lambda request: httpx.Response(200, text=body)))
        deltas = []

        async def on_delta(fragment):
            deltas.append(fragment)

        text = await provider.translate_stream("Hello", "en", "zh", config, on_delta)

        assert text == "你好"
        assert deltas == ["你", "好"]
