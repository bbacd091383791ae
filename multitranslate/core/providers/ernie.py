"""
Baidu ERNIE adapter.

ERNIE needs an OAuth access token obtained from the API key / secret key pair
before every chat call; the chat endpoint path depends on the model.
"""

from typing import Any, Dict, Optional

import httpx

from ..models import ProviderConfig, TranslationResult
from .base import TranslationProvider, DeltaCallback, dig

ERNIE_TOKEN_URL = "https://aip.baidubce.com/oauth/2.0/token"
ERNIE_CHAT_URL = "https://aip.baidubce.com/rpc/2.0/ai_custom/v1/wenxinworkshop/chat"
ERNIE_DEFAULT_MODEL = "ernie-4.0-8k"

MODEL_ENDPOINTS = {
    "ernie-4.0-8k": "completions_pro",
    "ernie-3.5-8k": "completions",
    "ernie-speed-8k": "ernie_speed",
    "ernie-lite-8k": "ernie_lite",
}


def model_endpoint(model: str) -> str:
    """Chat endpoint path for a model name; unknown models use completions_pro."""
    return MODEL_ENDPOINTS.get(model, "completions_pro")


class ErnieProvider(TranslationProvider):
    """Provider for Baidu ERNIE chat models."""

    supports_streaming = True

    async def _access_token(self, client: httpx.AsyncClient, config: ProviderConfig) -> str:
        response = await self._request(
            client, "GET", config.option("tokenUrl", ERNIE_TOKEN_URL),
            params={
                "grant_type": "client_credentials",
                "client_id": config.api_key,
                "client_secret": config.secret_key,
            },
        )
        token = dig(self._parse_json(response), "access_token")
        if not isinstance(token, str) or not token:
            raise self._missing_translation("No access token in Ernie response")
        return token

    def _chat_url(self, config: ProviderConfig) -> str:
        base = (config.api_url or ERNIE_CHAT_URL).rstrip("/")
        return f"{base}/{model_endpoint(config.model or ERNIE_DEFAULT_MODEL)}"

    def _payload(self, text: str, target_lang: str, stream: bool) -> Dict[str, Any]:
        # ERNIE has no system role, so the instruction travels with the text
        prompt = (f"Translate the following text to {target_lang}. "
                  f"Output ONLY the translated text, no explanations:\n\n{text}")
        payload = {"messages": [{"role": "user", "content": prompt}]}
        if stream:
            payload["stream"] = True
        return payload

    async def translate(self, text: str, source_lang: str, target_lang: str,
                        config: ProviderConfig) -> TranslationResult:
        async with self._open_client(self._timeout(config)) as client:
            token = await self._access_token(client, config)
            response = await self._request(
                client, "POST", self._chat_url(config),
                params={"access_token": token},
                json=self._payload(text, target_lang, stream=False),
            )
            data = self._parse_json(response)

        result = dig(data, "result")
        if not isinstance(result, str) or not result.strip():
            raise self._missing_translation("No translation in Ernie response")
        return TranslationResult(name=self.display_name, text=result.strip())

    async def translate_stream(self, text: str, source_lang: str, target_lang: str,
                               config: ProviderConfig, on_delta: DeltaCallback) -> str:
        async with self._open_client(self._timeout(config, streaming=True)) as client:
            token = await self._access_token(client, config)
            return await self._collect_stream(
                client, "POST", self._chat_url(config), on_delta,
                params={"access_token": token},
                json=self._payload(text, target_lang, stream=True),
            )

    def _stream_fragment(self, payload: Any) -> Optional[str]:
        fragment = dig(payload, "result")
        return fragment if isinstance(fragment, str) else None

    def _is_stream_end(self, payload: Any) -> bool:
        return bool(dig(payload, "is_end"))
