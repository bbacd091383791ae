"""
OpenAI-compatible chat completion adapter.

One adapter class serves every provider that speaks the OpenAI
`/chat/completions` shape (OpenAI, Zhipu, Groq, Gemini's compatibility
endpoint); the registry supplies the endpoint, the default model and the
display name for each.
"""

from typing import Any, Dict, Optional

from multitranslate.config import CHAT_MAX_TOKENS, SYSTEM_PROMPT_TEMPLATE
from ..models import ProviderConfig, TranslationResult
from .base import TranslationProvider, DeltaCallback, dig

OPENAI_API_URL = "https://api.openai.com/v1/chat/completions"
OPENAI_DEFAULT_MODEL = "gpt-3.5-turbo"


def build_system_prompt(target_lang: str) -> str:
    """Fixed instruction: translate to `target_lang`, output only the translation."""
    return SYSTEM_PROMPT_TEMPLATE.format(target_lang=target_lang)


class ChatCompletionProvider(TranslationProvider):
    """OpenAI-compatible chat completion provider (OpenAI, Zhipu, Groq, Gemini)"""

    supports_streaming = True

    def _endpoint(self, config: ProviderConfig) -> str:
        return config.api_url or OPENAI_API_URL

    def _headers(self, config: ProviderConfig) -> Dict[str, str]:
        return {
            "Authorization": f"Bearer {config.api_key}",
            "Content-Type": "application/json",
        }

    def _payload(self, text: str, target_lang: str, config: ProviderConfig,
                 stream: bool) -> Dict[str, Any]:
        payload = {
            "model": config.model or OPENAI_DEFAULT_MODEL,
            "messages": [
                {"role": "system", "content": build_system_prompt(target_lang)},
                {"role": "user", "content": text},
            ],
            "max_tokens": CHAT_MAX_TOKENS,
        }
        if stream:
            payload["stream"] = True
        return payload

    async def translate(self, text: str, source_lang: str, target_lang: str,
                        config: ProviderConfig) -> TranslationResult:
        async with self._open_client(self._timeout(config)) as client:
            response = await self._request(
                client, "POST", self._endpoint(config),
                json=self._payload(text, target_lang, config, stream=False),
                headers=self._headers(config),
            )
            data = self._parse_json(response)

        content = dig(data, "choices", 0, "message", "content")
        if not isinstance(content, str) or not content.strip():
            raise self._missing_translation()
        return TranslationResult(name=self.display_name, text=content.strip())

    async def translate_stream(self, text: str, source_lang: str, target_lang: str,
                               config: ProviderConfig, on_delta: DeltaCallback) -> str:
        async with self._open_client(self._timeout(config, streaming=True)) as client:
            return await self._collect_stream(
                client, "POST", self._endpoint(config), on_delta,
                json=self._payload(text, target_lang, config, stream=True),
                headers=self._headers(config),
            )

    def _stream_fragment(self, payload: Any) -> Optional[str]:
        # Some compatible servers send the whole message instead of a delta
        fragment = dig(payload, "choices", 0, "delta", "content")
        if fragment is None:
            fragment = dig(payload, "choices", 0, "message", "content")
        return fragment if isinstance(fragment, str) else None
