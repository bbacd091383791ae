"""
Anthropic Claude adapter (messages API).
"""

from typing import Any, Dict, Optional

from multitranslate.config import CHAT_MAX_TOKENS
from ..models import ProviderConfig, TranslationResult
from .base import TranslationProvider, DeltaCallback, dig
from .chat import build_system_prompt

CLAUDE_API_URL = "https://api.anthropic.com/v1/messages"
CLAUDE_DEFAULT_MODEL = "claude-3-haiku-20240307"
ANTHROPIC_VERSION = "2023-06-01"


class ClaudeProvider(TranslationProvider):
    """Provider for the Anthropic messages API, with streaming support."""

    supports_streaming = True

    def _headers(self, config: ProviderConfig) -> Dict[str, str]:
        return {
            "x-api-key": config.api_key or "",
            "anthropic-version": ANTHROPIC_VERSION,
            "content-type": "application/json",
        }

    def _payload(self, text: str, target_lang: str, config: ProviderConfig,
                 stream: bool) -> Dict[str, Any]:
        payload = {
            "model": config.model or CLAUDE_DEFAULT_MODEL,
            "max_tokens": CHAT_MAX_TOKENS,
            "system": build_system_prompt(target_lang),
            "messages": [{"role": "user", "content": text}],
        }
        if stream:
            payload["stream"] = True
        return payload

    async def translate(self, text: str, source_lang: str, target_lang: str,
                        config: ProviderConfig) -> TranslationResult:
        async with self._open_client(self._timeout(config)) as client:
            response = await self._request(
                client, "POST", config.api_url or CLAUDE_API_URL,
                json=self._payload(text, target_lang, config, stream=False),
                headers=self._headers(config),
            )
            data = self._parse_json(response)

        content = dig(data, "content", 0, "text")
        if not isinstance(content, str) or not content.strip():
            raise self._missing_translation("No translation in Claude response")
        return TranslationResult(name=self.display_name, text=content.strip())

    async def translate_stream(self, text: str, source_lang: str, target_lang: str,
                               config: ProviderConfig, on_delta: DeltaCallback) -> str:
        async with self._open_client(self._timeout(config, streaming=True)) as client:
            return await self._collect_stream(
                client, "POST", config.api_url or CLAUDE_API_URL, on_delta,
                json=self._payload(text, target_lang, config, stream=True),
                headers=self._headers(config),
            )

    def _stream_fragment(self, payload: Any) -> Optional[str]:
        fragment = dig(payload, "delta", "text")
        return fragment if isinstance(fragment, str) else None

    def _is_stream_end(self, payload: Any) -> bool:
        return isinstance(payload, dict) and payload.get("type") == "message_stop"
