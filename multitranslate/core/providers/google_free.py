"""
Unauthenticated Google translate adapter (the public `translate_a/single` endpoint).
"""

from typing import Any, Optional

from multitranslate.config import BROWSER_USER_AGENT, MT_REQUEST_TIMEOUT
from ..models import ProviderConfig, TranslationResult
from .base import TranslationProvider

GOOGLE_FREE_API_URL = "https://translate.googleapis.com/translate_a/single"

BROWSER_HEADERS = {
    "User-Agent": BROWSER_USER_AGENT,
    "Accept": "*/*",
    "Accept-Language": "en-US,en;q=0.9",
    "Referer": "https://translate.google.com/",
}


def join_sentences(data: Any) -> Optional[str]:
    """
    Concatenate the translated part of every sentence.

    The response looks like `[[["translated", "original", ...], ...], ...]`.

    Returns:
        The joined text (possibly empty), or None if the outer shape is wrong
    """
    if not isinstance(data, list) or not data or not isinstance(data[0], list):
        return None
    parts = []
    for sentence in data[0]:
        if isinstance(sentence, list) and sentence and isinstance(sentence[0], str):
            parts.append(sentence[0])
    return "".join(parts)


class GoogleFreeProvider(TranslationProvider):
    """Provider for the free Google endpoint; no credentials needed."""

    api_label = "Google Free"
    default_timeout = MT_REQUEST_TIMEOUT

    async def translate(self, text: str, source_lang: str, target_lang: str,
                        config: ProviderConfig) -> TranslationResult:
        async with self._open_client(self._timeout(config)) as client:
            response = await self._request(
                client, "GET", config.api_url or GOOGLE_FREE_API_URL,
                headers=BROWSER_HEADERS,
                params={
                    "client": "gtx",
                    "sl": source_lang or "auto",
                    "tl": target_lang,
                    "dt": "t",
                    "q": text,
                },
            )
            data = self._parse_json(response)

        translated = join_sentences(data)
        if translated is None:
            raise self._missing_translation("Invalid response format from Google Free API")
        if not translated:
            raise self._missing_translation("No translation found in response")
        return TranslationResult(name=self.display_name, text=translated)
