"""
Google Cloud Translation (v2, API key) adapter.
"""

from multitranslate.config import MT_REQUEST_TIMEOUT
from ..models import ProviderConfig, TranslationResult
from .base import TranslationProvider, dig

GOOGLE_API_URL = "https://translation.googleapis.com/language/translate/v2"


class GoogleProvider(TranslationProvider):
    """Provider for the paid Google Cloud Translation API."""

    api_label = "Google Translate"
    default_timeout = MT_REQUEST_TIMEOUT

    async def translate(self, text: str, source_lang: str, target_lang: str,
                        config: ProviderConfig) -> TranslationResult:
        payload = {"q": text, "target": target_lang, "format": "text"}
        if source_lang and source_lang != "auto":
            payload["source"] = source_lang

        async with self._open_client(self._timeout(config)) as client:
            response = await self._request(
                client, "POST", config.api_url or GOOGLE_API_URL,
                params={"key": config.api_key},
                json=payload,
            )
            data = self._parse_json(response)

        translated = dig(data, "data", "translations", 0, "translatedText")
        if not isinstance(translated, str) or not translated:
            raise self._missing_translation()
        return TranslationResult(name=self.display_name, text=translated)
