"""
DeepL adapter (classical machine translation, no streaming).

The API key comes from the provider configuration, then the DEEPL_API_KEY
environment variable, then the local .env file. The endpoint is fixed: a
server-side key is never sent anywhere else.
"""

from multitranslate.config import DEEPL_API_KEY_ENV, MT_REQUEST_TIMEOUT
from multitranslate.utils.env_helper import lookup_setting
from ..exceptions import ConfigurationMissingError
from ..models import ProviderConfig, TranslationResult
from .base import TranslationProvider, dig

DEEPL_API_URL = "https://api-free.deepl.com/v2/translate"
DEEPL_FALLBACK_TARGET = "EN-US"

# Caller language code (upper-cased) -> DeepL target code
TARGET_LANGUAGE_CODES = {
    "ZH": "ZH",
    "ZH-HANS": "ZH",
    "EN": "EN-US",
    "JA": "JA",
    "KO": "KO",
    "FR": "FR",
    "DE": "DE",
    "ES": "ES",
    "RU": "RU",
}


def deepl_target_code(target_lang: str) -> str:
    """Map a caller target language to DeepL's code, falling back to EN-US."""
    return TARGET_LANGUAGE_CODES.get((target_lang or "").upper(), DEEPL_FALLBACK_TARGET)


class DeepLProvider(TranslationProvider):
    """Provider for the DeepL REST API."""

    default_timeout = MT_REQUEST_TIMEOUT

    def _api_key(self, config: ProviderConfig) -> str:
        api_key = lookup_setting(DEEPL_API_KEY_ENV, configured=config.api_key)
        if not api_key:
            raise ConfigurationMissingError(f"{DEEPL_API_KEY_ENV} not found",
                                            service=self.display_name)
        return api_key

    async def translate(self, text: str, source_lang: str, target_lang: str,
                        config: ProviderConfig) -> TranslationResult:
        api_key = self._api_key(config)

        async with self._open_client(self._timeout(config)) as client:
            response = await self._request(
                client, "POST", DEEPL_API_URL,
                headers={"Authorization": f"DeepL-Auth-Key {api_key}"},
                data={"text": text, "target_lang": deepl_target_code(target_lang)},
            )
            data = self._parse_json(response)

        translated = dig(data, "translations", 0, "text")
        if not isinstance(translated, str) or not translated:
            raise self._missing_translation()
        return TranslationResult(name=self.display_name, text=translated)
