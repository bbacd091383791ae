"""
Alibaba Cloud machine translation adapter (RPC-style signed requests).

Every call carries a fresh timestamp and nonce and is signed with HMAC-SHA1 over
the canonical query string, following Alibaba's RPC signature v1.0 scheme.
"""

import base64
import hashlib
import hmac
import uuid
from datetime import datetime, timezone
from typing import Dict, Mapping, Optional
from urllib.parse import quote

from multitranslate.config import MT_REQUEST_TIMEOUT
from ..models import ProviderConfig, TranslationResult
from .base import TranslationProvider, dig

ALIBABA_API_URL = "https://mt.aliyuncs.com/"
ALIBABA_API_VERSION = "2018-10-12"


def percent_encode(value: str) -> str:
    """RFC 3986 encoding as Alibaba expects it: space -> %20, * -> %2A, ~ kept."""
    return quote(value, safe="~")


def canonical_query(params: Mapping[str, str]) -> str:
    """Percent-encoded `key=value` pairs joined by `&`, sorted by key."""
    return "&".join(
        f"{percent_encode(key)}={percent_encode(value)}"
        for key, value in sorted(params.items())
    )


def string_to_sign(params: Mapping[str, str], method: str = "POST") -> str:
    return f"{method}&{percent_encode('/')}&{percent_encode(canonical_query(params))}"


def sign(params: Mapping[str, str], secret: str, method: str = "POST") -> str:
    """Base64 HMAC-SHA1 of the string to sign, keyed with `secret + "&"`."""
    digest = hmac.new(
        f"{secret}&".encode("utf-8"),
        string_to_sign(params, method).encode("utf-8"),
        hashlib.sha1,
    ).digest()
    return base64.b64encode(digest).decode("ascii")


class AlibabaProvider(TranslationProvider):
    """Provider for Alibaba Cloud TranslateGeneral."""

    default_timeout = MT_REQUEST_TIMEOUT

    def build_params(self, text: str, source_lang: str, target_lang: str,
                     config: ProviderConfig, timestamp: Optional[str] = None,
                     nonce: Optional[str] = None) -> Dict[str, str]:
        """
        Build the signed form parameters for one call.

        Args:
            timestamp: ISO-8601 UTC timestamp (generated when omitted)
            nonce: Unique signature nonce (a fresh UUID4 when omitted)

        Returns:
            All request parameters including `Signature`
        """
        params = {
            "Action": "TranslateGeneral",
            "Format": "JSON",
            "Version": ALIBABA_API_VERSION,
            "AccessKeyId": config.api_key or "",
            "SignatureMethod": "HMAC-SHA1",
            "SignatureVersion": "1.0",
            "Timestamp": timestamp or datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ"),
            "SignatureNonce": nonce or str(uuid.uuid4()),
            "SourceLanguage": source_lang or "auto",
            "TargetLanguage": target_lang,
            "SourceText": text,
            "Scene": "general",
            "FormatType": "text",
        }
        params["Signature"] = sign(params, config.secret_key or "", "POST")
        return params

    async def translate(self, text: str, source_lang: str, target_lang: str,
                        config: ProviderConfig) -> TranslationResult:
        params = self.build_params(text, source_lang, target_lang, config)

        async with self._open_client(self._timeout(config)) as client:
            response = await self._request(client, "POST", config.api_url or ALIBABA_API_URL,
                                           data=params)
            data = self._parse_json(response)

        translated = dig(data, "Data", "Translated")
        if not isinstance(translated, str) or not translated:
            message = dig(data, "Message")
            raise self._missing_translation(message or "Unknown error from Alibaba")
        return TranslationResult(name=self.display_name, text=translated)
