"""
Data structures exchanged between the caller, the dispatcher and the adapters.
"""
import copy
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from multitranslate.config import DEFAULT_SOURCE_LANGUAGE, DEFAULT_TARGET_LANGUAGE
from .exceptions import InvalidRequestError


@dataclass(frozen=True)
class TranslationRequest:
    """One text to translate with every requested provider.

    Attributes:
        text: Source text
        source_lang: Source language code ("auto" allowed)
        target_lang: Target language code
        services: Requested provider names, in request order (empty = defaults)
        config: Lower-cased provider name -> provider configuration bag
    """
    text: str
    source_lang: str = DEFAULT_SOURCE_LANGUAGE
    target_lang: str = DEFAULT_TARGET_LANGUAGE
    services: Tuple[str, ...] = ()
    config: Dict[str, Dict[str, Any]] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TranslationRequest":
        """Build a request from a JSON-style payload (snake_case or camelCase keys)."""
        if not isinstance(data, dict):
            raise InvalidRequestError("Request body must be a JSON object")

        text = data.get('text')
        if not isinstance(text, str):
            raise InvalidRequestError("Missing or invalid field: text")

        services = data.get('services') or []
        if not isinstance(services, (list, tuple)) or not all(isinstance(s, str) for s in services):
            raise InvalidRequestError("Field 'services' must be a list of provider names")

        raw_config = data.get('config') or {}
        if not isinstance(raw_config, dict):
            raise InvalidRequestError("Field 'config' must be an object")
        config = {}
        for name, bag in raw_config.items():
            if bag is None:
                continue
            if not isinstance(bag, dict):
                raise InvalidRequestError(f"Configuration for '{name}' must be an object")
            config[str(name).lower()] = dict(bag)

        return cls(
            text=text,
            source_lang=data.get('source_lang') or data.get('sourceLang') or DEFAULT_SOURCE_LANGUAGE,
            target_lang=data.get('target_lang') or data.get('targetLang') or DEFAULT_TARGET_LANGUAGE,
            services=tuple(services),
            config=config,
        )

    def clone(self) -> "TranslationRequest":
        """Independent deep copy handed to each provider task."""
        return copy.deepcopy(self)

    def config_for(self, name: str) -> Optional[Dict[str, Any]]:
        """Case-insensitive lookup of one provider's configuration bag."""
        return self.config.get(name.lower())


# Caller spellings accepted for each typed field
_CONFIG_FIELD_KEYS = {
    'api_key': ('apiKey', 'api_key', 'accessKeyId'),
    'secret_key': ('secretKey', 'secret_key', 'accessKeySecret'),
    'api_url': ('apiUrl', 'api_url'),
    'model': ('model',),
    'timeout': ('timeout',),
}


@dataclass(frozen=True)
class ProviderConfig:
    """Typed configuration slice for one provider, parsed once per task.

    Keys that do not map to a typed field are kept in `options`
    (e.g. Ernie's `tokenUrl`).
    """
    api_key: Optional[str] = None
    secret_key: Optional[str] = None
    api_url: Optional[str] = None
    model: Optional[str] = None
    timeout: Optional[float] = None
    options: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_mapping(cls, data: Optional[Dict[str, Any]]) -> "ProviderConfig":
        data = dict(data or {})
        values = {}
        for field_name, keys in _CONFIG_FIELD_KEYS.items():
            for key in keys:
                if key in data:
                    value = data.pop(key)
                    if field_name not in values and value is not None:
                        values[field_name] = value
        if 'timeout' in values:
            try:
                values['timeout'] = float(values['timeout'])
            except (TypeError, ValueError):
                raise InvalidRequestError(f"Invalid timeout value: {values['timeout']!r}")
        for field_name in ('api_key', 'secret_key', 'api_url', 'model'):
            if field_name in values:
                values[field_name] = str(values[field_name])
        return cls(options=data, **values)

    def option(self, key: str, default: Any = None) -> Any:
        return self.options.get(key, default)


@dataclass
class TranslationResult:
    """Outcome of one provider: either `text` or `error` is meaningful."""
    name: str
    text: str = ""
    error: Optional[str] = None

    @classmethod
    def failure(cls, name: str, error: str) -> "TranslationResult":
        return cls(name=name, text="", error=error)

    @property
    def ok(self) -> bool:
        return self.error is None and bool(self.text)

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "text": self.text, "error": self.error}


@dataclass
class TranslationResponse:
    """Aggregate response, results in completion order."""
    results: List[TranslationResult] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {"results": [result.to_dict() for result in self.results]}


@dataclass(frozen=True)
class StreamEvent:
    """One event delivered to a stream sink.

    Attributes:
        request_id: Caller correlation token, echoed verbatim
        service: Provider display name ("" only for the all-done sentinel)
        delta: Incremental fragment (mid-stream events only)
        text: Final full text (terminal event of a successful provider)
        error: Failure reason (terminal event of a failed provider)
        done: True on the last event of a provider, and on the sentinel
        all_done: True exactly once, on the sentinel
    """
    request_id: str
    service: str
    delta: Optional[str] = None
    text: Optional[str] = None
    error: Optional[str] = None
    done: bool = False
    all_done: bool = False

    @classmethod
    def partial(cls, request_id: str, service: str, delta: str) -> "StreamEvent":
        return cls(request_id=request_id, service=service, delta=delta)

    @classmethod
    def completed(cls, request_id: str, service: str, text: str) -> "StreamEvent":
        return cls(request_id=request_id, service=service, text=text, done=True)

    @classmethod
    def failed(cls, request_id: str, service: str, error: str) -> "StreamEvent":
        return cls(request_id=request_id, service=service, error=error, done=True)

    @classmethod
    def sentinel(cls, request_id: str) -> "StreamEvent":
        return cls(request_id=request_id, service="", done=True, all_done=True)

    @property
    def is_terminal(self) -> bool:
        return self.done and not self.all_done

    def to_dict(self) -> Dict[str, Any]:
        """Wire payload; absent optional fields are omitted."""
        payload = {
            "request_id": self.request_id,
            "service": self.service,
            "done": self.done,
            "all_done": self.all_done,
        }
        for key in ("delta", "text", "error"):
            value = getattr(self, key)
            if value is not None:
                payload[key] = value
        return payload
