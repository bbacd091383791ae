"""
Provider registry

Read-only table built at startup that maps provider names to adapter classes,
display names, credential requirements and default endpoint/model values. It is
the only place where provider names are matched as strings.
"""
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Dict, Iterable, List, Mapping, Optional, Tuple, Type

from .providers import (
    AlibabaProvider,
    ChatCompletionProvider,
    ClaudeProvider,
    ClientFactory,
    DeepLProvider,
    ErnieProvider,
    GoogleFreeProvider,
    GoogleProvider,
    TranslationProvider,
)


class ProviderKind(Enum):
    """Wire-protocol family of a provider"""
    CHAT = "chat"                  # OpenAI-compatible chat completions
    CLAUDE = "claude"              # Anthropic messages API
    ERNIE = "ernie"                # Baidu token exchange + chat
    CLASSICAL_MT = "classical_mt"  # DeepL, paid Google
    SIGNED = "signed"              # Alibaba HMAC-signed form requests
    UNAUTHENTICATED = "unauthenticated"


@dataclass(frozen=True)
class ProviderSpec:
    """
    Registry entry for one provider.

    Attributes:
        key: Canonical lower-case key, also the default config slice name
        display_name: Name reported in results and events
        kind: Wire-protocol family
        adapter_class: TranslationProvider subclass serving this provider
        required_credentials: ProviderConfig fields that must be non-empty
        defaults: Values filled in when the caller omits them (apiUrl, model)
        aliases: Extra spellings accepted by the lookup
    """
    key: str
    display_name: str
    kind: ProviderKind
    adapter_class: Type[TranslationProvider]
    required_credentials: Tuple[str, ...] = ()
    defaults: Mapping[str, str] = field(default_factory=dict)
    aliases: Tuple[str, ...] = ()

    @property
    def streaming(self) -> bool:
        return self.adapter_class.supports_streaming

    def to_dict(self) -> Dict:
        return {
            "key": self.key,
            "name": self.display_name,
            "kind": self.kind.value,
            "streaming": self.streaming,
            "required_credentials": list(self.required_credentials),
            "defaults": dict(self.defaults),
        }


def normalize_name(name: str) -> str:
    """Lookup form of a provider name: lower case, no spaces, dashes or underscores."""
    return "".join(ch for ch in (name or "").lower() if ch not in " -_")


class ProviderRegistry:
    """Immutable name -> ProviderSpec lookup, injected into the dispatcher."""

    def __init__(self, specs: Iterable[ProviderSpec]):
        self._specs: List[ProviderSpec] = list(specs)
        index = {}
        for spec in self._specs:
            for name in (spec.key, spec.display_name) + tuple(spec.aliases):
                normalized = normalize_name(name)
                if normalized in index and index[normalized] is not spec:
                    raise ValueError(f"Provider name '{name}' registered twice")
                index[normalized] = spec
        self._index = MappingProxyType(index)

    def lookup(self, name: str) -> Optional[ProviderSpec]:
        """Case-insensitive, alias-tolerant lookup; None for unknown names."""
        return self._index.get(normalize_name(name))

    def __contains__(self, name: str) -> bool:
        return self.lookup(name) is not None

    def specs(self) -> List[ProviderSpec]:
        return list(self._specs)

    def create_adapter(self, spec: ProviderSpec,
                       client_factory: Optional[ClientFactory] = None) -> TranslationProvider:
        return spec.adapter_class(spec.display_name, client_factory=client_factory)


API_KEY = ("api_key",)
API_AND_SECRET_KEY = ("api_key", "secret_key")

DEFAULT_PROVIDER_SPECS = (
    ProviderSpec(
        key="openai", display_name="OpenAI", kind=ProviderKind.CHAT,
        adapter_class=ChatCompletionProvider, required_credentials=API_KEY,
        defaults={"apiUrl": "https://api.openai.com/v1/chat/completions",
                  "model": "gpt-3.5-turbo"},
    ),
    ProviderSpec(
        key="zhipu", display_name="Zhipu", kind=ProviderKind.CHAT,
        adapter_class=ChatCompletionProvider, required_credentials=API_KEY,
        defaults={"apiUrl": "https://open.bigmodel.cn/api/paas/v4/chat/completions",
                  "model": "glm-4-flash"},
    ),
    ProviderSpec(
        key="groq", display_name="Groq", kind=ProviderKind.CHAT,
        adapter_class=ChatCompletionProvider, required_credentials=API_KEY,
        defaults={"apiUrl": "https://api.groq.com/openai/v1/chat/completions",
                  "model": "llama3-8b-8192"},
    ),
    ProviderSpec(
        key="gemini", display_name="Gemini", kind=ProviderKind.CHAT,
        adapter_class=ChatCompletionProvider, required_credentials=API_KEY,
        defaults={"apiUrl": "https://generativelanguage.googleapis.com/v1beta/openai/chat/completions",
                  "model": "gemini-1.5-flash"},
    ),
    ProviderSpec(
        key="claude", display_name="Claude", kind=ProviderKind.CLAUDE,
        adapter_class=ClaudeProvider, required_credentials=API_KEY,
        defaults={"apiUrl": "https://api.anthropic.com/v1/messages",
                  "model": "claude-3-haiku-20240307"},
        aliases=("anthropic",),
    ),
    ProviderSpec(
        key="ernie", display_name="Ernie", kind=ProviderKind.ERNIE,
        adapter_class=ErnieProvider, required_credentials=API_AND_SECRET_KEY,
        defaults={"model": "ernie-4.0-8k"},
        aliases=("baidu", "wenxin"),
    ),
    ProviderSpec(
        key="deepl", display_name="DeepL", kind=ProviderKind.CLASSICAL_MT,
        adapter_class=DeepLProvider,
    ),
    ProviderSpec(
        key="google", display_name="Google", kind=ProviderKind.CLASSICAL_MT,
        adapter_class=GoogleProvider, required_credentials=API_KEY,
    ),
    ProviderSpec(
        key="alibaba", display_name="Alibaba", kind=ProviderKind.SIGNED,
        adapter_class=AlibabaProvider, required_credentials=API_AND_SECRET_KEY,
        aliases=("aliyun",),
    ),
    ProviderSpec(
        key="googlefree", display_name="GoogleFree", kind=ProviderKind.UNAUTHENTICATED,
        adapter_class=GoogleFreeProvider,
        aliases=("google native", "google free"),
    ),
)


def build_default_registry() -> ProviderRegistry:
    """Registry with every built-in provider."""
    return ProviderRegistry(DEFAULT_PROVIDER_SPECS)
