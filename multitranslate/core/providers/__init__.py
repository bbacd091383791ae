"""
Translation provider adapters

Providers:
    - chat: OpenAI-compatible chat completions (OpenAI, Zhipu, Groq, Gemini)
    - claude: Anthropic messages API
    - ernie: Baidu ERNIE (token exchange + chat)
    - deepl: DeepL classical MT
    - google: Google Cloud Translation v2
    - alibaba: Alibaba Cloud MT with signed requests
    - google_free: unauthenticated Google endpoint
"""

from .base import TranslationProvider, ClientFactory, default_client_factory
from .chat import ChatCompletionProvider
from .claude import ClaudeProvider
from .ernie import ErnieProvider
from .deepl import DeepLProvider
from .google import GoogleProvider
from .alibaba import AlibabaProvider
from .google_free import GoogleFreeProvider

__all__ = [
    'TranslationProvider',
    'ClientFactory',
    'default_client_factory',
    'ChatCompletionProvider',
    'ClaudeProvider',
    'ErnieProvider',
    'DeepLProvider',
    'GoogleProvider',
    'AlibabaProvider',
    'GoogleFreeProvider',
]
