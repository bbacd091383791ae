"""Unit tests for per-provider configuration resolution."""

import pytest
from multitranslate.core.exceptions import ConfigurationMissingError
from multitranslate.core.models import TranslationRequest
from multitranslate.core.registry import build_default_registry
from multitranslate.core.resolver import ConfigurationResolver


@pytest.fixture
def registry():
    return build_default_registry()


def resolve(registry, name, config):
    request = TranslationRequest.from_dict({"text": "hi", "services": [name], "config": config})
    return ConfigurationResolver().resolve(request, name, registry.lookup(name))


class TestCredentialChecks:
    """Test readiness decisions."""

    def test_chat_provider_without_key(self, registry):
        """A chat provider without apiKey is not ready."""
        resolution = resolve(registry, "OpenAI", {})

        assert not resolution.ready
        assert isinstance(resolution.error, ConfigurationMissingError)
        assert str(resolution.error) == "No API key configured"

    def test_chat_provider_with_empty_key(self, registry):
        """An empty apiKey counts as missing."""
        resolution = resolve(registry, "Groq", {"groq": {"apiKey": ""}})
        assert str(resolution.error) == "No API key configured"

    def test_signed_provider_needs_both_keys(self, registry):
        """Alibaba needs apiKey and secretKey, reported as one error."""
        resolution = resolve(registry, "Alibaba", {"alibaba": {"apiKey": "id"}})

        assert not resolution.ready
        assert str(resolution.error) == "API key and secret key required"

    def test_signed_provider_with_aliases(self, registry):
        """accessKeyId/accessKeySecret satisfy the Alibaba precondition."""
        resolution = resolve(registry, "Alibaba",
                             {"alibaba": {"accessKeyId": "id", "accessKeySecret": "secret"}})

        assert resolution.ready
        assert resolution.config.api_key == "id"
        assert resolution.config.secret_key == "secret"

    @pytest.mark.parametrize("name", ["DeepL", "GoogleFree"])
    def test_no_precondition_providers(self, registry, name):
        """DeepL and GoogleFree are always ready."""
        assert resolve(registry, name, {}).ready

    def test_invalid_timeout_fails_only_this_provider(self, registry):
        """A malformed config value becomes a per-provider error."""
        resolution = resolve(registry, "OpenAI", {"openai": {"apiKey": "k", "timeout": "never"}})

        assert not resolution.ready
        assert "Invalid timeout" in str(resolution.error)


class TestDefaults:
    """Test registry default merging."""

    def test_defaults_fill_absent_keys(self, registry):
        """Absent apiUrl/model come from the registry."""
        config = resolve(registry, "Zhipu", {"zhipu": {"apiKey": "k"}}).config

        assert config.api_url == "https://open.bigmodel.cn/api/paas/v4/chat/completions"
        assert config.model == "glm-4-flash"

    def test_caller_values_never_overwritten(self, registry):
        """Caller apiUrl/model win over defaults."""
        config = resolve(registry, "OpenAI", {
            "openai": {"apiKey": "k", "apiUrl": "https://proxy.local/v1/chat", "model": "gpt-4o"},
        }).config

        assert config.api_url == "https://proxy.local/v1/chat"
        assert config.model == "gpt-4o"

    def test_credentials_never_defaulted(self, registry):
        """Defaults never supply credentials."""
        config = resolve(registry, "OpenAI", {}).config
        assert config.api_key is None


class TestConfigSlice:
    """Test which config bag is used."""

    def test_slice_by_requested_name(self, registry):
        """The caller's spelling finds its own slice, ignoring case."""
        resolution = resolve(registry, "OpenAI", {"OPENAI": {"apiKey": "k"}})
        assert resolution.config.api_key == "k"

    def test_slice_falls_back_to_registry_key(self, registry):
        """An alias request still finds the slice stored under the canonical key."""
        request = TranslationRequest.from_dict({
            "text": "hi",
            "services": ["Google Native"],
            "config": {"googlefree": {"timeout": 2}},
        })
        resolution = ConfigurationResolver().resolve(request, "Google Native",
                                                     registry.lookup("Google Native"))

        assert resolution.config.timeout == 2.0

    def test_other_providers_config_ignored(self, registry):
        """Another provider's key does not satisfy this one."""
        resolution = resolve(registry, "Groq", {"openai": {"apiKey": "k"}})
        assert not resolution.ready
