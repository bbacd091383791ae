"""
Configuration resolution

Turns the caller's generic configuration bag into a typed ProviderConfig for one
provider, fills registry defaults for absent keys and checks credentials before
any adapter runs.
"""
from dataclasses import dataclass, replace
from typing import Optional

from .exceptions import ConfigurationMissingError, InvalidRequestError, TranslationError
from .models import ProviderConfig, TranslationRequest
from .registry import ProviderSpec

NO_API_KEY = "No API key configured"
API_AND_SECRET_KEY_REQUIRED = "API key and secret key required"

# Registry default key -> ProviderConfig field
_DEFAULT_FIELDS = {
    "apiUrl": "api_url",
    "model": "model",
}


@dataclass(frozen=True)
class Resolution:
    """Outcome of resolving one provider: a usable config, or the reason it is not ready."""
    spec: ProviderSpec
    config: ProviderConfig
    error: Optional[TranslationError] = None

    @property
    def ready(self) -> bool:
        return self.error is None


class ConfigurationResolver:
    """Per-provider configuration extraction and credential check"""

    def slice_for(self, request: TranslationRequest, requested_name: str,
                  spec: ProviderSpec) -> dict:
        """
        Find the configuration bag for a provider.

        The name the caller used is tried first (lower-cased), then the
        registry key, so `{"services": ["Google Native"], "config": {"googlefree": ...}}`
        still finds its slice.
        """
        for name in (requested_name, spec.key, spec.display_name):
            bag = request.config_for(name)
            if bag is not None:
                return bag
        return {}

    def resolve(self, request: TranslationRequest, requested_name: str,
                spec: ProviderSpec) -> Resolution:
        try:
            config = ProviderConfig.from_mapping(self.slice_for(request, requested_name, spec))
        except InvalidRequestError as e:
            return Resolution(spec, ProviderConfig(),
                              ConfigurationMissingError(str(e), service=spec.display_name))

        defaults = {}
        for key, value in spec.defaults.items():
            field_name = _DEFAULT_FIELDS.get(key)
            if field_name and getattr(config, field_name) is None:
                defaults[field_name] = value
        if defaults:
            config = replace(config, **defaults)

        missing = [name for name in spec.required_credentials if not getattr(config, name)]
        if missing:
            message = API_AND_SECRET_KEY_REQUIRED if len(spec.required_credentials) > 1 else NO_API_KEY
            return Resolution(spec, config,
                              ConfigurationMissingError(message, service=spec.display_name))

        return Resolution(spec, config)
