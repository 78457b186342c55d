"""Registry of the providers the server knows how to talk to."""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import List, Optional

from sitegen.config import Settings, get_settings
from sitegen.core.errors import ProviderUnavailableError, UnknownProviderError
from sitegen.schemas.models import ProviderDescriptor

OPENROUTER_ID = "openrouter"


@dataclass(frozen=True)
class ProviderConfig:
    id: str
    name: str
    description: str
    is_local: bool
    # Settings field that has to be non-empty for the provider to be offered
    required_setting: str
    examples: List[str] = field(default_factory=list)

    def is_configured(self, settings: Settings) -> bool:
        return bool(getattr(settings, self.required_setting, None))

    def descriptor(self) -> ProviderDescriptor:
        return ProviderDescriptor(
            id=self.id,
            name=self.name,
            description=self.description,
            is_local=self.is_local,
            examples=list(self.examples),
        )


PROVIDERS: List[ProviderConfig] = [
    ProviderConfig(
        id="deepseek",
        name="DeepSeek",
        description="DeepSeek cloud models",
        is_local=False,
        required_setting="deepseek_api_key",
        examples=["deepseek-chat", "deepseek-reasoner"],
    ),
    ProviderConfig(
        id=OPENROUTER_ID,
        name="OpenRouter",
        description="Hundreds of models from many companies through one API",
        is_local=False,
        required_setting="openrouter_api_key",
    ),
    ProviderConfig(
        id="ollama",
        name="Ollama",
        description="Models running on a local Ollama server",
        is_local=True,
        required_setting="ollama_api_base",
        examples=["llama3.1", "qwen2.5-coder"],
    ),
    ProviderConfig(
        id="lm_studio",
        name="LM Studio",
        description="Models served by a local LM Studio instance",
        is_local=True,
        required_setting="lm_studio_api_base",
    ),
    ProviderConfig(
        id="openai_compatible",
        name="OpenAI Compatible",
        description="Any server exposing the OpenAI models API",
        is_local=False,
        required_setting="openai_compatible_api_base",
    ),
]


def get_provider_config(provider_id: str) -> ProviderConfig:
    for provider in PROVIDERS:
        if provider.id == provider_id:
            return provider
    raise UnknownProviderError(provider_id)


def get_available_providers(settings: Optional[Settings] = None) -> List[ProviderConfig]:
    """Providers whose settings are filled in, in registry order."""
    settings = settings or get_settings()
    return [p for p in PROVIDERS if p.is_configured(settings)]


def require_available_provider(provider_id: str, settings: Optional[Settings] = None) -> ProviderConfig:
    settings = settings or get_settings()
    provider = get_provider_config(provider_id)
    if not provider.is_configured(settings):
        raise ProviderUnavailableError(provider_id)
    return provider
