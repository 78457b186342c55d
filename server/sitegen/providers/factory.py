from __future__ import annotations
from typing import Optional
import httpx

from sitegen.config import Settings, get_settings
from sitegen.core.errors import ProviderUnavailableError, UnknownProviderError
from sitegen.providers.base import ModelProvider
from sitegen.providers.ollama import OllamaProvider
from sitegen.providers.openai_compatible import OpenAICompatibleProvider


def create_provider_client(
    provider_id: str,
    settings: Optional[Settings] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> ModelProvider:
    """Build the model-listing client for ``provider_id`` from settings."""
    settings = settings or get_settings()
    timeout = settings.request_timeout_seconds

    if provider_id == "deepseek":
        return OpenAICompatibleProvider(
            "deepseek",
            settings.deepseek_api_base,
            api_key=settings.deepseek_api_key,
            timeout_seconds=timeout,
            transport=transport,
        )
    if provider_id == "openrouter":
        return OpenAICompatibleProvider(
            "openrouter",
            settings.openrouter_api_base,
            api_key=settings.openrouter_api_key,
            timeout_seconds=timeout,
            transport=transport,
        )
    if provider_id == "ollama":
        if not settings.ollama_api_base:
            raise ProviderUnavailableError(provider_id)
        return OllamaProvider(settings.ollama_api_base, timeout_seconds=timeout, transport=transport)
    if provider_id == "lm_studio":
        if not settings.lm_studio_api_base:
            raise ProviderUnavailableError(provider_id)
        return OpenAICompatibleProvider(
            "lm_studio", settings.lm_studio_api_base, timeout_seconds=timeout, transport=transport
        )
    if provider_id == "openai_compatible":
        if not settings.openai_compatible_api_base:
            raise ProviderUnavailableError(provider_id)
        return OpenAICompatibleProvider(
            "openai_compatible",
            settings.openai_compatible_api_base,
            api_key=settings.openai_compatible_api_key,
            timeout_seconds=timeout,
            transport=transport,
        )
    raise UnknownProviderError(provider_id)
