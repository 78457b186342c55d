"""Aggregates the model lists of every configured provider.

Each provider is asked for its models in registry order. OpenRouter is
special-cased: its public listing is fetched with organization metadata and
split into one group per company. A provider that fails for any reason is
skipped and logged; it never fails the whole aggregation.
"""

from __future__ import annotations
import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterable, List, Optional
import httpx

from sitegen.config import Settings, get_settings
from sitegen.providers.base import ModelProvider
from sitegen.providers.config import OPENROUTER_ID, ProviderConfig
from sitegen.providers.factory import create_provider_client
from sitegen.schemas.models import (
    ModelInfo,
    OpenRouterModel,
    ProviderDescriptor,
    ProviderModelGroup,
)

logger = logging.getLogger(__name__)

COMPANY_FALLBACK = "Other"

ClientFactory = Callable[[str], ModelProvider]


def _id_prefix(model_id: str) -> Optional[str]:
    if "/" not in model_id:
        return None
    return model_id.split("/", 1)[0] or None


def infer_company(model: OpenRouterModel) -> str:
    """Company a model is attributed to: organization, provider, id prefix, then "Other"."""
    for candidate in (model.organization, model.provider, _id_prefix(model.id)):
        if candidate:
            return candidate
    return COMPANY_FALLBACK


def company_descriptor(provider_id: str, company: str) -> ProviderDescriptor:
    return ProviderDescriptor(
        id=provider_id,
        name=f"OpenRouter ({company})",
        description=f"Models by {company} via OpenRouter",
        is_local=False,
        company=company,
    )


def group_by_company(provider_id: str, entries: Iterable[OpenRouterModel]) -> List[ProviderModelGroup]:
    """One group per company, in order of first appearance."""
    companies: Dict[str, List[ModelInfo]] = {}
    for entry in entries:
        companies.setdefault(infer_company(entry), []).append(
            ModelInfo(id=entry.id, name=entry.name or entry.id, description=entry.description or "")
        )
    return [
        ProviderModelGroup(provider=company_descriptor(provider_id, company), models=models)
        for company, models in companies.items()
    ]


async def fetch_openrouter_catalog(
    settings: Settings,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> Optional[List[OpenRouterModel]]:
    """Fetch the OpenRouter listing with metadata.

    Returns None when the body has no ``data`` list. HTTP and decoding errors
    propagate to the caller.
    """
    headers: Dict[str, str] = {}
    if settings.openrouter_api_key:
        headers["Authorization"] = f"Bearer {settings.openrouter_api_key}"
    timeout = httpx.Timeout(settings.request_timeout_seconds, connect=10.0)
    async with httpx.AsyncClient(timeout=timeout, trust_env=True, transport=transport) as client:
        resp = await client.get(settings.openrouter_models_url, headers=headers)
        resp.raise_for_status()
        body: Any = resp.json()

    data = body.get("data") if isinstance(body, dict) else None
    if not isinstance(data, list):
        return None
    entries: List[OpenRouterModel] = []
    for raw in data:
        if isinstance(raw, dict) and isinstance(raw.get("id"), str):
            entries.append(OpenRouterModel.model_validate(raw))
    return entries


@dataclass
class ProviderResult:
    """Outcome of asking one provider for its models."""

    provider_id: str
    groups: List[ProviderModelGroup] = field(default_factory=list)
    skipped_reason: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.skipped_reason is None

    @classmethod
    def success(cls, provider_id: str, groups: List[ProviderModelGroup]) -> "ProviderResult":
        return cls(provider_id=provider_id, groups=groups)

    @classmethod
    def skipped(cls, provider_id: str, reason: str) -> "ProviderResult":
        return cls(provider_id=provider_id, skipped_reason=reason)


class ModelAggregator:
    def __init__(
        self,
        settings: Optional[Settings] = None,
        client_factory: Optional[ClientFactory] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.settings = settings or get_settings()
        self._client_factory = client_factory
        self._transport = transport

    def _client_for(self, provider_id: str) -> ModelProvider:
        if self._client_factory is not None:
            return self._client_factory(provider_id)
        return create_provider_client(provider_id, self.settings, transport=self._transport)

    async def collect(self, provider: ProviderConfig) -> ProviderResult:
        try:
            models = await self._client_for(provider.id).list_models()
            if provider.id == OPENROUTER_ID:
                catalog = await fetch_openrouter_catalog(self.settings, transport=self._transport)
                if catalog is not None:
                    return ProviderResult.success(provider.id, group_by_company(provider.id, catalog))
            group = ProviderModelGroup(provider=provider.descriptor(), models=models)
            return ProviderResult.success(provider.id, [group])
        except Exception as e:
            return ProviderResult.skipped(provider.id, f"{type(e).__name__}: {e}")

    async def collect_all(self, providers: Iterable[ProviderConfig]) -> List[ProviderResult]:
        results: List[ProviderResult] = []
        for provider in providers:
            result = await self.collect(provider)
            if not result.ok:
                logger.warning("Skipping provider %s: %s", result.provider_id, result.skipped_reason)
            results.append(result)
        return results

    async def aggregate(self, providers: Iterable[ProviderConfig]) -> List[ProviderModelGroup]:
        results = await self.collect_all(providers)
        groups = [group for result in results for group in result.groups]
        logger.info(
            "Aggregated %d groups from %d providers (%d skipped)",
            len(groups),
            len(results),
            sum(1 for r in results if not r.ok),
        )
        return groups
