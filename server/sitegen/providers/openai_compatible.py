from __future__ import annotations
from typing import List, Optional
import httpx

from sitegen.schemas.models import ModelInfo


class OpenAICompatibleProvider:
    """Lists models from any server implementing ``GET /models``.

    DeepSeek, OpenRouter, LM Studio and self-hosted gateways all speak this
    dialect, so they share one client configured with their own base URL.
    """

    def __init__(
        self,
        provider_id: str,
        base_url: str,
        api_key: Optional[str] = None,
        timeout_seconds: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.id = provider_id
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.timeout_seconds = timeout_seconds
        self._transport = transport

    async def list_models(self) -> List[ModelInfo]:
        headers = {"Accept": "application/json"}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"
        timeout = httpx.Timeout(self.timeout_seconds, connect=10.0)
        async with httpx.AsyncClient(timeout=timeout, trust_env=True, transport=self._transport) as client:
            resp = await client.get(f"{self.base_url}/models", headers=headers)
            resp.raise_for_status()
            data = resp.json().get("data") or []

        models: List[ModelInfo] = []
        for m in data:
            mid = m.get("id")
            if not mid:
                continue
            models.append(ModelInfo(id=mid, name=m.get("name") or mid, description=m.get("description")))
        return models
