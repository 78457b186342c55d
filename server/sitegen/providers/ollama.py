from __future__ import annotations
from typing import List, Optional
import httpx

from sitegen.schemas.models import ModelInfo


class OllamaProvider:
    """Local Ollama server; installed models come from ``GET /api/tags``."""

    id = "ollama"

    def __init__(
        self,
        base_url: str,
        timeout_seconds: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout_seconds = timeout_seconds
        self._transport = transport

    async def list_models(self) -> List[ModelInfo]:
        timeout = httpx.Timeout(self.timeout_seconds, connect=5.0)
        async with httpx.AsyncClient(timeout=timeout, trust_env=False, transport=self._transport) as client:
            resp = await client.get(f"{self.base_url}/api/tags")
            resp.raise_for_status()
            tags = resp.json().get("models") or []

        models: List[ModelInfo] = []
        for tag in tags:
            name = tag.get("name") or tag.get("model")
            if not name:
                continue
            # Ollama has no display names; the tag is both id and label
            models.append(ModelInfo(id=name, name=name))
        return models
