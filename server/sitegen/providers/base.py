from __future__ import annotations
from typing import Protocol, List
from sitegen.schemas.models import ModelInfo


class ModelProvider(Protocol):
    id: str

    async def list_models(self) -> List[ModelInfo]:
        """Return every model the provider currently offers."""
        ...
