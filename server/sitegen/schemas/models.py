from __future__ import annotations
from typing import Any, Dict, List, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator


class ModelInfo(BaseModel):
    id: str
    name: str
    description: Optional[str] = None


class ProviderDescriptor(BaseModel):
    """Provider as shown to the client alongside its models.

    Plain groups carry ``examples``; OpenRouter company groups carry
    ``company`` instead.
    """

    model_config = ConfigDict(populate_by_name=True)

    id: str
    name: str
    description: str = ""
    is_local: bool = Field(default=False, alias="isLocal")
    examples: Optional[List[str]] = None
    company: Optional[str] = None


class ProviderModelGroup(BaseModel):
    provider: ProviderDescriptor
    models: List[ModelInfo]

    def to_payload(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)


class OpenRouterModel(BaseModel):
    """One entry of the OpenRouter public model listing."""

    model_config = ConfigDict(extra="ignore")

    id: str
    name: Optional[str] = None
    description: Optional[str] = None
    organization: Optional[str] = None
    provider: Optional[str] = None

    @field_validator("name", "description", "organization", "provider", mode="before")
    @classmethod
    def _strings_only(cls, value: Any) -> Optional[str]:
        # The listing sometimes nests objects here; only plain strings count
        return value if isinstance(value, str) else None
