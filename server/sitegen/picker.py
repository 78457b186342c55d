"""State behind the model picker view.

The picker loads the aggregated provider groups once, keeps OpenRouter's
company groups behind a company selector and shows every other group as is.
It also owns the small pieces of form state sent with a generate request.
"""

from __future__ import annotations
import enum
import logging
import re
from typing import Any, Awaitable, Callable, Dict, List, Optional
import httpx
from pydantic import BaseModel, ConfigDict, Field

from sitegen.core.errors import PickerError
from sitegen.providers.config import OPENROUTER_ID
from sitegen.schemas.models import ProviderModelGroup

logger = logging.getLogger(__name__)

ALL_MODELS_PATH = "/api/get-models/all"

Fetcher = Callable[[], Awaitable[Any]]

_LEADING_INT = re.compile(r"^\s*([+-]?[0-9]+)")


class LoadState(str, enum.Enum):
    NOT_LOADED = "not_loaded"
    LOADING = "loading"
    LOADED = "loaded"
    LOADED_EMPTY_ON_ERROR = "loaded_empty_on_error"


class SystemPromptType(str, enum.Enum):
    DEFAULT = "default"
    THINKING = "thinking"
    CUSTOM = "custom"


SYSTEM_PROMPT_LABELS = {
    SystemPromptType.DEFAULT: ("Default", "Standard code generation"),
    SystemPromptType.THINKING: ("Thinking", "Makes non thinking models think"),
    SystemPromptType.CUSTOM: ("Custom System Prompt", "Specify a custom System Prompt"),
}


class GenerationRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    prompt: str
    model: str
    provider: str
    system_prompt_type: SystemPromptType = Field(alias="systemPromptType")
    custom_system_prompt: Optional[str] = Field(default=None, alias="customSystemPrompt")
    max_tokens: Optional[int] = Field(default=None, alias="maxTokens")

    def to_payload(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True, mode="json")


def parse_max_tokens(raw: Any) -> Optional[int]:
    """Leading integer of ``raw`` if it is positive, otherwise None."""
    if raw is None or isinstance(raw, bool):
        return None
    if isinstance(raw, int):
        value = raw
    else:
        match = _LEADING_INT.match(str(raw))
        if not match:
            return None
        value = int(match.group(1))
    return value if value > 0 else None


async def fetch_grouped_models(
    base_url: str,
    transport: Optional[httpx.AsyncBaseTransport] = None,
    timeout_seconds: float = 30.0,
) -> List[Dict[str, Any]]:
    """GET the aggregated model list from a running server."""
    timeout = httpx.Timeout(timeout_seconds, connect=10.0)
    async with httpx.AsyncClient(base_url=base_url, timeout=timeout, transport=transport) as client:
        resp = await client.get(ALL_MODELS_PATH)
        if resp.status_code >= 400:
            try:
                body = resp.json()
            except ValueError:
                body = None
            error = body.get("error") if isinstance(body, dict) else None
            raise PickerError(error or "Error fetching models")
        return resp.json()


class ModelPicker:
    def __init__(self) -> None:
        self.state = LoadState.NOT_LOADED
        self.groups: List[ProviderModelGroup] = []
        self.prompt = ""
        self.selected_model = ""
        self.selected_provider = ""
        self.selected_company = ""
        self.system_prompt = SystemPromptType.DEFAULT
        self.custom_system_prompt = ""
        self.max_tokens: Optional[int] = None

    # Loading

    def start_loading(self) -> None:
        self.state = LoadState.LOADING

    async def load(self, fetch: Fetcher) -> None:
        self.start_loading()
        try:
            payload = await fetch()
            if not isinstance(payload, list):
                raise PickerError("Expected a list of provider groups")
            self.groups = [ProviderModelGroup.model_validate(item) for item in payload]
            self.state = LoadState.LOADED
        except Exception as e:
            logger.warning("Falling back to an empty model list: %s", e)
            self.groups = []
            self.state = LoadState.LOADED_EMPTY_ON_ERROR

    @property
    def is_loading(self) -> bool:
        return self.state == LoadState.LOADING

    # Grouping

    @property
    def openrouter_groups(self) -> List[ProviderModelGroup]:
        return [g for g in self.groups if g.provider.id == OPENROUTER_ID]

    @property
    def other_groups(self) -> List[ProviderModelGroup]:
        return [g for g in self.groups if g.provider.id != OPENROUTER_ID]

    @staticmethod
    def company_of(group: ProviderModelGroup) -> str:
        return group.provider.company or group.provider.name

    @property
    def companies(self) -> List[str]:
        return [self.company_of(g) for g in self.openrouter_groups]

    @property
    def active_company(self) -> str:
        if self.selected_company in self.companies:
            return self.selected_company
        companies = self.companies
        return companies[0] if companies else ""

    def select_company(self, company: str) -> None:
        self.selected_company = company

    @property
    def visible_openrouter_group(self) -> Optional[ProviderModelGroup]:
        groups = self.openrouter_groups
        for group in groups:
            if self.company_of(group) == self.selected_company:
                return group
        return groups[0] if groups else None

    # Selection and form state

    def select_model(self, model_id: str, provider_id: str) -> None:
        self.selected_model = model_id
        self.selected_provider = provider_id

    def is_selected(self, model_id: str, provider_id: str) -> bool:
        return self.selected_model == model_id and self.selected_provider == provider_id

    def set_prompt(self, prompt: str) -> None:
        self.prompt = prompt

    def set_system_prompt(self, value: str) -> None:
        try:
            self.system_prompt = SystemPromptType(value)
        except ValueError:
            raise ValueError(f"Unknown system prompt type: {value!r}") from None

    def set_custom_system_prompt(self, text: str) -> None:
        self.custom_system_prompt = text

    def set_max_tokens(self, raw: Any) -> None:
        self.max_tokens = parse_max_tokens(raw)

    def reset_max_tokens(self) -> None:
        self.max_tokens = None

    @property
    def can_generate(self) -> bool:
        return bool(self.prompt.strip()) and bool(self.selected_model)

    def generation_request(self) -> GenerationRequest:
        if not self.can_generate:
            raise PickerError("A prompt and a selected model are required")
        custom = None
        if self.system_prompt == SystemPromptType.CUSTOM:
            custom = self.custom_system_prompt
        return GenerationRequest(
            prompt=self.prompt,
            model=self.selected_model,
            provider=self.selected_provider,
            system_prompt_type=self.system_prompt,
            custom_system_prompt=custom,
            max_tokens=self.max_tokens,
        )
