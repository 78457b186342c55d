"""Model picker page.

``/`` returns the page shell with the model list still loading; the page
then pulls ``/picker/models``, which reads ``/api/get-models/all`` and
renders the model list fragment.
"""

from __future__ import annotations
from typing import Optional

import httpx
from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import HTMLResponse

from sitegen.config import get_settings
from sitegen.picker import ModelPicker, SystemPromptType, fetch_grouped_models
from sitegen.render import MODELS_FRAGMENT_PATH, render_models_section, render_picker_page

router = APIRouter()


def picker_from_query(
    prompt: str = "",
    company: str = "",
    model: str = "",
    provider: str = "",
    system_prompt: str = SystemPromptType.DEFAULT.value,
    custom_system_prompt: str = "",
    max_tokens: Optional[str] = Query(default=None),
) -> ModelPicker:
    picker = ModelPicker()
    picker.set_prompt(prompt)
    picker.select_company(company)
    if model and provider:
        picker.select_model(model, provider)
    try:
        picker.set_system_prompt(system_prompt)
    except ValueError:
        picker.set_system_prompt(SystemPromptType.DEFAULT.value)
    picker.set_custom_system_prompt(custom_system_prompt)
    picker.set_max_tokens(max_tokens)
    return picker


@router.get("/", response_class=HTMLResponse)
async def picker_page(picker: ModelPicker = Depends(picker_from_query)):
    picker.start_loading()
    return render_picker_page(picker, get_settings().generation_url)


@router.get(MODELS_FRAGMENT_PATH, response_class=HTMLResponse)
async def picker_models(request: Request, picker: ModelPicker = Depends(picker_from_query)):
    # Served by this same app, so route the request straight into it
    transport = httpx.ASGITransport(app=request.app)
    base_url = str(request.base_url)
    await picker.load(lambda: fetch_grouped_models(base_url, transport=transport))
    return render_models_section(picker)
