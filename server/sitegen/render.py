from __future__ import annotations
from typing import Dict
from urllib.parse import urlencode
import os
from jinja2 import Environment, FileSystemLoader, select_autoescape

from sitegen.picker import SYSTEM_PROMPT_LABELS, ModelPicker
from sitegen.schemas.models import ModelInfo, ProviderModelGroup

# Jinja environment that looks in sitegen/templates
_env = Environment(
    loader=FileSystemLoader(os.path.join(os.path.dirname(__file__), "templates")),
    autoescape=select_autoescape(["html", "xml"]),
    enable_async=False,
)

MODELS_FRAGMENT_PATH = "/picker/models"


def picker_query(picker: ModelPicker) -> Dict[str, str]:
    """Form state carried in links so a click keeps the rest of the form."""
    return {
        "prompt": picker.prompt,
        "company": picker.active_company,
        "model": picker.selected_model,
        "provider": picker.selected_provider,
        "system_prompt": picker.system_prompt.value,
        "custom_system_prompt": picker.custom_system_prompt,
        "max_tokens": str(picker.max_tokens or ""),
    }


def render_models_section(picker: ModelPicker) -> str:
    """The model list part of the page; a loading notice until groups arrive."""
    query = picker_query(picker)

    def link_for(group: ProviderModelGroup, model: ModelInfo) -> str:
        return "/?" + urlencode(dict(query, model=model.id, provider=group.provider.id))

    return _env.get_template("partials/models_section.html").render(picker=picker, link_for=link_for)


def render_picker_page(picker: ModelPicker, generation_url: str) -> str:
    generation_fields = picker.generation_request().to_payload() if picker.can_generate else {}
    base = _env.get_template("picker.html")
    return base.render(
        picker=picker,
        system_prompt_labels=SYSTEM_PROMPT_LABELS,
        models_section=render_models_section(picker),
        models_url=MODELS_FRAGMENT_PATH + "?" + urlencode(picker_query(picker)),
        generation_url=generation_url,
        generation_fields=generation_fields,
    )
