from fastapi import APIRouter, Query
from fastapi.responses import JSONResponse
from typing import Any, Dict, List
import logging

from sitegen.core.errors import SitegenError
from sitegen.providers.config import get_available_providers, require_available_provider
from sitegen.providers.factory import create_provider_client
from sitegen.services.model_aggregator import ModelAggregator

router = APIRouter()
logger = logging.getLogger(__name__)


async def load_all_groups() -> List[Dict[str, Any]]:
    """Aggregated provider groups as plain JSON-ready dicts."""
    providers = get_available_providers()
    groups = await ModelAggregator().aggregate(providers)
    return [g.to_payload() for g in groups]


@router.get("/get-models/all")
async def get_all_models():
    """Return all models grouped by provider; OpenRouter is split by company."""
    try:
        return await load_all_groups()
    except Exception:
        logger.exception("Error fetching all models")
        return JSONResponse({"error": "Error fetching all models"}, status_code=500)


@router.get("/get-models")
async def get_models(provider: str = Query(..., min_length=1)):
    """Return the flat model list of a single provider."""
    try:
        config = require_available_provider(provider)
    except SitegenError as e:
        return JSONResponse({"error": str(e)}, status_code=400)
    try:
        models = await create_provider_client(config.id).list_models()
    except Exception:
        logger.exception("Error fetching models for provider %s", provider)
        return JSONResponse({"error": "Error fetching models"}, status_code=500)
    return [m.model_dump(exclude_none=True) for m in models]


@router.get("/providers")
async def get_providers():
    """Configured providers, for the provider selector."""
    return [
        p.descriptor().model_dump(by_alias=True, exclude_none=True)
        for p in get_available_providers()
    ]
