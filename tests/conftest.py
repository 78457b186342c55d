import pytest

from sitegen.config import get_settings

PROVIDER_ENV_VARS = [
    "DEEPSEEK_API_KEY",
    "OPENROUTER_API_KEY",
    "OLLAMA_API_BASE",
    "LM_STUDIO_API_BASE",
    "OPENAI_COMPATIBLE_API_BASE",
    "OPENAI_COMPATIBLE_API_KEY",
]


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture(autouse=True)
def clean_provider_env(monkeypatch):
    """Keep real credentials from the shell out of the tests."""
    for name in PROVIDER_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
