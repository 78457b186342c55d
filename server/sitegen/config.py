from functools import lru_cache
from pydantic import AnyHttpUrl
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List, Optional


class Settings(BaseSettings):
    server_port: int = 8000
    log_level: str = "INFO"
    # Allow both localhost and 127.0.0.1 for local development
    allowed_origins: List[AnyHttpUrl] = [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
    ]  # type: ignore

    # Cloud providers are available once their key is set
    deepseek_api_key: Optional[str] = None
    deepseek_api_base: str = "https://api.deepseek.com/v1"
    openrouter_api_key: Optional[str] = None
    openrouter_api_base: str = "https://openrouter.ai/api/v1"
    # Public listing with organization metadata, used for company grouping
    openrouter_models_url: str = "https://openrouter.ai/api/v1/models"

    # Local / self-hosted providers are available once their base URL is set
    ollama_api_base: Optional[str] = None
    lm_studio_api_base: Optional[str] = None
    openai_compatible_api_base: Optional[str] = None
    openai_compatible_api_key: Optional[str] = None

    request_timeout_seconds: float = 30.0
    # Code generation backend the picker page submits to
    generation_url: str = "/api/generate-code"

    model_config = SettingsConfigDict(
        env_prefix="",
        case_sensitive=False,
        env_file=("../.env", ".env"),
        extra="ignore",  # ignore env vars not defined as fields
    )


@lru_cache()
def get_settings() -> Settings:
    return Settings()
