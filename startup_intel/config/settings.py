"""Application settings with environment variable support."""

from pathlib import Path
from typing import Optional

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


_PACKAGE_DIR = Path(__file__).parent.parent.resolve()

# Plain environment variable name for each provider's key, used in error messages
API_KEY_ENV_VARS = {
    "openai": "OPENAI_API_KEY",
    "anthropic": "ANTHROPIC_API_KEY",
    "gemini": "GEMINI_API_KEY",
}


class Settings(BaseSettings):
    """Application settings with environment variable support."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="SI_",  # SI_LLM_MODEL, SI_FETCH_TIMEOUT_SECONDS, etc.
        populate_by_name=True,
        extra="ignore",
    )

    # LLM
    llm_provider: str = "openai"  # "openai", "anthropic", or "gemini"
    openai_api_key: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("openai_api_key", "SI_OPENAI_API_KEY", "OPENAI_API_KEY"),
    )
    anthropic_api_key: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("anthropic_api_key", "SI_ANTHROPIC_API_KEY", "ANTHROPIC_API_KEY"),
    )
    gemini_api_key: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("gemini_api_key", "SI_GEMINI_API_KEY", "GEMINI_API_KEY"),
    )
    llm_model: Optional[str] = None  # falls back to the provider default in LLMClient
    llm_max_tokens: int = 1500
    llm_temperature: float = 0.3

    # Fetching
    fetch_timeout_seconds: float = 10.0
    fetch_user_agent: str = (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
    )

    # Extraction
    extract_max_chars: int = 4000  # token budget for the model call
    extract_min_section_chars: int = 100
    min_content_chars: int = 50

    # Catalog
    catalog_path: Path = _PACKAGE_DIR / "catalog" / "data" / "companies.json"
    page_size: int = 10

    # Server
    host: str = "127.0.0.1"
    port: int = 8000


settings = Settings()
