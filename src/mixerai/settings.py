from pathlib import Path
from typing import Literal, Optional, List

from pydantic import AnyHttpUrl, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class SupabaseSettings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="SUPABASE_", extra="ignore")
    url: AnyHttpUrl
    service_role_key: SecretStr


class AzureOpenAISettings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="AZURE_OPENAI_", extra="ignore")
    endpoint: AnyHttpUrl
    api_key: SecretStr
    api_version: str = "2024-06-01"
    deployment: str = "gpt-4o"


class Settings(BaseSettings):

    # ---- app/runtime ----
    env: Literal["dev", "staging", "prod"] = "dev"
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    verify_ssl: bool = True

    # ---- API server configuration ----
    api_host: str = "127.0.0.1"  # localhost for dev, 0.0.0.0 for docker/prod
    api_port: int = 8000
    api_reload: bool = True  # Auto-reload on code changes (dev only)
    api_workers: int = 1
    cors_origins: List[str] = ["*"]

    # ---- data access ----
    repository_backend: Literal["supabase", "local"] = "supabase"
    local_seed_path: Optional[Path] = None  # JSON fixture for the local repository
    auth_cookie_name: str = "sb-access-token"

    # ---- AI tools ----
    tool_rate_limit_requests: int = 10
    tool_rate_limit_period_seconds: float = 60.0
    ai_call_delay_seconds: float = 5.0  # pause before each per-item AI call in bulk tools
    web_fetch_timeout: float = 10.0
    web_content_max_chars: int = 5000

    model_config = SettingsConfigDict(
        env_file = ".env",
        env_prefix="APP_",      # APP_ENV, APP_LOG_LEVEL, etc.
        env_nested_delimiter='__',
        extra = "ignore"
    )

    # ---- integrations ----
    supabase: Optional[SupabaseSettings] = None  # APP_SUPABASE__URL, APP_SUPABASE__SERVICE_ROLE_KEY
    azure_openai: Optional[AzureOpenAISettings] = None


def get_settings() -> Settings:
    """Singleton accessor to avoid reparsing .env on every import."""
    return Settings()
