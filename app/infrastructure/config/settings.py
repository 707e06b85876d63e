"""Application settings."""

from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration settings."""

    debug_mode: bool = False
    lead_repository: str = "in_memory"  # in_memory or postgres
    database_url: str = ""  # Required when lead_repository=postgres
    max_auto_chain_steps: int = 3  # Transitions applied per advance, chained hops included
    scheduler_concurrency: int = 1  # Due leads advanced in parallel per tick
    scheduler_organization_id: Optional[str] = None  # Tenant scope for the cron tick
    scheduler_actor: str = "system"
    api_host: str = "0.0.0.0"
    api_port: int = 8000

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        env_prefix="",
    )


settings = Settings()
