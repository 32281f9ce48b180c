"""
Application settings and configuration management.
All values should come from environment variables for production safety.
"""
from typing import Dict

from pydantic_settings import BaseSettings, SettingsConfigDict

from core.utils import EnvironmentManager


class Settings(BaseSettings):
    """Application settings - all values from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False, extra="ignore")

    # Hosted relational backend (PostgREST interface)
    supabase_url: str = ""
    supabase_key: str = ""
    rest_path: str = "/rest/v1"

    # Request behaviour
    api_request_timeout: float = 30.0
    max_retries: int = 3  # retries after the first attempt
    retry_delay: float = 0.5
    api_user_agent: str = "clubstats/0.1.0"

    # Leaderboards: compact (mobile) and full views
    leaderboard_compact_size: int = 3
    leaderboard_full_size: int = 5
    recent_results_limit: int = 5

    # Aggregation defaults
    default_category_label: str = "Default"
    active_player_status: str = "active"

    @property
    def rest_base_url(self) -> str:
        """Base URL of the table endpoints."""
        return f"{self.supabase_url.rstrip('/')}{self.rest_path}"

    @property
    def rest_headers(self) -> Dict[str, str]:
        """Headers every table request carries."""
        return {
            "apikey": self.supabase_key,
            "Authorization": f"Bearer {self.supabase_key}",
            "Accept": "application/json",
            "User-Agent": self.api_user_agent,
        }


def get_settings() -> Settings:
    """Build settings after loading a local .env into the environment."""
    EnvironmentManager.load_env_vars()
    return Settings()


# Global settings instance
settings = get_settings()
