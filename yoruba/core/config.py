from pydantic_settings import BaseSettings
from dotenv import load_dotenv
import logging
import os
from pathlib import Path

_logger = logging.getLogger(__name__)

# Load .env explicitly before creating Settings.
# Look for .env in the project root (parent of the yoruba package)
project_dir = Path(__file__).parent.parent.parent
env_path = project_dir / ".env"

if env_path.exists():
    load_dotenv(env_path, override=False)
    _logger.info(f"Loaded .env file from: {env_path}")
else:
    # Fallback to current directory
    current_env = Path(".env")
    if current_env.exists():
        load_dotenv(current_env, override=False)
        _logger.info(f"Loaded .env file from: {current_env.absolute()}")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Database
    database_url: str = "sqlite:///./yoruba.db"

    # API
    api_v1_prefix: str = "/api/v1"

    # CORS
    cors_origins: list[str] = ["*"]

    # Deployment environment ("development", "dev" or "local" expose tracebacks)
    environment: str = "production"

    # Lives economy
    max_lives: int = 5
    life_regeneration_minutes: int = 30
    life_regeneration_mode: str = "single"  # 'single' or 'catch_up'
    extra_lives_cost: int = 15

    # Leaderboard / admin listings
    leaderboard_limit: int = 20
    admin_page_size: int = 10

    # Seed trails, levels and exercises when the user table is empty
    seed_on_startup: bool = False

    class Config:
        env_file = ".env"
        case_sensitive = False

    def __init__(self, **kwargs):
        # Hosting platforms provide DATABASE_URL uppercase
        if not kwargs.get("database_url") and os.getenv("DATABASE_URL"):
            kwargs["database_url"] = os.getenv("DATABASE_URL", "")
        super().__init__(**kwargs)

    @property
    def is_development(self) -> bool:
        return self.environment.lower() in ("development", "dev", "local")


# Create settings instance
settings = Settings()

if settings.life_regeneration_mode not in ("single", "catch_up"):
    raise ValueError(
        f"LIFE_REGENERATION_MODE must be 'single' or 'catch_up', got {settings.life_regeneration_mode!r}"
    )
