import os
import re
from functools import lru_cache
from pathlib import Path

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from folio.auth.roles import roles_with_permission

# Load .env early so $VAR references in app.yaml can be resolved
_env_file = Path.cwd() / ".env"
load_dotenv(_env_file)

# Matches $VAR_NAME environment variable references
ENV_VAR_PATTERN = re.compile(r"\$([A-Z_][A-Z0-9_]*)")


def interpolate_env_vars(value):
    """Recursively replace $VAR_NAME with os.environ values."""
    if isinstance(value, str):

        def replace(match):
            var = match.group(1)
            val = os.environ.get(var)
            if val is None:
                raise ValueError(f"Environment variable ${var} not set")
            return val

        return ENV_VAR_PATTERN.sub(replace, value)
    elif isinstance(value, dict):
        return {k: interpolate_env_vars(v) for k, v in value.items()}
    elif isinstance(value, list):
        return [interpolate_env_vars(item) for item in value]
    return value


def get_config_path() -> Path:
    """Location of app.yaml, overridable with FOLIO_CONFIG."""
    override = os.environ.get("FOLIO_CONFIG")
    if override:
        return Path(override)
    return Path.cwd() / "app.yaml"


def load_app_config() -> dict:
    """Load and parse app.yaml with environment variable interpolation."""
    config_path = get_config_path()

    if not config_path.exists():
        raise FileNotFoundError(f"app.yaml not found at {config_path}")

    with open(config_path, "r") as f:
        config = yaml.safe_load(f) or {}

    return interpolate_env_vars(config)


class DatabaseConfig(BaseModel):
    """Database connection configuration."""

    url: str = "sqlite+aiosqlite:///./folio.db"
    pool_size: int = 5
    pool_overflow: int = 10
    pool_timeout: int = 30
    pool_pre_ping: bool = True
    echo: bool = False
    # Create tables on startup instead of running migrations (dev/test only)
    create_all: bool = False


class LogfireConfig(BaseModel):
    """Logfire tracing configuration."""

    enabled: bool = False
    service_name: str = "folio"
    environment: str | None = None
    sample_rate: float = 1.0
    console: bool = False


class ContentConfig(BaseModel):
    """Dashboard content management configuration."""

    manager_roles: list[str] = Field(default_factory=lambda: roles_with_permission("manage-content"))
    fallback_menus: list[str] = ["main", "footer"]
    cache_enabled: bool = True


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Application
    debug: bool = False
    secret_key: str

    # Sections loaded from app.yaml
    db: DatabaseConfig = DatabaseConfig()
    logfire: LogfireConfig = LogfireConfig()
    content: ContentConfig = ContentConfig()


_SECTIONS = {
    "db": DatabaseConfig,
    "logfire": LogfireConfig,
    "content": ContentConfig,
}


@lru_cache
def get_settings() -> Settings:
    """Load settings from the environment, .env and app.yaml."""
    base_settings = Settings()

    try:
        app_config = load_app_config()
    except FileNotFoundError:
        return base_settings

    updates = {
        key: model(**app_config[key])
        for key, model in _SECTIONS.items()
        if isinstance(app_config.get(key), dict)
    }

    if updates:
        return base_settings.model_copy(update=updates)

    return base_settings
