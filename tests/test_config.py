"""Tests for settings loading and app assembly helpers."""

import hashlib

import pytest

from folio.app_factory import create_db_config, create_session_config
from folio.config import ContentConfig, DatabaseConfig, Settings, get_settings, interpolate_env_vars


@pytest.fixture
def fresh_settings(monkeypatch, temp_app_yaml):
    """Point get_settings at a temporary app.yaml and clear its cache."""

    def _load(config: dict) -> Settings:
        monkeypatch.setenv("FOLIO_CONFIG", str(temp_app_yaml(config)))
        monkeypatch.setenv("SECRET_KEY", "test-secret")
        get_settings.cache_clear()
        return get_settings()

    yield _load
    get_settings.cache_clear()


class TestInterpolation:
    def test_replaces_nested_values(self, monkeypatch):
        monkeypatch.setenv("DB_HOST", "db.internal")

        result = interpolate_env_vars({"db": {"url": "postgresql+asyncpg://$DB_HOST/folio"}, "tags": ["$DB_HOST"]})

        assert result == {"db": {"url": "postgresql+asyncpg://db.internal/folio"}, "tags": ["db.internal"]}

    def test_missing_variable_raises(self, monkeypatch):
        monkeypatch.delenv("FOLIO_MISSING", raising=False)

        with pytest.raises(ValueError, match="FOLIO_MISSING"):
            interpolate_env_vars("$FOLIO_MISSING")


class TestGetSettings:
    def test_merges_yaml_sections(self, fresh_settings):
        settings = fresh_settings(
            {
                "db": {"url": "sqlite+aiosqlite:///./other.db", "echo": True},
                "content": {"manager_roles": ["admin"], "cache_enabled": False},
            }
        )

        assert settings.secret_key == "test-secret"
        assert settings.db.url == "sqlite+aiosqlite:///./other.db"
        assert settings.db.echo is True
        assert settings.content.manager_roles == ["admin"]
        assert settings.content.cache_enabled is False
        assert settings.logfire.enabled is False

    def test_missing_yaml_uses_defaults(self, monkeypatch, tmp_path):
        monkeypatch.setenv("FOLIO_CONFIG", str(tmp_path / "absent.yaml"))
        monkeypatch.setenv("SECRET_KEY", "test-secret")
        get_settings.cache_clear()
        try:
            settings = get_settings()
        finally:
            get_settings.cache_clear()

        assert settings.db.url == DatabaseConfig().url

    def test_default_manager_roles(self):
        assert sorted(ContentConfig().manager_roles) == ["admin", "editor"]
        assert ContentConfig().fallback_menus == ["main", "footer"]


class TestAppAssembly:
    def test_session_secret_is_sha256_of_key(self):
        config = create_session_config("test-secret-key")

        assert config.secret == hashlib.sha256(b"test-secret-key").digest()
        assert config.httponly is True
        assert config.samesite == "lax"

    def test_sqlite_skips_pool_options(self):
        settings = Settings(secret_key="s", db=DatabaseConfig(url="sqlite+aiosqlite:///./t.db", echo=True))

        db_config = create_db_config(settings)

        assert db_config.engine_config.echo is True
        assert db_config.session_config.expire_on_commit is False

    def test_server_databases_get_pool_options(self):
        settings = Settings(secret_key="s", db=DatabaseConfig(url="postgresql+asyncpg://u:p@db/folio", pool_size=12))

        db_config = create_db_config(settings)

        assert db_config.engine_config.pool_size == 12
        assert db_config.engine_config.pool_pre_ping is True
