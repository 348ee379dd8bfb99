"""Shared pytest fixtures."""

import pytest
import yaml
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from folio.db.base import Base
from folio.db.models import Media
from folio.lib.cache import view_cache
from folio.lib.hooks import hooks


@pytest.fixture
def temp_app_yaml(tmp_path):
    """Create a temporary app.yaml file for testing."""
    config_path = tmp_path / "app.yaml"

    def _create_config(config: dict):
        with open(config_path, "w") as f:
            yaml.safe_dump(config, f)
        return config_path

    return _create_config


@pytest.fixture(autouse=True)
def clean_hooks():
    """Start and end every test with an empty hook registry and view cache."""
    hooks.clear()
    view_cache.clear()
    view_cache.enabled = True
    yield
    hooks.clear()
    view_cache.clear()


@pytest.fixture
def db_url(tmp_path):
    return f"sqlite+aiosqlite:///{tmp_path / 'folio.db'}"


@pytest.fixture
async def engine(db_url):
    import folio.db.models  # noqa: F401

    engine = create_async_engine(db_url)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_maker(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def db_session(session_maker):
    async with session_maker() as session:
        yield session


@pytest.fixture
def make_media(session_maker):
    """Factory inserting Media rows, returning them committed."""

    async def _make(count: int = 1) -> list[Media]:
        async with session_maker() as session:
            media = [
                Media(url=f"https://cdn.example.com/photo-{i}.jpg", filename=f"photo-{i}.jpg")
                for i in range(count)
            ]
            session.add_all(media)
            await session.commit()
            return media

    return _make
