"""Litestar application assembly."""

from __future__ import annotations

import hashlib
import logging
from typing import Any

from advanced_alchemy.config import EngineConfig
from advanced_alchemy.extensions.litestar import (
    AsyncSessionConfig,
    SQLAlchemyAsyncConfig,
    SQLAlchemyPlugin,
)
from litestar import Litestar
from litestar.datastructures import State
from litestar.middleware.session.client_side import CookieBackendConfig

from folio.admin import ADMIN_CONTROLLERS
from folio.config import Settings, get_settings
from folio.controllers.public import PublicController
from folio.db.base import Base
from folio.lib import observability
from folio.lib.cache import register_cache_invalidation, view_cache
from folio.lib.exceptions import EXCEPTION_HANDLERS

logger = logging.getLogger(__name__)


def create_session_config(secret_key: str, max_age: int = 86400, secure: bool = False) -> CookieBackendConfig:
    """Create a cookie-backed session config."""
    session_secret = hashlib.sha256(secret_key.encode()).digest()
    return CookieBackendConfig(
        secret=session_secret,
        key="session",
        max_age=max_age,
        httponly=True,
        secure=secure,
        samesite="lax",
    )


def create_db_config(settings: Settings) -> SQLAlchemyAsyncConfig:
    if "sqlite" in settings.db.url:
        engine_config = EngineConfig(echo=settings.db.echo)
    else:
        engine_kwargs: dict[str, Any] = dict(
            pool_size=settings.db.pool_size,
            max_overflow=settings.db.pool_overflow,
            pool_timeout=settings.db.pool_timeout,
            pool_pre_ping=settings.db.pool_pre_ping,
            echo=settings.db.echo,
        )
        engine_config = EngineConfig(**engine_kwargs)

    return SQLAlchemyAsyncConfig(
        connection_string=settings.db.url,
        metadata=Base.metadata,
        create_all=settings.db.create_all,
        session_config=AsyncSessionConfig(expire_on_commit=False),
        engine_config=engine_config,
    )


def create_app(settings: Settings | None = None) -> Litestar:
    """Create and configure the Litestar application.

    Args:
        settings: Explicit settings, defaults to :func:`~folio.config.get_settings`

    Returns:
        The Litestar app, not yet wrapped for tracing
    """
    settings = settings or get_settings()
    observability.configure(settings.logfire)

    db_config = create_db_config(settings)
    session_config = create_session_config(settings.secret_key, secure=not settings.debug)

    async def on_startup(_app: Litestar) -> None:
        """Wire cache invalidation and database tracing."""
        view_cache.enabled = settings.content.cache_enabled
        view_cache.clear()
        register_cache_invalidation()
        observability.instrument_sqlalchemy(db_config.get_engine())
        logger.info("Folio started (cache %s)", "on" if view_cache.enabled else "off")

    return Litestar(
        route_handlers=[PublicController, *ADMIN_CONTROLLERS],
        on_startup=[on_startup],
        plugins=[SQLAlchemyPlugin(config=db_config)],
        middleware=[session_config.middleware],
        exception_handlers=EXCEPTION_HANDLERS,
        state=State({"settings": settings}),
        debug=settings.debug,
    )
