"""All-or-nothing unit of work on an async session."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from folio.lib.exceptions import StorageError

logger = logging.getLogger(__name__)


@asynccontextmanager
async def atomic(db_session: AsyncSession, description: str = "transaction") -> AsyncIterator[AsyncSession]:
    """Commit everything done inside the block, or roll all of it back.

    Any exception (including ``CancelledError`` from an aborted request)
    rolls the session back before propagating. SQLAlchemy errors are
    re-raised as :class:`StorageError` with the original as ``__cause__``.

    Usage:
        async with atomic(db_session, "swap hero slides"):
            a.order, b.order = b.order, a.order
    """
    try:
        yield db_session
        await db_session.commit()
    except SQLAlchemyError as exc:
        await db_session.rollback()
        logger.warning("Rolled back %s", description, exc_info=True)
        raise StorageError() from exc
    except BaseException:
        await db_session.rollback()
        raise
