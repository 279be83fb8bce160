"""Transaction scope and storage error translation.

Services never call commit/rollback directly; every mutation runs inside
``atomic()`` so that a failure at any statement leaves prior state intact.
"""

from collections.abc import AsyncIterator, Iterator
from contextlib import asynccontextmanager, contextmanager

import structlog
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from guideforge.services.exceptions import ConflictError, StorageError

logger = structlog.get_logger(__name__)


@contextmanager
def storage_errors(entity: str, operation: str) -> Iterator[None]:
    """Translate SQLAlchemy errors into service errors with context.

    Usage:
        with storage_errors("manual", "load"):
            result = await session.execute(statement)
    """
    try:
        yield
    except IntegrityError as exc:
        logger.warning("Integrity violation", entity=entity, operation=operation, error=str(exc.orig))
        raise ConflictError(f"Conflicting {entity} state during {operation}") from exc
    except SQLAlchemyError as exc:
        logger.error("Database error", entity=entity, operation=operation, error=str(exc))
        raise StorageError(entity, operation, detail=type(exc).__name__) from exc


@asynccontextmanager
async def atomic(session: AsyncSession, *, entity: str, operation: str) -> AsyncIterator[AsyncSession]:
    """Run the enclosed block as one transaction.

    Commits when the block finishes, rolls back on any exception (including
    service errors raised by validation inside the block) and re-raises it,
    translated by storage_errors() when it comes from the database.

    Usage:
        async with atomic(session, entity="step", operation="delete"):
            await steps.delete(step)
            await steps.shift_after(manual_id, order_number, -1)
    """
    try:
        with storage_errors(entity, operation):
            yield session
            await session.commit()
    except BaseException:
        await session.rollback()
        raise
