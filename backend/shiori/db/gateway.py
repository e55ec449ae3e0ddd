"""Persistence gateway - typed CRUD over the itinerary tables.

All writes go through this class so constraint failures are classified in
one place and a batch of writes can be grouped into a single transaction.
"""

import logging
from collections.abc import AsyncIterator, Awaitable, Callable, Mapping, Sequence
from contextlib import asynccontextmanager
from typing import Any, TypeVar

from sqlalchemy import delete, func, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from backend.shiori.db.models import Base
from backend.shiori.errors import StorageError

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=Base)
T = TypeVar("T")


def _storage_error(exc: SQLAlchemyError) -> StorageError:
    if isinstance(exc, IntegrityError):
        detail = str(exc.orig) if exc.orig is not None else str(exc)
        return StorageError(f"Constraint violation: {detail}")
    return StorageError(f"Storage failure: {type(exc).__name__}")


class PersistenceGateway:
    """Gateway over an AsyncSession.

    Reads always hit the database (``populate_existing``) so rows changed by
    bulk statements or removed by FK cascades are never served stale from the
    session identity map.
    """

    def __init__(self, session: AsyncSession) -> None:
        self._session = session
        self._depth = 0

    @property
    def in_transaction(self) -> bool:
        """True while inside a ``transaction()`` scope."""
        return self._depth > 0

    async def get(self, model: type[ModelT], record_id: str) -> ModelT | None:
        """Fetch one row by primary key, or None."""
        stmt = (
            select(model)
            .where(model.id == record_id)  # type: ignore[attr-defined]
            .execution_options(populate_existing=True)
        )
        result = await self._execute(stmt)
        return result.scalar_one_or_none()

    async def list_where(
        self,
        model: type[ModelT],
        *,
        order_by: Sequence[Any] = (),
        **filters: Any,
    ) -> list[ModelT]:
        """Fetch all rows matching equality filters.

        Args:
            model: ORM class
            order_by: Column expressions for ORDER BY
            **filters: attribute=value equality filters

        Returns:
            Matching rows in the requested order
        """
        stmt = (
            select(model)
            .filter_by(**filters)
            .order_by(*order_by)
            .execution_options(populate_existing=True)
        )
        result = await self._execute(stmt)
        return list(result.scalars().all())

    async def max_value(self, model: type[ModelT], attribute: str, **filters: Any) -> Any:
        """Return MAX(attribute) over rows matching the filters (None if no rows)."""
        column = getattr(model, attribute)
        stmt = select(func.max(column)).where(
            *(getattr(model, name) == value for name, value in filters.items())
        )
        result = await self._execute(stmt)
        return result.scalar_one_or_none()

    async def insert(self, record: ModelT) -> ModelT:
        """Insert a new row and flush so constraint failures surface immediately."""
        self._session.add(record)
        try:
            await self._session.flush()
        except SQLAlchemyError as e:
            raise _storage_error(e) from e
        return record

    async def update(
        self,
        model: type[ModelT],
        record_id: str,
        fields: Mapping[str, Any],
        **where: Any,
    ) -> ModelT | None:
        """Write only the supplied fields.

        Args:
            model: ORM class
            record_id: Primary key
            fields: attribute -> new value; attributes not present are untouched
            **where: Extra equality guards (e.g. itinerary_id) on the target row

        Returns:
            The re-read row, or None if no row matched
        """
        if fields:
            values = {getattr(model, name): value for name, value in fields.items()}
            stmt = update(model).where(model.id == record_id)  # type: ignore[attr-defined]
            for name, value in where.items():
                stmt = stmt.where(getattr(model, name) == value)
            result = await self._execute(stmt.values(values))
            if result.rowcount == 0:
                return None
        return await self.get(model, record_id)

    async def delete(self, model: type[ModelT], record_id: str) -> bool:
        """Delete one row by primary key; FK rules handle the dependents.

        Returns:
            True if a row was deleted
        """
        stmt = delete(model).where(model.id == record_id)  # type: ignore[attr-defined]
        result = await self._execute(stmt)
        return result.rowcount > 0

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator["PersistenceGateway"]:
        """All-or-nothing scope for a batch of writes.

        Scopes nest; only the outermost one commits. Any exception rolls the
        whole unit back.
        """
        outermost = self._depth == 0
        self._depth += 1
        try:
            yield self
            if outermost:
                await self._session.commit()
        except SQLAlchemyError as e:
            if outermost:
                await self._session.rollback()
            logger.warning(f"[transaction] rolled back: {type(e).__name__}")
            raise _storage_error(e) from e
        except BaseException:
            if outermost:
                await self._session.rollback()
            raise
        finally:
            self._depth -= 1

    async def run_in_transaction(self, fn: Callable[["PersistenceGateway"], Awaitable[T]]) -> T:
        """Run ``fn(gateway)`` inside one transaction and return its result."""
        async with self.transaction():
            return await fn(self)

    async def _execute(self, stmt: Any) -> Any:
        try:
            return await self._session.execute(stmt)
        except SQLAlchemyError as e:
            raise _storage_error(e) from e
