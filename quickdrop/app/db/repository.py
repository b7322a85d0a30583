"""
Document repository over the async SQLAlchemy session.

Components never talk to the session directly: they get a Repository
injected per request. Conditional writes go through ``update_where`` with
the guard field in the criteria; a modified count of zero means the guard
did not hold.
"""

import logging
from contextlib import asynccontextmanager
from functools import wraps
from typing import Any, List, Optional, Sequence

from fastapi import Depends
from sqlalchemy import select, update, delete
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from quickdrop.app.core.exceptions import ConflictError, InternalServiceError
from quickdrop.app.db.session import get_db

logger = logging.getLogger(__name__)


def _translate(exc: SQLAlchemyError) -> Exception:
    if isinstance(exc, IntegrityError):
        return ConflictError("Document conflicts with an existing record")
    logger.error("Storage failure: %s: %s", type(exc).__name__, exc)
    return InternalServiceError("Storage operation failed")


def _storage_call(func):
    @wraps(func)
    async def wrapper(self, *args, **kwargs):
        try:
            return await func(self, *args, **kwargs)
        except SQLAlchemyError as exc:
            await self.session.rollback()
            raise _translate(exc) from exc
    return wrapper


class Repository:
    """Generic find/insert/update/delete over the mapped collections."""

    def __init__(self, session: AsyncSession):
        self.session = session

    @_storage_call
    async def get(self, model, doc_id: str):
        """Fetch by primary key, always re-reading the row from storage."""
        return await self.session.get(model, doc_id, populate_existing=True)

    @_storage_call
    async def find_one(self, model, *criteria):
        result = await self.session.execute(
            select(model).where(*criteria).execution_options(populate_existing=True)
        )
        return result.scalars().first()

    @_storage_call
    async def find(self, model, *criteria, order_by: Optional[Sequence[Any]] = None) -> List:
        stmt = select(model)
        if criteria:
            stmt = stmt.where(*criteria)
        if order_by is not None:
            stmt = stmt.order_by(*order_by)
        result = await self.session.execute(stmt.execution_options(populate_existing=True))
        return list(result.scalars().all())

    @_storage_call
    async def insert(self, document):
        self.session.add(document)
        await self.session.flush()
        await self.session.refresh(document)
        return document

    @_storage_call
    async def update_where(self, model, *criteria, **values) -> int:
        """Apply ``values`` to every row matching ``criteria``; return the modified count."""
        result = await self.session.execute(
            update(model)
            .where(*criteria)
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount

    @_storage_call
    async def delete_where(self, model, *criteria) -> int:
        result = await self.session.execute(
            delete(model)
            .where(*criteria)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount

    @_storage_call
    async def commit(self) -> None:
        await self.session.commit()

    async def rollback(self) -> None:
        await self.session.rollback()

    @asynccontextmanager
    async def transaction(self):
        """
        Unit of work: commit when the block exits cleanly, roll back otherwise.

        Every write issued inside the block lands atomically or not at all.
        """
        try:
            yield self
        except BaseException:
            await self.rollback()
            raise
        await self.commit()


async def get_repository(db: AsyncSession = Depends(get_db)) -> Repository:
    """FastAPI dependency yielding a Repository bound to the request's session."""
    return Repository(db)
