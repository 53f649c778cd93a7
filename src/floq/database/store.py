"""Task Store - Asynchronous row store over SQLAlchemy.

This module provides the TaskStore the history commands mutate. Each public
coroutine wraps a synchronous SQLAlchemy session with asyncio.to_thread() so
the event loop is never blocked, and resolves only after the session commits.

Example usage:
    store = TaskStore(orm_manager)
    await store.insert("tasks", task.to_row())
    rows = await store.select("comments", {"task_id": task.id})
"""

import asyncio
import logging
from typing import Any, Dict, List, Mapping, Sequence

from sqlalchemy import Table, and_, delete, insert, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from floq.database.models import Base
from floq.database.orm_manager import ORMManager
from floq.domain.exceptions import StoreError
from floq.domain.interfaces.task_store import (
    DeleteRows,
    InsertRow,
    StoreOperation,
    UpdateRows,
)

logger = logging.getLogger(__name__)


class TaskStore:
    """Row store implementing the ITaskStore contract.

    Failures of any kind are raised as StoreError; nothing is retried.
    """

    def __init__(self, orm_manager: ORMManager):
        self.orm_manager = orm_manager

    # =========================================================================
    # Statement helpers
    # =========================================================================

    def _table(self, name: str) -> Table:
        try:
            return Base.metadata.tables[name]
        except KeyError:
            raise StoreError("access", name, "Unknown table") from None

    def _where(self, table: Table, where: Mapping[str, Any] | None) -> Any:
        if not where:
            return None
        clauses = []
        for column, value in where.items():
            col = table.c[column]
            clauses.append(col.is_(None) if value is None else col == value)
        return and_(*clauses)

    def _run(self, session: Session, op: StoreOperation) -> int:
        table = self._table(op.table)
        if isinstance(op, InsertRow):
            session.execute(insert(table).values(**dict(op.row)))
            return 1
        if isinstance(op, UpdateRows):
            stmt = update(table).values(**dict(op.patch))
            condition = self._where(table, op.where)
            if condition is not None:
                stmt = stmt.where(condition)
            return session.execute(stmt).rowcount
        if isinstance(op, DeleteRows):
            stmt = delete(table)
            condition = self._where(table, op.where)
            if condition is not None:
                stmt = stmt.where(condition)
            return session.execute(stmt).rowcount
        raise StoreError("apply", op.table, f"Unsupported operation {type(op).__name__}")

    def _execute_sync(self, operation: str, table: str, ops: Sequence[StoreOperation]) -> int:
        """Run ``ops`` in a single committed transaction."""
        try:
            with self.orm_manager.get_session() as session:
                return sum(self._run(session, op) for op in ops)
        except StoreError:
            raise
        except (SQLAlchemyError, KeyError, RuntimeError) as e:
            logger.warning("Store %s on %s failed: %s", operation, table, e)
            raise StoreError(operation, table, str(e)) from e

    # =========================================================================
    # ITaskStore
    # =========================================================================

    async def insert(self, table: str, row: Mapping[str, Any]) -> None:
        """Insert one row."""
        await asyncio.to_thread(self._execute_sync, "insert", table, [InsertRow(table, row)])

    async def update(
        self, table: str, where: Mapping[str, Any], patch: Mapping[str, Any]
    ) -> int:
        """Update rows matching ``where``; returns the number of rows changed."""
        return await asyncio.to_thread(
            self._execute_sync, "update", table, [UpdateRows(table, where, patch)]
        )

    async def delete(self, table: str, where: Mapping[str, Any]) -> int:
        """Delete rows matching ``where``; returns the number of rows removed."""
        return await asyncio.to_thread(
            self._execute_sync, "delete", table, [DeleteRows(table, where)]
        )

    async def select(
        self, table: str, where: Mapping[str, Any] | None = None
    ) -> List[Dict[str, Any]]:
        """Select rows matching ``where`` as column dictionaries.

        Rows come back ordered by ``created_at`` when the table has one.
        """

        def _sync_select() -> List[Dict[str, Any]]:
            tbl = self._table(table)
            try:
                stmt = select(tbl)
                condition = self._where(tbl, where)
                if condition is not None:
                    stmt = stmt.where(condition)
                if "created_at" in tbl.c:
                    stmt = stmt.order_by(tbl.c.created_at.asc(), tbl.c.id.asc())
                with self.orm_manager.get_session() as session:
                    return [dict(row._mapping) for row in session.execute(stmt)]
            except (SQLAlchemyError, KeyError, RuntimeError) as e:
                logger.warning("Store select on %s failed: %s", table, e)
                raise StoreError("select", table, str(e)) from e

        return await asyncio.to_thread(_sync_select)

    async def apply(self, operations: Sequence[StoreOperation]) -> None:
        """Run ``operations`` atomically: either all commit or none do."""
        if not operations:
            return
        tables = ",".join(sorted({op.table for op in operations}))
        await asyncio.to_thread(self._execute_sync, "apply", tables, list(operations))
