"""
ORM Manager - SQLite engine and session lifecycle for floq.

One instance is created per application run by ``AppContext`` and closed
with it; there is no module-level singleton. The engine is shared between
the event loop and the worker threads the store runs its queries on.
"""

import logging
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Dict, Generator, Optional

from sqlalchemy import create_engine, event, func, inspect, select
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from floq.config import get_default_db_path
from floq.database.models import Base, Comment, Task

logger = logging.getLogger(__name__)

# Applied on every new DBAPI connection
SQLITE_PRAGMAS = (
    "PRAGMA journal_mode=WAL",
    "PRAGMA synchronous=NORMAL",
    "PRAGMA foreign_keys=ON",
)


def _apply_pragmas(dbapi_connection: Any, connection_record: Any) -> None:
    cursor = dbapi_connection.cursor()
    try:
        for pragma in SQLITE_PRAGMAS:
            cursor.execute(pragma)
    finally:
        cursor.close()


class ORMManager:
    """
    Owner of the SQLite engine for one floq database file.

    The schema is created on construction, so a fresh path yields a ready
    database. ``close()`` disposes the engine; any later session request
    raises RuntimeError.
    """

    def __init__(self, db_path: Optional[str] = None):
        """
        Open (and if needed create) the database.

        Args:
            db_path: SQLite file. Defaults to the configured ``db_path``.
        """
        self.db_path = db_path or get_default_db_path()
        self._lock = threading.Lock()
        self._engine: Optional[Engine] = self._create_engine()
        self._session_factory: Optional[sessionmaker] = sessionmaker(
            bind=self._engine,
            autoflush=True,
            expire_on_commit=False,
        )

    def _create_engine(self) -> Engine:
        Path(self.db_path).parent.mkdir(parents=True, exist_ok=True)
        engine = create_engine(
            f"sqlite:///{self.db_path}",
            pool_pre_ping=True,
            # Store calls run on asyncio.to_thread workers
            connect_args={"check_same_thread": False},
        )
        event.listen(engine, "connect", _apply_pragmas)
        Base.metadata.create_all(engine)
        logger.debug("Opened floq database at %s", self.db_path)
        return engine

    @property
    def engine(self) -> Engine:
        """The live engine; RuntimeError once closed."""
        if self._engine is None:
            raise RuntimeError(f"Database {self.db_path} is closed")
        return self._engine

    @contextmanager
    def get_session(self) -> Generator[Session, None, None]:
        """
        Yield a session that commits on success and rolls back on error.

        Usage:
            with orm_manager.get_session() as session:
                session.get(Task, task_id)
        """
        factory = self._session_factory
        if factory is None:
            raise RuntimeError(f"Database {self.db_path} is closed")

        session = factory()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def perform_health_check(self) -> Dict[str, Any]:
        """
        Report whether the database answers and how many rows it holds.

        Returns:
            ``{"healthy": True, "database_path", "tables", "task_count",
            "comment_count"}``, or ``{"healthy": False, "error"}``.
        """
        try:
            tables = sorted(inspect(self.engine).get_table_names())
            with self.get_session() as session:
                task_count = session.scalar(select(func.count()).select_from(Task))
                comment_count = session.scalar(select(func.count()).select_from(Comment))
        except Exception as e:
            logger.warning("Health check failed for %s: %s", self.db_path, e)
            return {"healthy": False, "error": str(e)}

        return {
            "healthy": True,
            "database_path": self.db_path,
            "tables": tables,
            "task_count": task_count,
            "comment_count": comment_count,
        }

    def close(self) -> None:
        """Dispose the engine. Safe to call more than once."""
        with self._lock:
            if self._engine is None:
                return
            self._engine.dispose()
            self._engine = None
            self._session_factory = None
            logger.debug("Closed floq database at %s", self.db_path)
