"""
Database Models Base Classes and Utilities.

Shared base class, id/timestamp helpers and check constraints for the
floq models.
"""

import uuid
from datetime import datetime, timezone
from typing import Any, Dict

from sqlalchemy import CheckConstraint
from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """Declarative base for all SQLAlchemy models."""

    pass


def generate_id() -> str:
    """Generate a unique ID for records.

    Callers generate ids before building a command so that undo can always
    delete by id.

    Returns:
        str: UUID4 string suitable for use as primary key.
    """
    return str(uuid.uuid4())


def get_current_timestamp() -> datetime:
    """Get current timestamp in UTC.

    Returns:
        datetime: Current UTC timestamp for record creation/updates.
    """
    return datetime.now(timezone.utc)


TASK_STATUS_CONSTRAINT = CheckConstraint(
    "status IN ('inbox', 'next', 'waiting', 'someday', 'done')",
    name="check_task_status",
)

# waiting_for is set exactly when the task is waiting
WAITING_FOR_CONSTRAINT = CheckConstraint(
    "(status = 'waiting' AND waiting_for IS NOT NULL) "
    "OR (status != 'waiting' AND waiting_for IS NULL)",
    name="check_waiting_for",
)

# No nested projects
PROJECT_PARENT_CONSTRAINT = CheckConstraint(
    "is_project = 0 OR parent_id IS NULL",
    name="check_project_parent",
)


def model_to_dict(instance: Any) -> Dict[str, Any]:
    """Convert a SQLAlchemy model instance to a plain column dictionary.

    Datetimes are kept as ``datetime`` objects so rows can be re-inserted
    verbatim.
    """
    return {column.name: getattr(instance, column.name) for column in instance.__table__.columns}
