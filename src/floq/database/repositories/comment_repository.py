"""
Comment Repository.

SQLAlchemy ORM-based repository for reading comments.
"""

from typing import List

from sqlalchemy import select

from floq.database.models.base import model_to_dict
from floq.database.models.comment import Comment
from floq.database.orm_manager import ORMManager
from floq.domain.entities.comment import CommentDTO
from floq.domain.entities.result_types import (
    DomainError,
    DomainResult,
    DomainSuccess,
)
from floq.domain.interfaces.task_store import COMMENTS_TABLE


class CommentRepository:
    """Comment repository using SQLAlchemy ORM."""

    def __init__(self, orm_manager: ORMManager):
        self.orm_manager = orm_manager

    def _to_dto(self, comment: Comment) -> CommentDTO:
        """Convert Comment model to CommentDTO."""
        return CommentDTO.from_row(model_to_dict(comment))

    def get(self, comment_id: str) -> DomainResult[CommentDTO]:
        """Get comment by ID."""
        try:
            with self.orm_manager.get_session() as session:
                comment = session.execute(
                    select(Comment).where(Comment.id == comment_id)
                ).scalar_one_or_none()

                if not comment:
                    return DomainError.not_found("Comment", comment_id)

                return DomainSuccess.create(data=self._to_dto(comment))

        except Exception as e:
            return DomainError.operation_failed("get_comment", COMMENTS_TABLE, str(e))

    def find_by_prefix(self, prefix: str) -> DomainResult[List[CommentDTO]]:
        """Find comments whose id starts with ``prefix``."""
        try:
            with self.orm_manager.get_session() as session:
                comments = (
                    session.execute(
                        select(Comment)
                        .where(Comment.id.startswith(prefix, autoescape=True))
                        .order_by(Comment.created_at.asc())
                    )
                    .scalars()
                    .all()
                )
                return DomainSuccess.create(data=[self._to_dto(c) for c in comments])

        except Exception as e:
            return DomainError.operation_failed("find_comment", COMMENTS_TABLE, str(e))

    def list_for_task(self, task_id: str) -> DomainResult[List[CommentDTO]]:
        """List a task's comments, oldest first."""
        try:
            with self.orm_manager.get_session() as session:
                comments = (
                    session.execute(
                        select(Comment)
                        .where(Comment.task_id == task_id)
                        .order_by(Comment.created_at.asc(), Comment.id.asc())
                    )
                    .scalars()
                    .all()
                )
                return DomainSuccess.create(data=[self._to_dto(c) for c in comments])

        except Exception as e:
            return DomainError.operation_failed("list_comments", COMMENTS_TABLE, str(e))
