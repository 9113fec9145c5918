import logging
from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import models
from app.database.models import utcnow
from app.errors import ValidationError, storage_errors

logger = logging.getLogger(__name__)

DEFAULT_AUTHOR = "Anonymous"


class CommentRepository:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def create(self, issue_id: int, text: Optional[str], author: Optional[str] = None) -> int:
        """
        Append a comment to an issue.

        The issue id is stored as given; it is not checked against the
        issues table.
        """
        if not (text or "").strip():
            raise ValidationError("Comment is required")

        comment = models.Comment(
            issue_id=issue_id,
            comment=text,
            author=(author or "").strip() or DEFAULT_AUTHOR,
            created_at=utcnow(),
        )

        with storage_errors("create comment"):
            self.db.add(comment)
            await self.db.commit()

        logger.info(
            f"Comment {comment.id} added to issue {issue_id}",
            extra={"issue_id": issue_id},
        )
        return comment.id

    async def list_by_issue(self, issue_id: int) -> list[models.Comment]:
        """Comments for one issue, newest first."""
        query = (
            select(models.Comment)
            .where(models.Comment.issue_id == issue_id)
            .order_by(models.Comment.created_at.desc(), models.Comment.id.desc())
        )
        with storage_errors("list comments"):
            result = await self.db.execute(query)
            return list(result.scalars().all())
