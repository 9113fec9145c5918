import logging
from typing import Optional

from sqlalchemy import and_, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import models
from app.database.models import utcnow
from app.errors import NotFoundError, ValidationError, storage_errors
from app.schemas import IssueCreate, IssueFilters, IssuePriority, IssueStatus

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("title", "category", "location", "description", "priority")
FILTERABLE_FIELDS = ("status", "category", "priority")

VALID_STATUSES = {status.value for status in IssueStatus}
VALID_PRIORITIES = {priority.value for priority in IssuePriority}


def validate_new_issue(fields: IssueCreate) -> None:
    """
    Check the fields of an issue about to be created.

    Raises:
        ValidationError: If a required field is missing or blank, or the
            priority is not one of the known values
    """
    missing = [name for name in REQUIRED_FIELDS if not (getattr(fields, name) or "").strip()]
    if missing:
        raise ValidationError(f"Missing required fields: {', '.join(missing)}")

    if fields.priority.strip().lower() not in VALID_PRIORITIES:
        raise ValidationError("Invalid priority")


def build_filter_conditions(filters: IssueFilters) -> list:
    """Turn the supplied filter keys into bound equality predicates."""
    conditions = []
    for name in FILTERABLE_FIELDS:
        value = getattr(filters, name)
        if value:
            conditions.append(getattr(models.Issue, name) == value)
    return conditions


class IssueRepository:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def create(self, fields: IssueCreate, image_path: Optional[str] = None) -> int:
        """Validate and insert a new issue in the pending state, returning its id."""
        validate_new_issue(fields)

        now = utcnow()
        issue = models.Issue(
            title=fields.title.strip(),
            category=fields.category.strip(),
            location=fields.location.strip(),
            description=fields.description.strip(),
            priority=fields.priority.strip(),
            status=IssueStatus.PENDING.value,
            reporter_name=fields.reporter_name or None,
            reporter_email=fields.reporter_email or None,
            reporter_phone=fields.reporter_phone or None,
            image_path=image_path,
            created_at=now,
            updated_at=now,
        )

        with storage_errors("create issue"):
            self.db.add(issue)
            await self.db.commit()

        logger.info(
            f"Issue {issue.id} created",
            extra={"issue_id": issue.id, "category": issue.category},
        )
        return issue.id

    async def get(self, issue_id: int) -> models.Issue:
        with storage_errors("get issue"):
            result = await self.db.execute(
                select(models.Issue).where(models.Issue.id == issue_id)
            )
            issue = result.scalars().first()

        if not issue:
            raise NotFoundError("Issue not found")
        return issue

    async def list(self, filters: Optional[IssueFilters] = None) -> list[models.Issue]:
        """List issues matching every supplied filter, newest first."""
        query = select(models.Issue)

        conditions = build_filter_conditions(filters or IssueFilters())
        if conditions:
            query = query.where(and_(*conditions))

        query = query.order_by(models.Issue.created_at.desc(), models.Issue.id.desc())

        with storage_errors("list issues"):
            result = await self.db.execute(query)
            return list(result.scalars().all())

    async def update_status(self, issue_id: int, status: Optional[str]) -> models.Issue:
        """
        Move an issue to a new status and refresh its updated_at.

        Raises:
            ValidationError: If the status is not one of the four known values
            NotFoundError: If no issue has this id
        """
        if status not in VALID_STATUSES:
            raise ValidationError("Invalid status")

        issue = await self.get(issue_id)
        previous = issue.status

        with storage_errors("update issue status"):
            issue.status = status
            issue.updated_at = utcnow()
            await self.db.commit()

        logger.info(
            f"Issue {issue_id} status changed from {previous} to {status}",
            extra={"issue_id": issue_id},
        )
        return issue
