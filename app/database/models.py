from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, Enum, ForeignKey, Integer, String, Text
from sqlalchemy.types import TypeDecorator
from app.database.config import Base


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class UTCDateTime(TypeDecorator):
    """DateTime that always hands back timezone-aware UTC values.

    SQLite keeps no offset, so naive values read back are UTC by construction.
    """

    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is None:
            return value
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)

    def process_result_value(self, value, dialect):
        if value is None:
            return value
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)


class Issue(Base):
    __tablename__ = "issues"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    title = Column(String, nullable=False)
    category = Column(String, nullable=False, index=True)
    location = Column(String, nullable=False)
    description = Column(Text, nullable=False)
    # Free text so rows written before priorities were validated stay readable
    priority = Column(String, nullable=False, index=True)
    status = Column(
        Enum("pending", "in-progress", "resolved", "rejected", name="issue_status"),
        nullable=False,
        default="pending",
        index=True,
    )

    reporter_name = Column(String, nullable=True)
    reporter_email = Column(String, nullable=True)
    reporter_phone = Column(String, nullable=True)
    image_path = Column(String, nullable=True)

    created_at = Column(UTCDateTime, nullable=False, default=utcnow, index=True)
    updated_at = Column(UTCDateTime, nullable=False, default=utcnow)


class Comment(Base):
    __tablename__ = "comments"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    issue_id = Column(Integer, ForeignKey("issues.id"), nullable=True, index=True)
    comment = Column(Text, nullable=False)
    author = Column(String, nullable=True)
    created_at = Column(UTCDateTime, nullable=False, default=utcnow)
