from datetime import datetime
from enum import Enum
from pydantic import BaseModel, ConfigDict, Field
from typing import Optional

class IssueStatus(str, Enum):
    PENDING = "pending"
    IN_PROGRESS = "in-progress"
    RESOLVED = "resolved"
    REJECTED = "rejected"

class IssuePriority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"

class IssueCreate(BaseModel):
    """Submitted issue fields. Required fields are checked by the repository."""
    model_config = ConfigDict(str_strip_whitespace=True)

    title: Optional[str] = None
    category: Optional[str] = None
    location: Optional[str] = None
    description: Optional[str] = None
    priority: Optional[str] = None
    reporter_name: Optional[str] = None
    reporter_email: Optional[str] = None
    reporter_phone: Optional[str] = None

class IssueFilters(BaseModel):
    status: Optional[str] = None
    category: Optional[str] = None
    priority: Optional[str] = None

class StatusUpdate(BaseModel):
    status: Optional[str] = None

class CommentCreate(BaseModel):
    comment: Optional[str] = None
    author: Optional[str] = None

class IssueResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    category: str
    location: str
    description: str
    priority: str
    status: IssueStatus
    reporter_name: Optional[str] = None
    reporter_email: Optional[str] = None
    reporter_phone: Optional[str] = None
    image_path: Optional[str] = None
    created_at: datetime
    updated_at: datetime

class CommentResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    issue_id: Optional[int] = None
    comment: str
    author: Optional[str] = None
    created_at: datetime

class IssueStats(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    total: int = 0
    pending: int = 0
    in_progress: int = Field(0, alias="inProgress")
    resolved: int = 0

class CreatedResponse(BaseModel):
    id: int
    message: str

class MessageResponse(BaseModel):
    message: str

class ErrorResponse(BaseModel):
    error: str
