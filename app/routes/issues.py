from typing import Optional, TypeVar

from fastapi import APIRouter, Depends, File, Form, Query, Request, UploadFile, status
from pydantic import BaseModel
from pydantic import ValidationError as SchemaValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from app.database.config import get_db
from app.errors import ValidationError
from app.repositories import CommentRepository, IssueRepository
from app.repositories.issues import validate_new_issue
from app.schemas import (
    CommentCreate,
    CommentResponse,
    CreatedResponse,
    IssueCreate,
    IssueFilters,
    IssueResponse,
    MessageResponse,
    StatusUpdate,
)
from app.storage import BlobStore, get_blob_store

router = APIRouter(prefix="/api/issues", tags=["issues"])

FORM_CONTENT_TYPES = ("application/x-www-form-urlencoded", "multipart/form-data")

PayloadT = TypeVar("PayloadT", bound=BaseModel)


async def read_payload(request: Request, model: type[PayloadT]) -> PayloadT:
    """Parse a JSON or form-encoded request body into the given schema."""
    content_type = request.headers.get("content-type", "")
    try:
        if content_type.startswith(FORM_CONTENT_TYPES):
            form = await request.form()
            return model.model_validate(dict(form))
        return model.model_validate(await request.json())
    except (ValueError, SchemaValidationError) as exc:
        raise ValidationError("Invalid request body") from exc


@router.get("", response_model=list[IssueResponse])
async def list_issues(
    status_filter: Optional[str] = Query(None, alias="status"),
    category: Optional[str] = None,
    priority: Optional[str] = None,
    db: AsyncSession = Depends(get_db),
):
    """List issues, optionally filtered by status, category and priority."""
    filters = IssueFilters(status=status_filter, category=category, priority=priority)
    return await IssueRepository(db).list(filters)


@router.get("/{issue_id}", response_model=IssueResponse, status_code=status.HTTP_200_OK)
async def get_issue(issue_id: int, db: AsyncSession = Depends(get_db)):
    """Get issue by ID"""
    return await IssueRepository(db).get(issue_id)


@router.post("", response_model=CreatedResponse, status_code=status.HTTP_200_OK)
async def create_issue(
    title: Optional[str] = Form(None),
    category: Optional[str] = Form(None),
    location: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    priority: Optional[str] = Form(None),
    reporter_name: Optional[str] = Form(None),
    reporter_email: Optional[str] = Form(None),
    reporter_phone: Optional[str] = Form(None),
    image: Optional[UploadFile] = File(None),
    db: AsyncSession = Depends(get_db),
    blobs: BlobStore = Depends(get_blob_store),
):
    """Create new issue, storing the attached image if one was sent"""
    fields = IssueCreate(
        title=title,
        category=category,
        location=location,
        description=description,
        priority=priority,
        reporter_name=reporter_name,
        reporter_email=reporter_email,
        reporter_phone=reporter_phone,
    )
    # Reject bad fields before anything is written to the upload directory
    validate_new_issue(fields)

    image_path = None
    if image is not None and image.filename:
        image_path = await blobs.save(image)

    try:
        issue_id = await IssueRepository(db).create(fields, image_path)
    except Exception:
        if image_path:
            await blobs.delete(image_path)
        raise

    return CreatedResponse(id=issue_id, message="Issue created successfully")


@router.put("/{issue_id}/status", response_model=MessageResponse)
async def update_issue_status(
    issue_id: int,
    request: Request,
    db: AsyncSession = Depends(get_db),
):
    """Update the status of an issue"""
    payload = await read_payload(request, StatusUpdate)
    await IssueRepository(db).update_status(issue_id, payload.status)
    return MessageResponse(message="Status updated successfully")


@router.get("/{issue_id}/comments", response_model=list[CommentResponse])
async def list_comments(issue_id: int, db: AsyncSession = Depends(get_db)):
    """List the comments on an issue, newest first"""
    return await CommentRepository(db).list_by_issue(issue_id)


@router.post("/{issue_id}/comments", response_model=CreatedResponse)
async def add_comment(
    issue_id: int,
    request: Request,
    db: AsyncSession = Depends(get_db),
):
    """Add a comment to an issue"""
    payload = await read_payload(request, CommentCreate)
    comment_id = await CommentRepository(db).create(issue_id, payload.comment, payload.author)
    return CreatedResponse(id=comment_id, message="Comment added successfully")
