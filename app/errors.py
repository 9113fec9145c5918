"""Error taxonomy shared by the repositories, the blob store and the routes."""

import logging
from contextlib import contextmanager

from sqlalchemy.exc import SQLAlchemyError

from app.schemas import ErrorResponse

logger = logging.getLogger(__name__)


class CivicIssueError(Exception):
    """Base class for errors that map onto an HTTP response."""

    status_code = 500

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)

    def to_response(self) -> ErrorResponse:
        return ErrorResponse(error=self.message)


class ValidationError(CivicIssueError):
    """Caller input violates a contract."""

    status_code = 400


class InvalidUpload(ValidationError):
    """Uploaded file has a disallowed type or exceeds the size limit."""


class NotFoundError(CivicIssueError):
    status_code = 404


class StorageFailure(CivicIssueError):
    """The database rejected or failed an operation."""

    status_code = 500


@contextmanager
def storage_errors(operation: str):
    """Re-raise SQLAlchemy errors raised inside the block as StorageFailure."""
    try:
        yield
    except SQLAlchemyError as exc:
        logger.error(
            f"Storage failure during {operation}: {str(exc)}",
            extra={"operation": operation},
        )
        raise StorageFailure(str(exc)) from exc
