"""Disk-backed store for files uploaded alongside new issues."""

import logging
import os
import uuid
from pathlib import Path

from fastapi import UploadFile
from starlette.concurrency import run_in_threadpool

from app.config import DEFAULT_MAX_UPLOAD_BYTES
from app.errors import InvalidUpload, NotFoundError, StorageFailure

logger = logging.getLogger(__name__)

ALLOWED_EXTENSIONS = {"jpeg", "jpg", "png", "gif", "pdf", "doc", "docx"}
ALLOWED_CONTENT_TYPES = {
    "image/jpeg",
    "image/jpg",
    "image/png",
    "image/gif",
    "application/pdf",
    "application/msword",
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
}
CHUNK_SIZE = 64 * 1024


class BlobStore:
    """
    Stores uploaded files under generated unique names.

    The generated name is the only handle needed to read a file back;
    no metadata is kept anywhere else.
    """

    def __init__(self, directory: str | Path, max_bytes: int = DEFAULT_MAX_UPLOAD_BYTES):
        self.directory = Path(directory)
        self.max_bytes = max_bytes
        self.directory.mkdir(parents=True, exist_ok=True)

    @staticmethod
    def is_allowed(filename: str, content_type: str | None) -> bool:
        """Both the extension and the declared content type must be allowed."""
        extension = Path(filename).suffix.lower().lstrip(".")
        media_type = (content_type or "").split(";")[0].strip().lower()
        return extension in ALLOWED_EXTENSIONS and media_type in ALLOWED_CONTENT_TYPES

    async def save(self, upload: UploadFile) -> str:
        """
        Validate and persist an uploaded file.

        Args:
            upload: The multipart file received with the request

        Returns:
            The generated name the file is stored under

        Raises:
            InvalidUpload: If the type is not allowed or the file is too large
            StorageFailure: If the file could not be written
        """
        filename = upload.filename or ""
        if not self.is_allowed(filename, upload.content_type):
            logger.warning(
                f"Rejected upload {filename!r}: invalid file type",
                extra={"content_type": upload.content_type},
            )
            raise InvalidUpload("Invalid file type")

        content = await self._read_limited(upload)
        name = f"{uuid.uuid4()}{Path(filename).suffix}"

        try:
            await run_in_threadpool(self._write, name, content)
        except OSError as exc:
            logger.error(f"Failed to store upload {name}: {str(exc)}")
            raise StorageFailure(str(exc)) from exc

        logger.info(f"Stored upload as {name}", extra={"size": len(content)})
        return name

    async def _read_limited(self, upload: UploadFile) -> bytes:
        chunks = []
        size = 0
        while True:
            chunk = await upload.read(CHUNK_SIZE)
            if not chunk:
                break
            size += len(chunk)
            if size > self.max_bytes:
                logger.warning(
                    f"Rejected upload {upload.filename!r}: larger than {self.max_bytes} bytes"
                )
                raise InvalidUpload("File too large")
            chunks.append(chunk)
        return b"".join(chunks)

    def _write(self, name: str, content: bytes) -> None:
        target = self.directory / name
        partial = target.with_name(f".{name}.part")
        try:
            partial.write_bytes(content)
            os.replace(partial, target)
        except OSError:
            partial.unlink(missing_ok=True)
            raise

    def path_for(self, name: str) -> Path:
        """Resolve a stored name to its file, rejecting anything outside the store."""
        if not name or Path(name).name != name or name.startswith("."):
            raise NotFoundError("File not found")

        path = self.directory / name
        if not path.is_file():
            raise NotFoundError("File not found")
        return path

    async def delete(self, name: str) -> None:
        path = self.directory / Path(name).name
        await run_in_threadpool(path.unlink, missing_ok=True)
        logger.info(f"Removed upload {name}")
