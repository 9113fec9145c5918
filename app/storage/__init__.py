"""File storage for issue attachments."""

from fastapi import Request

from app.storage.blobs import BlobStore


def get_blob_store(request: Request) -> BlobStore:
    return request.app.state.blob_store


__all__ = ["BlobStore", "get_blob_store"]
