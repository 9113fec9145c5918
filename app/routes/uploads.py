from fastapi import APIRouter, Depends
from fastapi.responses import FileResponse

from app.storage import BlobStore, get_blob_store

router = APIRouter(prefix="/uploads", tags=["uploads"])


@router.get("/{filename}")
async def get_upload(filename: str, blobs: BlobStore = Depends(get_blob_store)):
    """Return a stored upload by its generated name"""
    return FileResponse(blobs.path_for(filename))
