import io
import uuid
from pathlib import Path

import pytest
from fastapi import UploadFile
from starlette.datastructures import Headers

from app.errors import InvalidUpload, NotFoundError
from app.storage import BlobStore

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 64


def make_upload(filename: str, content: bytes, content_type: str) -> UploadFile:
    return UploadFile(
        file=io.BytesIO(content),
        filename=filename,
        headers=Headers({"content-type": content_type}),
    )


@pytest.fixture
def store(tmp_path) -> BlobStore:
    return BlobStore(tmp_path / "uploads")


def stored_files(store: BlobStore) -> list[Path]:
    return list(store.directory.iterdir())


def test_creates_directory(tmp_path):
    store = BlobStore(tmp_path / "nested" / "uploads")

    assert store.directory.is_dir()


@pytest.mark.asyncio
async def test_save_png(store):
    name = await store.save(make_upload("pothole.png", PNG_BYTES, "image/png"))

    assert name.endswith(".png")
    uuid.UUID(name[: -len(".png")])
    assert store.path_for(name).read_bytes() == PNG_BYTES
    assert stored_files(store) == [store.directory / name]


@pytest.mark.asyncio
async def test_save_generates_unique_names(store):
    first = await store.save(make_upload("a.jpg", b"one", "image/jpeg"))
    second = await store.save(make_upload("a.jpg", b"two", "image/jpeg"))

    assert first != second


@pytest.mark.asyncio
async def test_extension_match_is_case_insensitive(store):
    name = await store.save(make_upload("PHOTO.JPG", b"jpeg", "image/jpeg"))

    assert name.endswith(".JPG")


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "filename, content_type",
    [
        ("report.pdf", "application/pdf"),
        ("letter.doc", "application/msword"),
        (
            "letter.docx",
            "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
        ),
        ("sign.gif", "image/gif"),
    ],
)
async def test_document_types_accepted(store, filename, content_type):
    name = await store.save(make_upload(filename, b"data", content_type))

    assert store.path_for(name).exists()


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "filename, content_type",
    [
        ("setup.exe", "application/x-msdownload"),
        ("setup.exe", "image/png"),
        ("pothole.png", "application/octet-stream"),
        ("notes.txt", "text/plain"),
        ("noextension", "image/png"),
    ],
)
async def test_disallowed_types_rejected(store, filename, content_type):
    with pytest.raises(InvalidUpload, match="Invalid file type"):
        await store.save(make_upload(filename, b"data", content_type))

    assert stored_files(store) == []


@pytest.mark.asyncio
async def test_oversized_file_rejected(tmp_path):
    store = BlobStore(tmp_path / "uploads", max_bytes=1024)

    with pytest.raises(InvalidUpload, match="File too large"):
        await store.save(make_upload("big.png", b"x" * 1025, "image/png"))

    assert stored_files(store) == []


@pytest.mark.asyncio
async def test_file_at_limit_accepted(tmp_path):
    store = BlobStore(tmp_path / "uploads", max_bytes=1024)

    name = await store.save(make_upload("edge.png", b"x" * 1024, "image/png"))

    assert store.path_for(name).stat().st_size == 1024


@pytest.mark.parametrize("name", ["missing.png", "../secret.png", "", ".hidden"])
def test_path_for_unknown_names(store, name):
    with pytest.raises(NotFoundError):
        store.path_for(name)


@pytest.mark.asyncio
async def test_delete(store):
    name = await store.save(make_upload("pothole.png", PNG_BYTES, "image/png"))

    await store.delete(name)

    assert stored_files(store) == []
