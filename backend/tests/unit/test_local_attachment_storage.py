"""Unit tests for LocalAttachmentStorage."""

from pathlib import Path

import pytest

from walkin.domain.exceptions import AttachmentWriteFailedError
from walkin.infrastructure.storage.local_attachment_storage import LocalAttachmentStorage


@pytest.mark.asyncio
async def test_store_attachment_writes_under_media_root(tmp_path: Path):
    storage = LocalAttachmentStorage(str(tmp_path / "media"))

    stored = await storage.store_attachment(b"%PDF-1.4", "consent.pdf")

    assert Path(stored.stored_path) == tmp_path / "media" / "consent.pdf"
    assert Path(stored.stored_path).read_bytes() == b"%PDF-1.4"
    assert stored.filename == "consent.pdf"
    assert stored.file_size == 8
    assert stored.mime_type == "application/pdf"
    assert Path(stored.stored_path).exists()


@pytest.mark.asyncio
async def test_same_name_overwrites_previous_upload(tmp_path: Path):
    storage = LocalAttachmentStorage(str(tmp_path))

    first = await storage.store_attachment(b"one", "call.mp3")
    second = await storage.store_attachment(b"two", "call.mp3")

    assert first.stored_path == second.stored_path
    assert Path(second.stored_path).read_bytes() == b"two"


@pytest.mark.asyncio
@pytest.mark.parametrize("filename", ["../../etc/passwd", "..\\..\\evil.txt", "/abs/dir/evil.txt"])
async def test_directory_components_are_dropped(tmp_path: Path, filename: str):
    storage = LocalAttachmentStorage(str(tmp_path / "media"))

    stored = await storage.store_attachment(b"x", filename)

    assert Path(stored.stored_path).parent == tmp_path / "media"


@pytest.mark.asyncio
@pytest.mark.parametrize("filename", ["", ".", ".."])
async def test_unusable_names_fail(tmp_path: Path, filename: str):
    storage = LocalAttachmentStorage(str(tmp_path))
    with pytest.raises(AttachmentWriteFailedError):
        await storage.store_attachment(b"x", filename)


@pytest.mark.asyncio
async def test_unwritable_media_root_fails(tmp_path: Path):
    blocker = tmp_path / "media"
    blocker.write_text("a file, not a directory")
    storage = LocalAttachmentStorage(str(blocker))

    with pytest.raises(AttachmentWriteFailedError):
        await storage.store_attachment(b"x", "note.txt")
