"""Local filesystem storage for record attachments.

Storage layout:
    <media_root>/<filename>    (one file per distinct upload name)

Only the final path component of the uploaded name is kept. Uploads that
share a name overwrite each other.
"""

import logging
import mimetypes
from pathlib import Path

from walkin.application.interfaces import AttachmentStorage, StoredAttachment
from walkin.domain.exceptions import AttachmentWriteFailedError

logger = logging.getLogger(__name__)


class LocalAttachmentStorage(AttachmentStorage):
    """Infrastructure adapter for local attachment storage."""

    def __init__(self, media_root: str):
        self._media_root = Path(media_root)

    async def store_attachment(self, content: bytes, filename: str) -> StoredAttachment:
        name = Path(filename.replace("\\", "/")).name
        if name in ("", ".", ".."):
            raise AttachmentWriteFailedError(filename)

        dest_path = self._media_root / name
        try:
            self._media_root.mkdir(parents=True, exist_ok=True)
            if dest_path.exists():
                logger.warning("Overwriting existing attachment: %s", dest_path)
            dest_path.write_bytes(content)
        except OSError as exc:
            logger.error("Could not write attachment %s: %s", dest_path, exc)
            raise AttachmentWriteFailedError(filename) from exc

        mime_type = mimetypes.guess_type(name)[0] or "application/octet-stream"
        logger.info("Stored attachment: %s (%d bytes)", dest_path, len(content))

        return StoredAttachment(
            stored_path=str(dest_path),
            filename=name,
            file_size=len(content),
            mime_type=mime_type,
        )
