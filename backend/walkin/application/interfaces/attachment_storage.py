"""Abstract interface (port) for storing uploaded record attachments."""

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass
class StoredAttachment:
    """Result of writing an attachment to disk."""

    stored_path: str
    filename: str
    file_size: int
    mime_type: str


class AttachmentStorage(ABC):
    """Port for attachment storage, implemented in the infrastructure layer."""

    @abstractmethod
    async def store_attachment(self, content: bytes, filename: str) -> StoredAttachment:
        """Write ``content`` under the media root, keyed by ``filename``.

        A second upload with the same filename overwrites the first.

        Raises:
            AttachmentWriteFailedError: the file could not be written.
        """
        ...
