from .walkin_record_repository import WalkinRecordRepository
from .identity_extractor import IdentityExtractor
from .attachment_storage import AttachmentStorage, StoredAttachment

__all__ = [
    "WalkinRecordRepository",
    "IdentityExtractor",
    "AttachmentStorage",
    "StoredAttachment",
]
