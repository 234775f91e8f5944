from .walkin_record_service import (
    AttachmentUpload,
    RecordPage,
    RecordUpdate,
    UpdateStyle,
    WalkinRecordService,
)

__all__ = [
    "AttachmentUpload",
    "RecordPage",
    "RecordUpdate",
    "UpdateStyle",
    "WalkinRecordService",
]
