from .walkin_record import (
    AuditEntrySchema,
    RecordCreate,
    RecordDetailsSchema,
    RecordEnvelope,
    RecordPageResponse,
    RecordUpdateRequest,
    StudentEmailSchema,
    StudentNumberSchema,
    StudentSchema,
    VerificationEntrySchema,
    WalkinRecordResponse,
    parse_record_create,
    parse_verification_entries,
)

__all__ = [
    "AuditEntrySchema",
    "RecordCreate",
    "RecordDetailsSchema",
    "RecordEnvelope",
    "RecordPageResponse",
    "RecordUpdateRequest",
    "StudentEmailSchema",
    "StudentNumberSchema",
    "StudentSchema",
    "VerificationEntrySchema",
    "WalkinRecordResponse",
    "parse_record_create",
    "parse_verification_entries",
]
