from .walkin_record import (
    WALKIN_DETAILS_TYPE,
    AuditEntry,
    RecordDetails,
    Student,
    StudentEmail,
    StudentNumber,
    VerificationUpdate,
    WalkinRecord,
)
from .identity import Authenticated, AuthenticationResult, Rejected

__all__ = [
    "WALKIN_DETAILS_TYPE",
    "AuditEntry",
    "RecordDetails",
    "Student",
    "StudentEmail",
    "StudentNumber",
    "VerificationUpdate",
    "WalkinRecord",
    "Authenticated",
    "AuthenticationResult",
    "Rejected",
]
