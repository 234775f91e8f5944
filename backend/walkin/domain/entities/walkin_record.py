"""Domain entity: a walk-in visit record and its embedded documents."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

WALKIN_DETAILS_TYPE = "walkin"


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class StudentEmail:
    email: str


@dataclass
class StudentNumber:
    """A contact number; ``verified`` is tri-state (None means not yet checked)."""

    number: str
    country_code: str = ""
    verified: bool | None = None


@dataclass
class Student:
    """The visited person's identifying data."""

    name: str
    emails: list[StudentEmail] = field(default_factory=list)
    numbers: list[StudentNumber] = field(default_factory=list)

    def to_document(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "emails": [{"email": e.email} for e in self.emails],
            "numbers": [
                {
                    "number": n.number,
                    "country_code": n.country_code,
                    "verified": n.verified,
                }
                for n in self.numbers
            ],
        }

    @classmethod
    def from_document(cls, doc: dict[str, Any]) -> "Student":
        return cls(
            name=str(doc.get("name", "")),
            emails=[StudentEmail(email=str(e.get("email", ""))) for e in doc.get("emails") or []],
            numbers=[
                StudentNumber(
                    number=str(n.get("number", "")),
                    country_code=str(n.get("country_code") or ""),
                    verified=n.get("verified"),
                )
                for n in doc.get("numbers") or []
            ],
        )


@dataclass
class VerificationUpdate:
    """One requested change to the ``verified`` flag of a student number."""

    number: str
    verified: bool | None = None


@dataclass
class RecordDetails:
    comment: str = ""
    type: str = WALKIN_DETAILS_TYPE

    def to_document(self) -> dict[str, Any]:
        return {"comment": self.comment, "type": self.type}

    @classmethod
    def from_document(cls, doc: dict[str, Any] | None) -> "RecordDetails | None":
        if not doc:
            return None
        return cls(
            comment=str(doc.get("comment") or ""),
            type=str(doc.get("type") or WALKIN_DETAILS_TYPE),
        )


@dataclass
class AuditEntry:
    """An immutable entry in a record's audit log, one per update call."""

    comment: str
    author: dict[str, Any]
    created_at: datetime = field(default_factory=_utc_now)
    verified: str = "true"
    attachment_ref: str | None = None
    numbers: list[VerificationUpdate] = field(default_factory=list)

    def to_document(self) -> dict[str, Any]:
        doc: dict[str, Any] = {
            "verified": self.verified,
            "comment": self.comment,
            "created_at": self.created_at.isoformat(),
            "author": self.author,
            "numbers": [{"number": u.number, "verified": u.verified} for u in self.numbers],
        }
        if self.attachment_ref is not None:
            doc["attachment_ref"] = self.attachment_ref
        return doc

    @classmethod
    def from_document(cls, doc: dict[str, Any]) -> "AuditEntry":
        raw_created = doc.get("created_at")
        created_at = (
            datetime.fromisoformat(raw_created) if isinstance(raw_created, str) else _utc_now()
        )
        return cls(
            comment=str(doc.get("comment") or ""),
            author=dict(doc.get("author") or {}),
            created_at=created_at,
            verified=str(doc.get("verified", "true")),
            attachment_ref=doc.get("attachment_ref"),
            numbers=[
                VerificationUpdate(number=str(n.get("number", "")), verified=n.get("verified"))
                for n in doc.get("numbers") or []
            ],
        )


@dataclass
class WalkinRecord:
    """Core domain entity for a logged walk-in visit.

    ``author`` holds the full claim set of the token that created the record;
    its ``uid`` is the only key that may later mutate the record.
    ``version`` is bumped by the store on every successful save.
    """

    student: Student
    author: dict[str, Any]
    id: int | None = None
    record_attachment: str | None = None
    details: RecordDetails | None = None
    audit_log: list[AuditEntry] = field(default_factory=list)
    version: int = 1
    created_at: datetime = field(default_factory=_utc_now)
    updated_at: datetime = field(default_factory=_utc_now)

    @property
    def author_uid(self) -> Any:
        return self.author.get("uid")

    def is_owned_by(self, uid: Any) -> bool:
        return uid is not None and self.author_uid == uid

    def apply_verification(self, updates: list[VerificationUpdate]) -> int:
        """Merge ``verified`` values into matching numbers; return how many entries changed.

        Numbers not present on the student are ignored. Sibling entries and
        other fields of matched entries are left untouched.
        """
        matched = 0
        for update in updates:
            for entry in self.student.numbers:
                if entry.number == update.number:
                    entry.verified = update.verified
                    matched += 1
        return matched

    def attach(self, stored_path: str) -> None:
        self.record_attachment = stored_path

    def set_details(self, comment: str) -> None:
        self.details = RecordDetails(comment=comment)

    def append_audit(self, entry: AuditEntry) -> None:
        self.audit_log.append(entry)

    def touch(self) -> None:
        self.updated_at = _utc_now()
