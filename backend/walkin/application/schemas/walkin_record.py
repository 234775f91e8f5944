"""Pydantic DTOs (Data Transfer Objects) for the walk-in record feature."""

from datetime import datetime
from typing import Any

from pydantic import AliasChoices, BaseModel, Field, StrictBool, TypeAdapter, ValidationError

from walkin.domain.entities import (
    Student,
    StudentEmail,
    StudentNumber,
    VerificationUpdate,
)
from walkin.domain.exceptions import InvalidInputError


class StudentEmailSchema(BaseModel):
    email: str

    model_config = {"from_attributes": True}


class StudentNumberSchema(BaseModel):
    """A contact number. ``verified`` stays null unless explicitly set."""

    number: str = Field(..., min_length=1, examples=["+15550100"])
    country_code: str = Field("", examples=["+1"])
    verified: StrictBool | None = None

    model_config = {"from_attributes": True}


class StudentSchema(BaseModel):
    """Student sub-document; ``email``/``number`` are accepted as legacy keys."""

    name: str = Field(..., examples=["Jane Doe"])
    emails: list[StudentEmailSchema] = Field(
        default_factory=list,
        validation_alias=AliasChoices("emails", "email"),
    )
    numbers: list[StudentNumberSchema] = Field(
        default_factory=list,
        validation_alias=AliasChoices("numbers", "number"),
    )

    model_config = {"from_attributes": True}

    def to_entity(self) -> Student:
        return Student(
            name=self.name,
            emails=[StudentEmail(email=e.email) for e in self.emails],
            numbers=[
                StudentNumber(number=n.number, country_code=n.country_code, verified=n.verified)
                for n in self.numbers
            ],
        )


class RecordCreate(BaseModel):
    """Schema for creating a new walk-in record."""

    student: StudentSchema


class VerificationEntrySchema(BaseModel):
    number: str = Field(..., min_length=1)
    verified: StrictBool | None = None

    model_config = {"from_attributes": True}

    def to_entity(self) -> VerificationUpdate:
        return VerificationUpdate(number=self.number, verified=self.verified)


class RecordUpdateRequest(BaseModel):
    """JSON body for updating a record addressed by id."""

    verified: list[VerificationEntrySchema] = Field(default_factory=list)
    comment: str = ""


class RecordDetailsSchema(BaseModel):
    comment: str
    type: str

    model_config = {"from_attributes": True}


class AuditEntrySchema(BaseModel):
    verified: str
    comment: str
    attachment_ref: str | None = None
    created_at: datetime
    author: dict[str, Any]
    numbers: list[VerificationEntrySchema] = Field(default_factory=list)

    model_config = {"from_attributes": True}


class WalkinRecordResponse(BaseModel):
    """Schema returned to the client."""

    id: int
    student: StudentSchema
    author: dict[str, Any]
    record_attachment: str | None
    details: RecordDetailsSchema | None
    audit_log: list[AuditEntrySchema]
    version: int
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class RecordEnvelope(BaseModel):
    message: str
    record: WalkinRecordResponse


class RecordPageResponse(BaseModel):
    data: list[WalkinRecordResponse]
    page: int
    limit: int
    count: int


_verification_entries = TypeAdapter(list[VerificationEntrySchema])


def parse_record_create(payload: Any) -> RecordCreate:
    """Validate a raw create body, mapping pydantic errors to ``InvalidInputError``."""
    try:
        return RecordCreate.model_validate(payload)
    except ValidationError as exc:
        raise InvalidInputError(f"Invalid student payload: {_summarise(exc)}") from exc


def parse_verification_entries(raw: str | list[Any] | None) -> list[VerificationUpdate]:
    """Parse the ``verified`` field: a JSON-encoded array string or an already decoded list."""
    if raw is None or raw == "":
        return []
    try:
        if isinstance(raw, str):
            entries = _verification_entries.validate_json(raw)
        else:
            entries = _verification_entries.validate_python(raw)
    except ValidationError as exc:
        raise InvalidInputError(
            f"Invalid verified data format. Ensure it is a valid JSON array: {_summarise(exc)}"
        ) from exc
    return [e.to_entity() for e in entries]


def _summarise(exc: ValidationError) -> str:
    parts = []
    for err in exc.errors()[:3]:
        loc = ".".join(str(p) for p in err["loc"]) or "body"
        parts.append(f"{loc}: {err['msg']}")
    return "; ".join(parts)
