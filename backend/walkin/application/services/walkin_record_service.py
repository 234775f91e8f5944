"""Application service (use case) for walk-in record operations."""

import json
import logging
from dataclasses import dataclass, field
from typing import Any, Literal

from walkin.application.interfaces import (
    AttachmentStorage,
    IdentityExtractor,
    WalkinRecordRepository,
)
from walkin.application.schemas.walkin_record import RecordCreate, parse_record_create
from walkin.domain.entities import (
    AuditEntry,
    Rejected,
    VerificationUpdate,
    WalkinRecord,
)
from walkin.domain.exceptions import (
    ForbiddenError,
    InvalidInputError,
    RecordNotFoundError,
    UnauthorizedError,
)

logger = logging.getLogger(__name__)

UpdateStyle = Literal["details", "audit_log"]

# walkin_records.id is a 32-bit serial
_MAX_RECORD_ID = 2**31 - 1


@dataclass
class AttachmentUpload:
    """A file supplied with an update call."""

    filename: str
    content: bytes


@dataclass
class RecordUpdate:
    """Input of ``update_record``.

    The target is located by ``record_id``, else by ``number``, else by the
    numbers named in ``verified`` (first one that resolves wins).
    """

    record_id: int | str | None = None
    number: str | None = None
    verified: list[VerificationUpdate] = field(default_factory=list)
    comment: str = ""
    attachment: AttachmentUpload | None = None

    def has_locator(self) -> bool:
        return self.record_id not in (None, "") or bool(self.number) or bool(self.verified)


@dataclass
class RecordPage:
    records: list[WalkinRecord]
    page: int
    limit: int


class WalkinRecordService:
    """Orchestrates the record flows. Depends on the repository, identity and storage ports (DI)."""

    def __init__(
        self,
        repository: WalkinRecordRepository,
        identity_extractor: IdentityExtractor,
        attachment_storage: AttachmentStorage,
        *,
        update_style: UpdateStyle = "details",
        default_page_size: int = 10,
    ):
        self._repository = repository
        self._identity = identity_extractor
        self._storage = attachment_storage
        self._update_style = update_style
        self._default_page_size = default_page_size

    # ── Create ──────────────────────────────────────────────────────

    async def create_record(
        self, payload: RecordCreate | dict[str, Any], token: str | None
    ) -> WalkinRecord:
        claims = self._authenticate(token)
        data = payload if isinstance(payload, RecordCreate) else parse_record_create(payload)

        record = WalkinRecord(student=data.student.to_entity(), author=dict(claims))
        created = await self._repository.create(record)
        logger.info("Created walk-in record %s for author %s", created.id, created.author_uid)
        return created

    # ── Read ────────────────────────────────────────────────────────

    async def list_records(
        self,
        token: str | None,
        *,
        page: int | str | None = None,
        limit: int | str | None = None,
        number: str | None = None,
    ) -> RecordPage:
        claims = self._authenticate(token)
        page_num = _parse_positive_int(page, "page", default=1)
        limit_num = _parse_positive_int(limit, "limit", default=self._default_page_size)
        number = (number or "").strip() or None

        records = await self._repository.list_by_author(
            _uid_text(claims["uid"]),
            offset=(page_num - 1) * limit_num,
            limit=limit_num,
            number=number,
        )
        return RecordPage(records=records, page=page_num, limit=limit_num)

    async def get_record(self, record_id: int | str, token: str | None) -> WalkinRecord:
        claims = self._authenticate(token)
        parsed_id = _parse_record_id(record_id)
        if parsed_id is None:
            raise InvalidInputError("Invalid record id")
        record = await self._get_by_id(parsed_id)
        self._ensure_owner(record, claims, action="read")
        return record

    # ── Update ──────────────────────────────────────────────────────

    async def update_record(self, token: str | None, command: RecordUpdate) -> WalkinRecord:
        if not command.has_locator():
            raise InvalidInputError("Provide a record id, a number or verified data to locate the record")
        record_id = _parse_record_id(command.record_id)
        if command.attachment is not None and not command.attachment.filename:
            raise InvalidInputError("Uploaded file has no filename")

        claims = self._authenticate(token)
        record = await self._locate(command, record_id)
        self._ensure_owner(record, claims)
        expected_version = record.version

        if command.verified:
            matched = record.apply_verification(command.verified)
            logger.debug(
                "Record %s: %d of %d verified entries matched",
                record.id,
                matched,
                len(command.verified),
            )

        attachment_ref: str | None = None
        if command.attachment is not None:
            stored = await self._storage.store_attachment(
                command.attachment.content, command.attachment.filename
            )
            attachment_ref = stored.stored_path
            record.attach(attachment_ref)

        if self._update_style == "audit_log":
            record.append_audit(
                AuditEntry(
                    comment=command.comment,
                    author=dict(claims),
                    attachment_ref=attachment_ref,
                    numbers=list(command.verified),
                )
            )
        else:
            record.set_details(command.comment)

        record.touch()
        saved = await self._repository.save(record, expected_version=expected_version)
        logger.info("Updated walk-in record %s (version %d)", saved.id, saved.version)
        return saved

    async def _locate(self, command: RecordUpdate, record_id: int | None) -> WalkinRecord:
        if record_id is not None:
            return await self._get_by_id(record_id)

        if command.number:
            record = await self._repository.find_latest_by_number(command.number)
            if record is None:
                raise RecordNotFoundError(command.number)
            return record

        for update in command.verified:
            record = await self._repository.find_latest_by_number(update.number)
            if record is not None:
                return record
            logger.debug("No record found for a verified entry number, trying next")
        raise RecordNotFoundError(", ".join(u.number for u in command.verified))

    async def _get_by_id(self, record_id: int) -> WalkinRecord:
        # Ids outside the serial column's range can never match a row
        if not 1 <= record_id <= _MAX_RECORD_ID:
            raise RecordNotFoundError(record_id)
        record = await self._repository.get_by_id(record_id)
        if record is None:
            raise RecordNotFoundError(record_id)
        return record

    # ── Identity ────────────────────────────────────────────────────

    def _authenticate(self, token: str | None) -> dict[str, Any]:
        if not token:
            raise UnauthorizedError("Authorization header is missing")

        result = self._identity.authenticate(token)
        if isinstance(result, Rejected):
            logger.warning("Rejected bearer token: %s", result.reason)
            raise UnauthorizedError(str(result.error)) from result.error
        if result.uid is None:
            raise UnauthorizedError("Token carries no uid claim")
        return result.claims

    @staticmethod
    def _ensure_owner(
        record: WalkinRecord, claims: dict[str, Any], *, action: str = "update"
    ) -> None:
        if not record.is_owned_by(claims.get("uid")):
            logger.warning(
                "Author %s attempted to %s record %s owned by %s",
                claims.get("uid"),
                action,
                record.id,
                record.author_uid,
            )
            raise ForbiddenError(record.id, action)


def _parse_positive_int(value: int | str | None, name: str, *, default: int) -> int:
    if value is None or value == "":
        return default
    if isinstance(value, bool):
        raise InvalidInputError(f"Invalid {name}")
    try:
        parsed = int(value)
    except (TypeError, ValueError) as exc:
        raise InvalidInputError(f"Invalid {name}") from exc
    if parsed < 1:
        raise InvalidInputError(f"Invalid {name}")
    return parsed


def _parse_record_id(value: int | str | None) -> int | None:
    if value is None or value == "":
        return None
    if isinstance(value, bool):
        raise InvalidInputError("Invalid record id")
    try:
        return int(value)
    except (TypeError, ValueError) as exc:
        raise InvalidInputError("Invalid record id") from exc


def _uid_text(uid: Any) -> str:
    """Render a uid claim the way PostgreSQL's ``->>`` renders the stored JSON value."""
    return uid if isinstance(uid, str) else json.dumps(uid)
