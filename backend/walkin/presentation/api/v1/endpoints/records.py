"""Walk-in record endpoints: create, list, fetch and update."""

import logging
from typing import Any

from fastapi import APIRouter, Body, Depends, File, Form, HTTPException, Query, UploadFile, status

from walkin.application.schemas import (
    RecordEnvelope,
    RecordPageResponse,
    RecordUpdateRequest,
    WalkinRecordResponse,
    parse_verification_entries,
)
from walkin.application.services import AttachmentUpload, RecordUpdate, WalkinRecordService
from walkin.domain.entities import WalkinRecord
from walkin.domain.exceptions import (
    AttachmentWriteFailedError,
    AuthenticationError,
    ForbiddenError,
    InvalidInputError,
    RecordConflictError,
    RecordNotFoundError,
    StoreUnavailableError,
    UnauthorizedError,
    WalkinError,
)
from walkin.infrastructure.dependencies import get_walkin_record_service
from walkin.presentation.api.v1.auth import get_bearer_token

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/records", tags=["Records"])


# ── Helpers ──────────────────────────────────────────────────────────

_STATUS_BY_ERROR: list[tuple[type[WalkinError], int]] = [
    (UnauthorizedError, status.HTTP_401_UNAUTHORIZED),
    (AuthenticationError, status.HTTP_401_UNAUTHORIZED),
    (ForbiddenError, status.HTTP_403_FORBIDDEN),
    (InvalidInputError, status.HTTP_400_BAD_REQUEST),
    (RecordNotFoundError, status.HTTP_404_NOT_FOUND),
    (RecordConflictError, status.HTTP_409_CONFLICT),
    (StoreUnavailableError, status.HTTP_503_SERVICE_UNAVAILABLE),
    (AttachmentWriteFailedError, status.HTTP_500_INTERNAL_SERVER_ERROR),
]


def _to_http_error(exc: WalkinError) -> HTTPException:
    for error_type, status_code in _STATUS_BY_ERROR:
        if isinstance(exc, error_type):
            headers = (
                {"WWW-Authenticate": "Bearer"}
                if status_code == status.HTTP_401_UNAUTHORIZED
                else None
            )
            return HTTPException(status_code=status_code, detail=str(exc), headers=headers)
    logger.error("Unmapped walk-in error: %r", exc)
    return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc))


def _to_response(record: WalkinRecord) -> WalkinRecordResponse:
    return WalkinRecordResponse.model_validate(record, from_attributes=True)


# ── Endpoints ────────────────────────────────────────────────────────

@router.post("", response_model=RecordEnvelope, status_code=status.HTTP_201_CREATED)
async def create_record(
    payload: dict[str, Any] = Body(
        ...,
        examples=[
            {
                "student": {
                    "name": "Jane Doe",
                    "emails": [{"email": "jane@example.com"}],
                    "numbers": [{"number": "+15550100", "country_code": "+1"}],
                }
            }
        ],
    ),
    token: str = Depends(get_bearer_token),
    service: WalkinRecordService = Depends(get_walkin_record_service),
) -> RecordEnvelope:
    """Create a walk-in record authored by the caller."""
    try:
        record = await service.create_record(payload, token)
    except WalkinError as e:
        raise _to_http_error(e) from e
    return RecordEnvelope(message="Record created successfully", record=_to_response(record))


@router.get("", response_model=RecordPageResponse)
async def list_records(
    page: str | None = Query(None, description="1-based page number (default 1)"),
    limit: str | None = Query(None, description="Page size (default 10)"),
    number: str | None = Query(None, description="Only records containing this student number"),
    token: str = Depends(get_bearer_token),
    service: WalkinRecordService = Depends(get_walkin_record_service),
) -> RecordPageResponse:
    """List the caller's own records, newest first."""
    try:
        result = await service.list_records(token, page=page, limit=limit, number=number)
    except WalkinError as e:
        raise _to_http_error(e) from e
    return RecordPageResponse(
        data=[_to_response(r) for r in result.records],
        page=result.page,
        limit=result.limit,
        count=len(result.records),
    )


@router.get("/{record_id}", response_model=WalkinRecordResponse)
async def get_record(
    record_id: str,
    token: str = Depends(get_bearer_token),
    service: WalkinRecordService = Depends(get_walkin_record_service),
) -> WalkinRecordResponse:
    """Retrieve a single record owned by the caller."""
    try:
        record = await service.get_record(record_id, token)
    except WalkinError as e:
        raise _to_http_error(e) from e
    return _to_response(record)


@router.post("/records-data", response_model=RecordEnvelope)
async def update_record_data(
    verified: str = Form("", description='JSON array, e.g. [{"number": "+15550100", "verified": true}]'),
    comment: str = Form(""),
    record: UploadFile | None = File(None),
    record_id: str | None = Query(None, alias="id"),
    number: str | None = Query(None),
    token: str = Depends(get_bearer_token),
    service: WalkinRecordService = Depends(get_walkin_record_service),
) -> RecordEnvelope:
    """Update verification state, comment and attachment from multipart form data.

    Without an ``id`` or ``number`` query parameter the record is located
    through the numbers named in ``verified``.
    """
    try:
        attachment = None
        if record is not None:
            attachment = AttachmentUpload(filename=record.filename or "", content=await record.read())
        command = RecordUpdate(
            record_id=record_id,
            number=number,
            verified=parse_verification_entries(verified),
            comment=comment,
            attachment=attachment,
        )
        updated = await service.update_record(token, command)
    except WalkinError as e:
        raise _to_http_error(e) from e
    return RecordEnvelope(message="Record updated successfully", record=_to_response(updated))


@router.put("/{record_id}", response_model=RecordEnvelope)
async def update_record(
    record_id: str,
    data: RecordUpdateRequest,
    token: str = Depends(get_bearer_token),
    service: WalkinRecordService = Depends(get_walkin_record_service),
) -> RecordEnvelope:
    """Update verification state and comment of a record addressed by id (JSON body)."""
    command = RecordUpdate(
        record_id=record_id,
        verified=[entry.to_entity() for entry in data.verified],
        comment=data.comment,
    )
    try:
        updated = await service.update_record(token, command)
    except WalkinError as e:
        raise _to_http_error(e) from e
    return RecordEnvelope(message="Record updated successfully", record=_to_response(updated))
