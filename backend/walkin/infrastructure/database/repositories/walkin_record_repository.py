"""Concrete repository implementation for WalkinRecord backed by SQLAlchemy + PostgreSQL."""

import logging

from sqlalchemy import Select, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from walkin.application.interfaces import WalkinRecordRepository
from walkin.domain.entities import AuditEntry, RecordDetails, Student, WalkinRecord
from walkin.domain.exceptions import (
    RecordConflictError,
    RecordNotFoundError,
    StoreUnavailableError,
)
from walkin.infrastructure.database.models import WalkinRecordModel

logger = logging.getLogger(__name__)


def number_containment(number: str):
    """``student -> 'numbers' @> '[{"number": <number>}]'``."""
    return WalkinRecordModel.student["numbers"].contains([{"number": number}])


def latest_by_number_statement(number: str) -> Select:
    return (
        select(WalkinRecordModel)
        .where(number_containment(number))
        .order_by(WalkinRecordModel.created_at.desc(), WalkinRecordModel.id.desc())
        .limit(1)
        .execution_options(populate_existing=True)
    )


def list_by_author_statement(
    uid: str, *, offset: int, limit: int, number: str | None = None
) -> Select:
    stmt = select(WalkinRecordModel).where(WalkinRecordModel.author["uid"].astext == uid)
    if number is not None:
        stmt = stmt.where(number_containment(number))
    return (
        stmt.order_by(WalkinRecordModel.created_at.desc(), WalkinRecordModel.id.desc())
        .offset(offset)
        .limit(limit)
        .execution_options(populate_existing=True)
    )


class SQLAlchemyWalkinRecordRepository(WalkinRecordRepository):
    """Implements the WalkinRecordRepository port using SQLAlchemy async sessions."""

    def __init__(self, session: AsyncSession):
        self._session = session

    def _to_entity(self, model: WalkinRecordModel) -> WalkinRecord:
        """Map ORM model → domain entity."""
        return WalkinRecord(
            id=model.id,
            student=Student.from_document(model.student or {}),
            author=dict(model.author or {}),
            record_attachment=model.record_attachment,
            details=RecordDetails.from_document(model.details),
            audit_log=[AuditEntry.from_document(e) for e in model.audit_log or []],
            version=model.version,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )

    def _to_model(self, entity: WalkinRecord) -> WalkinRecordModel:
        """Map domain entity → ORM model (for creation)."""
        return WalkinRecordModel(
            student=entity.student.to_document(),
            author=entity.author,
            record_attachment=entity.record_attachment,
            details=entity.details.to_document() if entity.details else {},
            audit_log=[e.to_document() for e in entity.audit_log],
            version=1,
            created_at=entity.created_at,
            updated_at=entity.updated_at,
        )

    async def create(self, record: WalkinRecord) -> WalkinRecord:
        model = self._to_model(record)
        try:
            self._session.add(model)
            await self._session.flush()
        except SQLAlchemyError as exc:
            logger.error("Failed to insert walk-in record: %s", exc)
            raise StoreUnavailableError("Failed to save the record") from exc
        return self._to_entity(model)

    async def get_by_id(self, record_id: int) -> WalkinRecord | None:
        stmt = (
            select(WalkinRecordModel)
            .where(WalkinRecordModel.id == record_id)
            .execution_options(populate_existing=True)
        )
        return await self._fetch_one(stmt)

    async def find_latest_by_number(self, number: str) -> WalkinRecord | None:
        return await self._fetch_one(latest_by_number_statement(number))

    async def list_by_author(
        self,
        uid: str,
        *,
        offset: int = 0,
        limit: int = 10,
        number: str | None = None,
    ) -> list[WalkinRecord]:
        stmt = list_by_author_statement(uid, offset=offset, limit=limit, number=number)
        try:
            result = await self._session.execute(stmt)
        except SQLAlchemyError as exc:
            logger.error("Failed to list walk-in records: %s", exc)
            raise StoreUnavailableError("Failed to fetch records") from exc
        return [self._to_entity(row) for row in result.scalars().all()]

    async def save(self, record: WalkinRecord, *, expected_version: int) -> WalkinRecord:
        if record.id is None:
            raise ValueError("Cannot save a WalkinRecord that has no id")

        stmt = (
            update(WalkinRecordModel)
            .where(
                WalkinRecordModel.id == record.id,
                WalkinRecordModel.version == expected_version,
            )
            .values(
                student=record.student.to_document(),
                record_attachment=record.record_attachment,
                details=record.details.to_document() if record.details else {},
                audit_log=[e.to_document() for e in record.audit_log],
                version=expected_version + 1,
                updated_at=record.updated_at,
            )
            .execution_options(synchronize_session=False)
        )
        try:
            result = await self._session.execute(stmt)
            if result.rowcount == 0:
                exists = await self._session.scalar(
                    select(WalkinRecordModel.id).where(WalkinRecordModel.id == record.id)
                )
                if exists is None:
                    raise RecordNotFoundError(record.id)
                raise RecordConflictError(record.id, expected_version)
        except SQLAlchemyError as exc:
            logger.error("Failed to update walk-in record %s: %s", record.id, exc)
            raise StoreUnavailableError("Failed to update record") from exc

        record.version = expected_version + 1
        return record

    async def _fetch_one(self, stmt: Select) -> WalkinRecord | None:
        try:
            result = await self._session.execute(stmt)
        except SQLAlchemyError as exc:
            logger.error("Failed to load walk-in record: %s", exc)
            raise StoreUnavailableError("Failed to fetch record") from exc
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None
