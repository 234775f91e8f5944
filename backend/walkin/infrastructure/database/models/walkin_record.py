"""SQLAlchemy ORM model for walk-in records: one row per visit, documents as JSONB."""

from datetime import datetime, timezone

from sqlalchemy import DateTime, Index, Integer, String
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column

from walkin.infrastructure.database.base import Base


class WalkinRecordModel(Base):
    """ORM model mapped to the 'walkin_records' table.

    ``student`` and ``author`` are JSONB so that numbers can be matched with
    containment (``@>``) and ownership with ``author ->> 'uid'``.
    """

    __tablename__ = "walkin_records"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    student: Mapped[dict] = mapped_column(JSONB, nullable=False)
    author: Mapped[dict] = mapped_column(JSONB, nullable=False)
    record_attachment: Mapped[str | None] = mapped_column(String(500), nullable=True)
    details: Mapped[dict] = mapped_column(JSONB, nullable=False, default=dict, server_default="{}")
    audit_log: Mapped[list] = mapped_column(JSONB, nullable=False, default=list, server_default="[]")
    version: Mapped[int] = mapped_column(Integer, nullable=False, default=1, server_default="1")
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        nullable=False,
    )

    __table_args__ = (
        Index("ix_walkin_records_student", "student", postgresql_using="gin"),
        Index("ix_walkin_records_created", "created_at", "id"),
    )

    def __repr__(self) -> str:
        return f"<WalkinRecordModel(id={self.id}, version={self.version})>"


# Expression index backing the per-author listing
Index("ix_walkin_records_author_uid", WalkinRecordModel.author["uid"].astext)
