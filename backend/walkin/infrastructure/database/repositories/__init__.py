from .walkin_record_repository import SQLAlchemyWalkinRecordRepository

__all__ = ["SQLAlchemyWalkinRecordRepository"]
