from .walkin_record import WalkinRecordModel

__all__ = ["WalkinRecordModel"]
