"""Abstract repository interface (port) for WalkinRecord persistence."""

from abc import ABC, abstractmethod

from walkin.domain.entities import WalkinRecord


class WalkinRecordRepository(ABC):
    """Port for walk-in record persistence, implemented in the infrastructure layer.

    Implementations raise ``StoreUnavailableError`` on any underlying I/O
    failure. Callers do not retry.
    """

    @abstractmethod
    async def create(self, record: WalkinRecord) -> WalkinRecord:
        """Persist a new record and return it with its assigned id."""
        ...

    @abstractmethod
    async def get_by_id(self, record_id: int) -> WalkinRecord | None:
        """Retrieve a single record by its id."""
        ...

    @abstractmethod
    async def find_latest_by_number(self, number: str) -> WalkinRecord | None:
        """Return the newest record whose student numbers contain ``number``.

        Ties on ``created_at`` are broken by the highest id.
        """
        ...

    @abstractmethod
    async def list_by_author(
        self,
        uid: str,
        *,
        offset: int = 0,
        limit: int = 10,
        number: str | None = None,
    ) -> list[WalkinRecord]:
        """List records authored by ``uid``, newest first, optionally filtered by number."""
        ...

    @abstractmethod
    async def save(self, record: WalkinRecord, *, expected_version: int) -> WalkinRecord:
        """Write a mutated record back by id.

        Raises ``RecordConflictError`` when the stored version no longer
        equals ``expected_version`` and ``RecordNotFoundError`` when the row
        is gone.
        """
        ...
