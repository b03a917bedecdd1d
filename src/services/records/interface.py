"""
Abstract Record Gateway

DESIGN DECISION: Services never talk to a storage backend directly.
They talk to a generic record API: five operations against named tables.
This allows us to:
1. Swap Google Sheets for another record store later
2. Use in-memory storage for testing and demo mode
3. Keep the per-table services thin (they only shape data)

The interface is intentionally generic - it knows nothing about
budgets or goals, only tables, columns and numeric record Ids.
"""

from abc import ABC, abstractmethod
from typing import Any, Optional

from src.models.records import FetchParams, FieldError, RecordResponse


class RecordGateway(ABC):
    """
    Abstract interface for the remote record store.

    Any backend (Google Sheets, in-memory, an HTTP record API)
    must implement these methods.
    """

    @abstractmethod
    async def fetch_records(
        self,
        table: str,
        params: Optional[FetchParams] = None,
    ) -> RecordResponse:
        """
        Fetch records from a table.

        Args:
            table: Table name (e.g. 'transaction_c')
            params: Fields to return, filters, ordering and paging

        Returns:
            Response whose ``data`` is the list of matching records
            and ``total`` the number of matches before paging

        Raises:
            RecordStoreError: If the backend cannot be reached
        """
        pass

    @abstractmethod
    async def get_record_by_id(
        self,
        table: str,
        record_id: int,
        params: Optional[FetchParams] = None,
    ) -> RecordResponse:
        """
        Retrieve a single record.

        Returns:
            Response whose ``data`` is the record. ``success`` is False
            if no record has this Id.
        """
        pass

    @abstractmethod
    async def create_record(
        self,
        table: str,
        records: list[dict[str, Any]],
    ) -> RecordResponse:
        """
        Create one or more records.

        Returns:
            Response with one entry in ``results`` per input record,
            in input order
        """
        pass

    @abstractmethod
    async def update_record(
        self,
        table: str,
        records: list[dict[str, Any]],
    ) -> RecordResponse:
        """
        Update one or more records. Each record must carry its ``Id``.
        Columns not present in a record are left unchanged.

        Returns:
            Response with one entry in ``results`` per input record
        """
        pass

    @abstractmethod
    async def delete_record(
        self,
        table: str,
        record_ids: list[int],
    ) -> RecordResponse:
        """
        Delete records by Id.

        Returns:
            Response with one entry in ``results`` per Id
        """
        pass


class RecordStoreError(Exception):
    """Base exception for record store operations."""
    pass


class NotFoundError(RecordStoreError):
    """Record not found in the store."""
    pass


class UnknownTableError(RecordStoreError):
    """The table is not part of the schema."""
    pass


class ConnectionError(RecordStoreError):
    """Could not connect to the record store backend."""
    pass


class StoreUnavailableError(ConnectionError):
    """A transient backend failure (quota, network). Safe to retry."""
    pass


class RecordOperationError(RecordStoreError):
    """The store rejected a create, update or delete."""

    def __init__(self, message: str, field_errors: Optional[list[FieldError]] = None):
        self.field_errors = field_errors or []
        super().__init__(message)

    @property
    def messages(self) -> list[str]:
        """The error plus one line per field error, for display."""
        lines = [f"{e.field_label}: {e.message}" for e in self.field_errors]
        return lines or [str(self)]
