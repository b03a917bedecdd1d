"""
In-Memory Record Store

Same semantics as the Google Sheets backend, minus the network.
Used by the test suite and by the app when no spreadsheet is configured.
"""

import copy
import threading
from typing import Any, Optional

from src.services.records.base import TabularRecordGateway
from src.services.records.query import Row, clean_record
from src.services.records.schema import ID_COLUMN, NAME_COLUMN, get_schema


class InMemoryRecordGateway(TabularRecordGateway):
    """
    Record gateway backed by plain dicts.

    Rows are copied on the way in and out so callers can't mutate
    stored state behind the gateway's back.
    """

    def __init__(self, tables: Optional[dict[str, list[dict[str, Any]]]] = None):
        super().__init__()
        self._tables: dict[str, dict[int, Row]] = {}
        self._lock = threading.Lock()
        for table, records in (tables or {}).items():
            self.seed(table, records)

    def seed(self, table: str, records: list[dict[str, Any]]) -> list[int]:
        """
        Load records directly, bypassing lookup checks.

        Records without an ``Id`` get the next free one.

        Returns:
            The Ids of the seeded records
        """
        schema = get_schema(table)
        ids = []
        with self._lock:
            store = self._tables.setdefault(table, {})
            for record in records:
                cleaned, errors = clean_record(record, schema)
                if errors:
                    raise ValueError(
                        f"Invalid seed record for {table}: "
                        + ", ".join(f"{e.field_label}: {e.message}" for e in errors)
                    )
                record_id = record.get(ID_COLUMN) or max(store, default=0) + 1
                row = {name: cleaned.get(name) for name in schema.column_names}
                row[ID_COLUMN] = int(record_id)
                row[NAME_COLUMN] = cleaned.get(NAME_COLUMN) or self._default_name(row, schema)
                store[row[ID_COLUMN]] = row
                ids.append(row[ID_COLUMN])
        return ids

    def clear(self) -> None:
        with self._lock:
            self._tables.clear()

    async def _load_rows(self, table: str) -> list[Row]:
        with self._lock:
            rows = self._tables.get(table, {})
            return [copy.deepcopy(r) for r in rows.values()]

    async def _insert_row(self, table: str, row: Row) -> None:
        with self._lock:
            self._tables.setdefault(table, {})[row[ID_COLUMN]] = copy.deepcopy(row)

    async def _replace_row(self, table: str, row: Row) -> None:
        with self._lock:
            self._tables.setdefault(table, {})[row[ID_COLUMN]] = copy.deepcopy(row)

    async def _remove_row(self, table: str, record_id: int) -> None:
        with self._lock:
            self._tables.get(table, {}).pop(record_id, None)
