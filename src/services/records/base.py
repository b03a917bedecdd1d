"""
Shared Record Gateway Logic

Both backends store a table as a list of rows, so the record API
(filtering, lookups, per-record validation results, Id allocation)
is implemented once here. A backend only provides four row-level
primitives: load, insert, replace and remove.
"""

import threading
from abc import abstractmethod
from typing import Any, Optional

import structlog

from src.models.records import (
    FetchParams,
    FieldError,
    RecordResponse,
    RecordResult,
)
from src.services.records.interface import RecordGateway, UnknownTableError
from src.services.records.query import (
    InvalidQueryError,
    Row,
    clean_record,
    execute_fetch,
    present_row,
)
from src.services.records.schema import (
    ID_COLUMN,
    NAME_COLUMN,
    ColumnType,
    TableSchema,
    get_schema,
)


logger = structlog.get_logger(__name__)


class TabularRecordGateway(RecordGateway):
    """
    Record API over a row store.

    Subclasses implement the row primitives; they may raise
    RecordStoreError subclasses for backend failures, which propagate
    to the caller. Problems with the request itself (unknown table,
    unknown field, bad value) are reported in the response instead.

    One gateway is shared by every session thread. Writes to a table
    hold that table's lock from reading the rows to the last insert,
    so two creates never allocate the same Id.
    """

    def __init__(self):
        self._locks_guard = threading.Lock()
        self._table_locks: dict[str, threading.RLock] = {}

    # -------------------------------------------------------------------------
    # Row primitives
    # -------------------------------------------------------------------------

    @abstractmethod
    async def _load_rows(self, table: str) -> list[Row]:
        """All rows of a table in canonical form."""
        pass

    @abstractmethod
    async def _insert_row(self, table: str, row: Row) -> None:
        pass

    @abstractmethod
    async def _replace_row(self, table: str, row: Row) -> None:
        """Overwrite the stored row with the same Id."""
        pass

    @abstractmethod
    async def _remove_row(self, table: str, record_id: int) -> None:
        pass

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    async def _lookup_index(
        self,
        schema: TableSchema,
    ) -> dict[str, dict[int, Row]]:
        """Rows of every table this schema looks up, keyed by Id."""
        index: dict[str, dict[int, Row]] = {}
        for column in schema.columns:
            if column.type != ColumnType.LOOKUP or column.lookup_table in index:
                continue
            rows = await self._load_rows(column.lookup_table)
            index[column.lookup_table] = {r[ID_COLUMN]: r for r in rows}
        return index

    @staticmethod
    def _resolver(index: dict[str, dict[int, Row]]):
        def resolve(table: str, record_id: int, display: str) -> Optional[str]:
            target = index.get(table, {}).get(record_id)
            if target is None:
                return None
            if display not in target:
                display = get_schema(table).display_column
            return target.get(display) or target.get(NAME_COLUMN)
        return resolve

    @staticmethod
    def _missing_references(
        row: Row,
        schema: TableSchema,
        index: dict[str, dict[int, Row]],
    ) -> list[FieldError]:
        errors = []
        for column in schema.columns:
            if column.type != ColumnType.LOOKUP:
                continue
            value = row.get(column.name)
            if value is not None and value not in index.get(column.lookup_table, {}):
                errors.append(FieldError(
                    field_label=column.display_label,
                    message=f"Referenced record {value} does not exist",
                ))
        return errors

    @staticmethod
    def _default_name(row: Row, schema: TableSchema) -> str:
        if row.get("name_c"):
            return row["name_c"]
        return f"{schema.name} {row[ID_COLUMN]}"

    def _write_lock(self, table: str) -> threading.RLock:
        with self._locks_guard:
            return self._table_locks.setdefault(table, threading.RLock())

    def _resolve_schema(self, table: str) -> tuple[Optional[TableSchema], Optional[RecordResponse]]:
        try:
            return get_schema(table), None
        except UnknownTableError as e:
            logger.warning("unknown_table", table=table)
            return None, RecordResponse.failure(str(e))

    # -------------------------------------------------------------------------
    # Record API
    # -------------------------------------------------------------------------

    async def fetch_records(
        self,
        table: str,
        params: Optional[FetchParams] = None,
    ) -> RecordResponse:
        """Fetch records with filters, ordering and paging."""
        schema, failure = self._resolve_schema(table)
        if failure:
            return failure
        params = params or FetchParams()

        rows = await self._load_rows(table)
        index = await self._lookup_index(schema)
        try:
            page, total = execute_fetch(rows, params, schema, self._resolver(index))
        except InvalidQueryError as e:
            return RecordResponse.failure(str(e))

        return RecordResponse(success=True, data=page, total=total)

    async def get_record_by_id(
        self,
        table: str,
        record_id: int,
        params: Optional[FetchParams] = None,
    ) -> RecordResponse:
        """Retrieve a record by its Id."""
        schema, failure = self._resolve_schema(table)
        if failure:
            return failure
        params = params or FetchParams()

        rows = await self._load_rows(table)
        for row in rows:
            if row.get(ID_COLUMN) == record_id:
                index = await self._lookup_index(schema)
                try:
                    data = present_row(row, schema, params.fields, self._resolver(index))
                except InvalidQueryError as e:
                    return RecordResponse.failure(str(e))
                return RecordResponse(success=True, data=data, total=1)

        return RecordResponse.failure(f"Record with Id {record_id} not found in {table}")

    async def create_record(
        self,
        table: str,
        records: list[dict[str, Any]],
    ) -> RecordResponse:
        """Create records, allocating Ids as max(Id) + 1."""
        schema, failure = self._resolve_schema(table)
        if failure:
            return failure
        with self._write_lock(table):
            return await self._create_rows(table, schema, records)

    async def _create_rows(
        self,
        table: str,
        schema: TableSchema,
        records: list[dict[str, Any]],
    ) -> RecordResponse:
        rows = await self._load_rows(table)
        next_id = max((r[ID_COLUMN] for r in rows), default=0) + 1
        index = await self._lookup_index(schema)
        resolve = self._resolver(index)

        results = []
        for record in records:
            cleaned, errors = clean_record(record, schema)
            errors.extend(self._missing_references(cleaned, schema, index))
            if errors:
                results.append(RecordResult(
                    success=False,
                    message="Record failed validation",
                    errors=errors,
                ))
                continue

            row = {name: cleaned.get(name) for name in schema.column_names}
            row[ID_COLUMN] = next_id
            row[NAME_COLUMN] = cleaned.get(NAME_COLUMN) or self._default_name(row, schema)
            next_id += 1

            await self._insert_row(table, row)
            results.append(RecordResult(
                success=True,
                data=present_row(row, schema, [], resolve),
            ))

        logger.debug(
            "records_created",
            table=table,
            requested=len(records),
            created=sum(1 for r in results if r.success),
        )
        return RecordResponse(success=True, results=results)

    async def update_record(
        self,
        table: str,
        records: list[dict[str, Any]],
    ) -> RecordResponse:
        """Partially update records by Id."""
        schema, failure = self._resolve_schema(table)
        if failure:
            return failure
        with self._write_lock(table):
            return await self._update_rows(table, schema, records)

    async def _update_rows(
        self,
        table: str,
        schema: TableSchema,
        records: list[dict[str, Any]],
    ) -> RecordResponse:
        rows = {r[ID_COLUMN]: r for r in await self._load_rows(table)}
        index = await self._lookup_index(schema)
        resolve = self._resolver(index)

        results = []
        for record in records:
            record_id = record.get(ID_COLUMN)
            try:
                record_id = int(record_id)
            except (TypeError, ValueError):
                results.append(RecordResult(
                    success=False,
                    message="Id is required to update a record",
                ))
                continue

            existing = rows.get(record_id)
            if existing is None:
                results.append(RecordResult(
                    success=False,
                    message=f"Record with Id {record_id} not found",
                ))
                continue

            cleaned, errors = clean_record(record, schema)
            errors.extend(self._missing_references(cleaned, schema, index))
            if errors:
                results.append(RecordResult(
                    success=False,
                    message="Record failed validation",
                    errors=errors,
                ))
                continue

            row = {**existing, **cleaned, ID_COLUMN: record_id}
            if not row.get(NAME_COLUMN):
                row[NAME_COLUMN] = self._default_name(row, schema)
            await self._replace_row(table, row)
            rows[record_id] = row
            results.append(RecordResult(
                success=True,
                data=present_row(row, schema, [], resolve),
            ))

        return RecordResponse(success=True, results=results)

    async def delete_record(
        self,
        table: str,
        record_ids: list[int],
    ) -> RecordResponse:
        """Delete records by Id."""
        _, failure = self._resolve_schema(table)
        if failure:
            return failure
        with self._write_lock(table):
            return await self._delete_rows(table, record_ids)

    async def _delete_rows(self, table: str, record_ids: list[int]) -> RecordResponse:
        existing = {r[ID_COLUMN] for r in await self._load_rows(table)}
        results = []
        for record_id in record_ids:
            if record_id not in existing:
                results.append(RecordResult(
                    success=False,
                    message=f"Record with Id {record_id} not found",
                ))
                continue
            await self._remove_row(table, record_id)
            existing.discard(record_id)
            results.append(RecordResult(success=True, data={ID_COLUMN: record_id}))

        return RecordResponse(success=True, results=results)
