"""
Google Sheets Record Store

DESIGN DECISION: Google Sheets is the remote record store because:
1. Users can view and fix their data directly in Sheets
2. Nothing to host: a service account and one spreadsheet
3. Version history of every cell comes for free

Each table is one worksheet. Row 1 holds the column names, every
following row is one record. Cells are written RAW and parsed back
using the table schema.

TRADEOFFS:
- Not suitable for high-volume data (fine for personal finances)
- No transactions (each record is written with a single call)
- No query capabilities (filtering happens in Python, see query.py)
"""

from contextlib import contextmanager
from typing import Optional

import gspread
import structlog
from google.auth.exceptions import TransportError
from google.oauth2.service_account import Credentials
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from src.config import get_settings
from src.services.records.base import TabularRecordGateway
from src.services.records.interface import (
    ConnectionError,
    RecordStoreError,
    StoreUnavailableError,
)
from src.services.records.query import Row
from src.services.records.schema import (
    ID_COLUMN,
    coerce_value,
    get_schema,
    serialize_cell,
)


logger = structlog.get_logger(__name__)

# Quota and server errors from the Sheets API, and network failures
TRANSIENT_ERRORS = (gspread.exceptions.APIError, TransportError, OSError)

# Only transient failures are retried; a sheet without an Id column stays broken
network_retry = retry(
    stop=stop_after_attempt(3),
    wait=wait_exponential(multiplier=1, min=2, max=10),
    retry=retry_if_exception_type(StoreUnavailableError),
    reraise=True,
)


@contextmanager
def backend_errors(action: str):
    """Translate gspread/transport exceptions into record store errors."""
    try:
        yield
    except RecordStoreError:
        raise
    except TRANSIENT_ERRORS as e:
        raise StoreUnavailableError(f"{action}: {e}")
    except Exception as e:
        raise RecordStoreError(f"{action}: {e}")


class GoogleSheetsClient:
    """
    Authenticated access to the spreadsheet and its table worksheets.

    Worksheets are looked up once and cached per table.
    """

    def __init__(self):
        self._client: Optional[gspread.Client] = None
        self._spreadsheet: Optional[gspread.Spreadsheet] = None
        self._worksheets: dict[str, gspread.Worksheet] = {}
        self._settings = get_settings().google_sheets

    def connect(self) -> gspread.Client:
        """
        Authorize with the service account key (once).

        A missing or unreadable key is a ConnectionError, never retried.
        """
        if self._client is None:
            try:
                scopes = [
                    "https://www.googleapis.com/auth/spreadsheets",
                    "https://www.googleapis.com/auth/drive",
                ]
                credentials = Credentials.from_service_account_file(
                    self._settings.credentials_path,
                    scopes=scopes,
                )
                self._client = gspread.authorize(credentials)
            except FileNotFoundError:
                raise ConnectionError(
                    f"Google credentials file not found: {self._settings.credentials_path}"
                )
            except Exception as e:
                raise ConnectionError(f"Failed to connect to Google Sheets: {e}")

        return self._client

    @network_retry
    def get_spreadsheet(self) -> gspread.Spreadsheet:
        """Open the spreadsheet named by GOOGLE_SHEETS_SPREADSHEET_ID."""
        if self._spreadsheet is None:
            client = self.connect()
            try:
                self._spreadsheet = client.open_by_key(
                    self._settings.spreadsheet_id
                )
            except gspread.SpreadsheetNotFound:
                raise ConnectionError(
                    f"Spreadsheet not found: {self._settings.spreadsheet_id}"
                )
            except TRANSIENT_ERRORS as e:
                raise StoreUnavailableError(f"Failed to open spreadsheet: {e}")
        return self._spreadsheet

    def get_table_sheet(self, table: str) -> gspread.Worksheet:
        """Get or create the worksheet holding a table."""
        if table in self._worksheets:
            return self._worksheets[table]

        schema = get_schema(table)
        spreadsheet = self.get_spreadsheet()
        try:
            sheet = spreadsheet.worksheet(table)
        except gspread.WorksheetNotFound:
            # New table: header row from the schema
            sheet = spreadsheet.add_worksheet(
                title=table,
                rows=self._settings.worksheet_rows,
                cols=len(schema.column_names),
            )
            sheet.append_row(schema.column_names)
            logger.info("worksheet_created", table=table)

        self._worksheets[table] = sheet
        return sheet


class GoogleSheetsRecordGateway(TabularRecordGateway):
    """
    Google Sheets implementation of the record gateway.

    Header names decide which cell holds which column, so columns can
    be reordered (or new ones appended) in the sheet by hand.
    """

    def __init__(self, client: Optional[GoogleSheetsClient] = None):
        super().__init__()
        self._client = client or GoogleSheetsClient()

    def _row_to_record(self, table: str, header: list[str], cells: list[str]) -> Row:
        """Convert a spreadsheet row to a canonical record."""
        schema = get_schema(table)

        # Handle missing trailing cells gracefully
        def safe_get(index: int) -> str:
            try:
                return cells[index]
            except IndexError:
                return ""

        record: Row = {}
        for name in schema.column_names:
            column = schema.get_column(name)
            raw = safe_get(header.index(name)) if name in header else ""
            record[name] = coerce_value(column, raw)
        return record

    def _record_to_row(self, table: str, header: list[str], record: Row) -> list[str]:
        """Convert a canonical record to a spreadsheet row, in header order."""
        return [serialize_cell(record.get(name)) for name in header]

    def _read_sheet(self, table: str) -> tuple[gspread.Worksheet, list[str], list[list[str]]]:
        sheet = self._client.get_table_sheet(table)
        values = sheet.get_all_values()
        if not values:
            header = get_schema(table).column_names
            sheet.append_row(header)
            return sheet, header, []
        return sheet, values[0], values[1:]

    def _find_row_number(
        self,
        table: str,
        header: list[str],
        rows: list[list[str]],
        record_id: int,
    ) -> int:
        """1-based sheet row number of a record (row 1 is the header)."""
        id_index = header.index(ID_COLUMN)
        for offset, cells in enumerate(rows, start=2):
            if len(cells) > id_index and cells[id_index].strip() == str(record_id):
                return offset
        raise RecordStoreError(f"Record {record_id} vanished from {table}")

    @network_retry
    async def _load_rows(self, table: str) -> list[Row]:
        with backend_errors(f"Failed to read {table}"):
            _, header, rows = self._read_sheet(table)

        if ID_COLUMN not in header:
            raise RecordStoreError(f"Worksheet {table} has no '{ID_COLUMN}' column")

        records = []
        for line, cells in enumerate(rows, start=2):
            if not any(c.strip() for c in cells):  # Skip empty rows
                continue
            try:
                record = self._row_to_record(table, header, cells)
            except (TypeError, ValueError) as e:
                logger.warning("malformed_row_skipped", table=table, row=line, error=str(e))
                continue
            if record.get(ID_COLUMN) is None:
                logger.warning("row_without_id_skipped", table=table, row=line)
                continue
            records.append(record)
        return records

    @network_retry
    async def _insert_row(self, table: str, row: Row) -> None:
        with backend_errors(f"Failed to create record in {table}"):
            sheet, header, _ = self._read_sheet(table)
            sheet.append_row(self._record_to_row(table, header, row), value_input_option="RAW")

    @network_retry
    async def _replace_row(self, table: str, row: Row) -> None:
        with backend_errors(f"Failed to update record in {table}"):
            sheet, header, rows = self._read_sheet(table)
            number = self._find_row_number(table, header, rows, row[ID_COLUMN])
            sheet.update(
                values=[self._record_to_row(table, header, row)],
                range_name=f"A{number}",
                value_input_option="RAW",
            )

    @network_retry
    async def _remove_row(self, table: str, record_id: int) -> None:
        with backend_errors(f"Failed to delete record from {table}"):
            sheet, header, rows = self._read_sheet(table)
            sheet.delete_rows(self._find_row_number(table, header, rows, record_id))
