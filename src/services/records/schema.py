"""
Table Schemas

The record store is schemaless on the wire (everything is a flat dict)
but a spreadsheet stores every cell as text. The schema tells the
backends how to turn cells back into numbers, dates and lookups, and
which columns a table accepts.

Naming follows the store's convention: custom columns end in ``_c``,
``Id`` and ``Name`` are system columns present on every table.
"""

import math
from datetime import date, datetime
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, Field

from src.services.records.interface import UnknownTableError


BANK_ACCOUNT_TABLE = "bank_account_c"
BUDGET_TABLE = "budget_c"
CATEGORY_TABLE = "category_c"
GOAL_TABLE = "goal_c"
TRANSACTION_TABLE = "transaction_c"

ID_COLUMN = "Id"
NAME_COLUMN = "Name"


class ColumnType(str, Enum):
    TEXT = "text"
    NUMBER = "number"
    DATE = "date"
    LOOKUP = "lookup"


class Column(BaseModel):
    """A column of a table."""
    name: str
    type: ColumnType = ColumnType.TEXT
    label: Optional[str] = None
    lookup_table: Optional[str] = None

    @property
    def display_label(self) -> str:
        if self.label:
            return self.label
        return self.name.removesuffix("_c").replace("_", " ").title()


class TableSchema(BaseModel):
    """Column layout of one table."""
    name: str
    columns: list[Column] = Field(default_factory=list)

    @property
    def column_names(self) -> list[str]:
        """All columns in storage order, system columns first."""
        return [ID_COLUMN, NAME_COLUMN] + [c.name for c in self.columns]

    def get_column(self, name: str) -> Optional[Column]:
        if name == ID_COLUMN:
            return Column(name=ID_COLUMN, type=ColumnType.NUMBER, label="Id")
        if name == NAME_COLUMN:
            return Column(name=NAME_COLUMN, type=ColumnType.TEXT, label="Name")
        for column in self.columns:
            if column.name == name:
                return column
        return None

    def has_column(self, name: str) -> bool:
        return self.get_column(name) is not None

    @property
    def display_column(self) -> str:
        """Column used as the display name when another table looks this one up."""
        return "name_c" if self.has_column("name_c") else NAME_COLUMN


TABLE_SCHEMAS: dict[str, TableSchema] = {
    BANK_ACCOUNT_TABLE: TableSchema(
        name=BANK_ACCOUNT_TABLE,
        columns=[
            Column(name="name_c", label="Account Name"),
            Column(name="account_number_c", label="Account Number"),
            Column(name="bank_name_c", label="Bank Name"),
            Column(name="balance_c", type=ColumnType.NUMBER, label="Balance"),
            Column(name="currency_c", label="Currency"),
            Column(name="account_type_c", label="Account Type"),
        ],
    ),
    CATEGORY_TABLE: TableSchema(
        name=CATEGORY_TABLE,
        columns=[
            Column(name="name_c"),
            Column(name="type_c"),
            Column(name="color_c"),
            Column(name="icon_c"),
        ],
    ),
    BUDGET_TABLE: TableSchema(
        name=BUDGET_TABLE,
        columns=[
            Column(name="amount_c", type=ColumnType.NUMBER),
            Column(name="month_c"),
            Column(
                name="category_id_c",
                type=ColumnType.LOOKUP,
                label="Category",
                lookup_table=CATEGORY_TABLE,
            ),
        ],
    ),
    GOAL_TABLE: TableSchema(
        name=GOAL_TABLE,
        columns=[
            Column(name="name_c"),
            Column(name="target_amount_c", type=ColumnType.NUMBER),
            Column(name="current_amount_c", type=ColumnType.NUMBER),
            Column(name="deadline_c", type=ColumnType.DATE),
        ],
    ),
    TRANSACTION_TABLE: TableSchema(
        name=TRANSACTION_TABLE,
        columns=[
            Column(name="amount_c", type=ColumnType.NUMBER),
            Column(
                name="category_c",
                type=ColumnType.LOOKUP,
                label="Category",
                lookup_table=CATEGORY_TABLE,
            ),
            Column(name="date_c", type=ColumnType.DATE),
            Column(name="description_c"),
            Column(name="notes_c"),
            Column(name="type_c"),
        ],
    ),
}


def get_schema(table: str) -> TableSchema:
    """Look up a table's schema."""
    try:
        return TABLE_SCHEMAS[table]
    except KeyError:
        raise UnknownTableError(f"Unknown table: {table}")


def coerce_value(column: Column, value: Any) -> Any:
    """
    Convert a value to the canonical in-store representation.

    - TEXT:   str
    - NUMBER: float (int for the Id column)
    - DATE:   ISO date string (YYYY-MM-DD)
    - LOOKUP: int Id of the referenced record

    Empty values become None.

    Raises:
        ValueError: If the value can't be represented in this column
    """
    if value is None or (isinstance(value, str) and not value.strip()):
        return None

    if column.type == ColumnType.TEXT:
        return str(value)

    if column.type == ColumnType.NUMBER:
        if isinstance(value, bool):
            raise ValueError(f"Invalid number: {value!r}")
        number = float(value)
        if not math.isfinite(number):
            raise ValueError(f"Invalid number: {value!r}")
        if column.name == ID_COLUMN:
            if not number.is_integer():
                raise ValueError(f"Invalid Id: {value!r}")
            return int(number)
        return number

    if column.type == ColumnType.DATE:
        if isinstance(value, datetime):
            return value.date().isoformat()
        if isinstance(value, date):
            return value.isoformat()
        return date.fromisoformat(str(value).strip()[:10]).isoformat()

    if column.type == ColumnType.LOOKUP:
        if isinstance(value, dict):
            value = value.get(ID_COLUMN)
            if value is None:
                return None
        if isinstance(value, bool):
            raise ValueError(f"Invalid reference: {value!r}")
        number = float(value)
        if not number.is_integer():
            raise ValueError(f"Invalid reference: {value!r}")
        return int(number)

    raise ValueError(f"Unsupported column type: {column.type}")


def serialize_cell(value: Any) -> str:
    """Render a canonical value as a spreadsheet cell."""
    if value is None:
        return ""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)
