"""Transactions: CRUD and the date/category/type filters the pages use."""

from datetime import date
from typing import Any, Optional

from src.models.finance import Transaction, TransactionType
from src.models.records import (
    FieldSpec,
    OrderBy,
    SortType,
    WhereCondition,
    WhereOperator,
)
from src.services.finance.base import RecordService
from src.services.records import TRANSACTION_TABLE
from src.services.records.schema import ID_COLUMN, NAME_COLUMN
from src.utils.currency import parse_amount
from src.utils.dates import parse_date


class TransactionService(RecordService[Transaction]):
    """
    Facade over the ``transaction_c`` table.

    Results are ordered by date, newest first. Filtering happens in
    the store (where conditions), not on the fetched list.
    """

    table = TRANSACTION_TABLE
    label = "transaction"
    fields = [
        FieldSpec(name="amount_c"),
        FieldSpec(name="category_c", reference_field="name_c"),
        FieldSpec(name="date_c"),
        FieldSpec(name="description_c"),
        FieldSpec(name="notes_c"),
        FieldSpec(name="type_c"),
    ]
    default_order = [
        OrderBy(field_name="date_c", sort_type=SortType.DESC),
        OrderBy(field_name=ID_COLUMN, sort_type=SortType.DESC),
    ]

    def _record_to_model(self, record: dict[str, Any]) -> Transaction:
        category = record.get("category_c")
        if isinstance(category, dict):
            category_id = category.get(ID_COLUMN)
            category_name = category.get(NAME_COLUMN)
        else:
            category_id = category
            category_name = None

        tx_date = parse_date(record.get("date_c"))
        if tx_date is None:
            raise ValueError(f"Transaction {record.get(ID_COLUMN)} has no valid date")

        return Transaction(
            id=record[ID_COLUMN],
            amount=parse_amount(record.get("amount_c")) or 0.0,
            type=record.get("type_c"),
            date=tx_date,
            category_id=category_id,
            category_name=category_name,
            description=record.get("description_c") or None,
            notes=record.get("notes_c") or None,
        )

    def _model_to_record(self, model: Transaction) -> dict[str, Any]:
        return {
            "category_c": int(model.category_id) if model.category_id else None,
            "type_c": TransactionType(model.type).value,
            "amount_c": float(model.amount),
            "date_c": model.date.isoformat(),
            "description_c": model.description or None,
            "notes_c": model.notes or None,
        }

    async def get_by_date_range(self, start_date: date, end_date: date) -> list[Transaction]:
        """Transactions dated between start and end, both inclusive."""
        return await self.find(start_date=start_date, end_date=end_date)

    async def get_by_category(self, category_id: int) -> list[Transaction]:
        return await self.find(category_id=category_id)

    async def get_by_type(self, transaction_type: str) -> list[Transaction]:
        return await self.find(transaction_type=transaction_type)

    async def find(
        self,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        category_id: Optional[int] = None,
        transaction_type: Optional[str] = None,
    ) -> list[Transaction]:
        """Transactions matching every filter given."""
        where = []
        if start_date:
            where.append(WhereCondition(
                field_name="date_c",
                operator=WhereOperator.GREATER_THAN_OR_EQUAL_TO,
                values=[start_date.isoformat()],
            ))
        if end_date:
            where.append(WhereCondition(
                field_name="date_c",
                operator=WhereOperator.LESS_THAN_OR_EQUAL_TO,
                values=[end_date.isoformat()],
            ))
        if category_id is not None:
            where.append(WhereCondition(
                field_name="category_c",
                operator=WhereOperator.EQUAL_TO,
                values=[int(category_id)],
            ))
        if transaction_type:
            where.append(WhereCondition(
                field_name="type_c",
                operator=WhereOperator.EQUAL_TO,
                values=[TransactionType(transaction_type).value],
            ))
        return await self._fetch(where=where)
