"""Monthly budgets per category, with spending derived from transactions."""

from collections import defaultdict
from typing import Any, Optional

from src.models.finance import Budget, Transaction, TransactionType
from src.models.records import FieldSpec, WhereCondition, WhereOperator
from src.services.finance.base import RecordService
from src.services.records import BUDGET_TABLE
from src.services.records.schema import ID_COLUMN, NAME_COLUMN
from src.utils.currency import parse_amount


class BudgetService(RecordService[Budget]):
    """
    Facade over the ``budget_c`` table.

    ``spent`` is not a stored column. Reads return it as zero;
    ``with_spending`` fills it in from the month's expenses.
    """

    table = BUDGET_TABLE
    label = "budget"
    fields = [
        FieldSpec(name="amount_c"),
        FieldSpec(name="month_c"),
        FieldSpec(name="category_id_c", reference_field="name_c"),
    ]

    def _record_to_model(self, record: dict[str, Any]) -> Budget:
        category = record.get("category_id_c")
        if isinstance(category, dict):
            category_id = category.get(ID_COLUMN)
            category_name = category.get(NAME_COLUMN)
        else:
            category_id = category
            category_name = None

        return Budget(
            id=record[ID_COLUMN],
            name=record.get(NAME_COLUMN) or None,
            amount=parse_amount(record.get("amount_c")) or 0.0,
            month=record.get("month_c") or "",
            category_id=category_id,
            category_name=category_name,
            spent=0.0,
        )

    def _model_to_record(self, model: Budget) -> dict[str, Any]:
        return {
            "Name": f"Budget - {model.month}",
            "amount_c": float(model.amount),
            "month_c": model.month,
            "category_id_c": int(model.category_id) if model.category_id is not None else None,
        }

    async def get_by_month(self, month: str) -> list[Budget]:
        return await self._fetch(where=[
            WhereCondition(field_name="month_c", operator=WhereOperator.EQUAL_TO, values=[month]),
        ])

    async def get_by_category(self, category_id: int) -> list[Budget]:
        return await self._fetch(where=[
            WhereCondition(
                field_name="category_id_c",
                operator=WhereOperator.EQUAL_TO,
                values=[int(category_id)],
            ),
        ])

    async def get_by_category_and_month(self, category_id: int, month: str) -> Optional[Budget]:
        budgets = await self._fetch(where=[
            WhereCondition(
                field_name="category_id_c",
                operator=WhereOperator.EQUAL_TO,
                values=[int(category_id)],
            ),
            WhereCondition(field_name="month_c", operator=WhereOperator.EQUAL_TO, values=[month]),
        ])
        return budgets[0] if budgets else None

    async def update_spent_amount(self, record_id: int, spent_amount: float) -> Budget:
        """
        The budget with ``spent`` set. Nothing is written to the store.

        Raises:
            NotFoundError: If the budget doesn't exist
        """
        budget = await self._require(record_id)
        return budget.model_copy(update={"spent": float(spent_amount)})

    @staticmethod
    def with_spending(
        budgets: list[Budget],
        transactions: list[Transaction],
    ) -> list[Budget]:
        """
        Copies of the budgets with ``spent`` set to the total of expense
        transactions in the same category and month.
        """
        spent: dict[tuple[Optional[int], str], float] = defaultdict(float)
        for tx in transactions:
            if tx.type == TransactionType.EXPENSE:
                spent[(tx.category_id, tx.month)] += tx.amount

        return [
            budget.model_copy(update={"spent": spent.get((budget.category_id, budget.month), 0.0)})
            for budget in budgets
        ]
