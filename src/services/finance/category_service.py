"""Categories: CRUD and lookups by income/expense type."""

from typing import Any

from src.models.finance import (
    DEFAULT_CATEGORY_COLOR,
    DEFAULT_CATEGORY_ICON,
    Category,
    CategoryType,
)
from src.models.records import FieldSpec, WhereCondition, WhereOperator
from src.services.finance.base import RecordService
from src.services.records import CATEGORY_TABLE
from src.services.records.schema import ID_COLUMN, NAME_COLUMN


class CategoryService(RecordService[Category]):
    """Facade over the ``category_c`` table."""

    table = CATEGORY_TABLE
    label = "category"
    fields = [
        FieldSpec(name="name_c"),
        FieldSpec(name="type_c"),
        FieldSpec(name="color_c"),
        FieldSpec(name="icon_c"),
    ]

    def _record_to_model(self, record: dict[str, Any]) -> Category:
        return Category(
            id=record[ID_COLUMN],
            name=record.get("name_c") or record.get(NAME_COLUMN) or "",
            type=record.get("type_c") or CategoryType.EXPENSE,
            color=record.get("color_c") or DEFAULT_CATEGORY_COLOR,
            icon=record.get("icon_c") or DEFAULT_CATEGORY_ICON,
        )

    def _model_to_record(self, model: Category) -> dict[str, Any]:
        return {
            "Name": model.name or "Untitled Category",
            "name_c": model.name,
            "type_c": CategoryType(model.type).value,
            "color_c": model.color or DEFAULT_CATEGORY_COLOR,
            "icon_c": model.icon or DEFAULT_CATEGORY_ICON,
        }

    async def get_by_type(self, category_type: str) -> list[Category]:
        return await self._fetch(where=[
            WhereCondition(
                field_name="type_c",
                operator=WhereOperator.EQUAL_TO,
                values=[CategoryType(category_type).value],
            ),
        ])

    async def get_income_categories(self) -> list[Category]:
        return await self.get_by_type(CategoryType.INCOME)

    async def get_expense_categories(self) -> list[Category]:
        return await self.get_by_type(CategoryType.EXPENSE)
