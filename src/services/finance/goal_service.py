"""Savings goals: CRUD, progress and contributions."""

from typing import Any

from src.models.finance import Goal, GoalProgress
from src.models.records import FieldSpec
from src.services.finance.base import RecordService
from src.services.records import GOAL_TABLE
from src.services.records.schema import ID_COLUMN
from src.utils.currency import parse_amount
from src.utils.dates import parse_date


class GoalService(RecordService[Goal]):
    """Facade over the ``goal_c`` table."""

    table = GOAL_TABLE
    label = "goal"
    fields = [
        FieldSpec(name="name_c"),
        FieldSpec(name="target_amount_c"),
        FieldSpec(name="current_amount_c"),
        FieldSpec(name="deadline_c"),
    ]

    def _record_to_model(self, record: dict[str, Any]) -> Goal:
        return Goal(
            id=record[ID_COLUMN],
            name=record.get("name_c") or "",
            target_amount=parse_amount(record.get("target_amount_c")) or 0.0,
            current_amount=parse_amount(record.get("current_amount_c")) or 0.0,
            deadline=parse_date(record.get("deadline_c")),
        )

    def _model_to_record(self, model: Goal) -> dict[str, Any]:
        return {
            "Name": model.name or "Untitled Goal",
            "name_c": model.name,
            "target_amount_c": float(model.target_amount),
            "current_amount_c": float(model.current_amount or 0),
            "deadline_c": model.deadline.isoformat() if model.deadline else None,
        }

    async def get_active_goals(self) -> list[Goal]:
        return [g for g in await self.get_all() if not g.is_completed]

    async def get_completed_goals(self) -> list[Goal]:
        return [g for g in await self.get_all() if g.is_completed]

    async def add_funds(self, record_id: int, amount: float) -> Goal:
        """
        Add a contribution to a goal and save it.

        Raises:
            NotFoundError: If the goal doesn't exist
            RecordOperationError: If the store rejected the update
        """
        goal = await self._require(record_id)
        updated = goal.model_copy(
            update={"current_amount": goal.current_amount + float(amount)}
        )
        return await self.update(record_id, updated)

    async def get_goal_progress(self, record_id: int) -> GoalProgress:
        """
        Raises:
            NotFoundError: If the goal doesn't exist
        """
        goal = await self._require(record_id)
        return goal.progress()
