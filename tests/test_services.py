"""
Tests for the domain services, against the in-memory record store.
"""

from datetime import date

import pytest

from src.models.activity import NoticeLevel
from src.models.finance import BankAccount, Budget, Category, Goal, Transaction
from src.models.records import RecordResponse
from src.services.finance import BankAccountService, BudgetService
from src.services.records import (
    BANK_ACCOUNT_TABLE,
    BUDGET_TABLE,
    GOAL_TABLE,
    TRANSACTION_TABLE,
    InMemoryRecordGateway,
    NotFoundError,
    RecordOperationError,
    RecordStoreError,
)


class FailingGateway(InMemoryRecordGateway):
    """A store that can't be reached."""

    async def _load_rows(self, table):
        raise RecordStoreError("Sheets API timed out")


class RejectingGateway(InMemoryRecordGateway):
    """A store that answers every fetch with a failed response."""

    async def fetch_records(self, table, params=None):
        return RecordResponse.failure("Permission denied")


class TestBankAccountService:
    """Tests for BankAccountService."""

    async def test_create_and_list_newest_first(self, services):
        """Test accounts round-trip and are listed by Id, newest first."""
        await services.bank_accounts.create(BankAccount(
            name="Checking", account_number="111", bank_name="First", balance=100, currency="USD",
        ))
        await services.bank_accounts.create(BankAccount(
            name="Savings", account_number="222", bank_name="First", balance=50.5,
            currency="EUR", account_type="Savings",
        ))
        accounts = await services.bank_accounts.get_all()
        assert [a.name for a in accounts] == ["Savings", "Checking"]
        assert accounts[0].balance == 50.5
        assert accounts[0].account_type == "Savings"

    async def test_missing_currency_uses_default(self, gateway, activity):
        """Test a stored account without currency reads as the default."""
        gateway.seed(BANK_ACCOUNT_TABLE, [{"name_c": "Old", "balance_c": "12"}])
        service = BankAccountService(gateway, activity, default_currency="GBP")
        [account] = await service.get_all()
        assert account.currency == "GBP"
        assert account.balance == 12.0

    def test_totals_by_currency(self):
        """Test balances are summed per currency in order of appearance."""
        accounts = [
            BankAccount(name="a", balance=100, currency="EUR"),
            BankAccount(name="b", balance=50, currency="USD"),
            BankAccount(name="c", balance=25.5, currency="EUR"),
        ]
        assert BankAccountService.totals_by_currency(accounts) == {"EUR": 125.5, "USD": 50}
        assert BankAccountService.primary_total(accounts) == ("EUR", 125.5)
        assert BankAccountService.primary_total([]) == ("USD", 0.0)

    def test_search(self):
        """Test search matches name, bank, number or type, case-insensitively."""
        accounts = [
            BankAccount(name="Daily", bank_name="Chase", account_number="1234", account_type="Checking"),
            BankAccount(name="Nest Egg", bank_name="Ally", account_number="9876", account_type="Savings"),
        ]
        assert [a.name for a in BankAccountService.search(accounts, "chase")] == ["Daily"]
        assert [a.name for a in BankAccountService.search(accounts, "987")] == ["Nest Egg"]
        assert [a.name for a in BankAccountService.search(accounts, "SAV")] == ["Nest Egg"]
        assert len(BankAccountService.search(accounts, "  ")) == 2

    async def test_update_and_delete_emit_notices(self, services, activity):
        """Test successful mutations queue success notices."""
        created = await services.bank_accounts.create(BankAccount(
            name="Temp", account_number="1", bank_name="B", balance=1,
        ))
        updated = await services.bank_accounts.update(
            created.id, created.model_copy(update={"balance": 99}),
        )
        assert updated.balance == 99
        assert await services.bank_accounts.delete(created.id) is True
        assert await services.bank_accounts.get_by_id(created.id) is None

        messages = [n.message for n in activity.drain_notices()]
        assert messages == [
            "Bank account created successfully",
            "Bank account updated successfully",
            "Bank account deleted successfully",
        ]


class TestCategoryService:
    """Tests for CategoryService."""

    async def test_filters_by_type(self, services, categories):
        """Test income/expense category filters."""
        income = await services.categories.get_income_categories()
        expense = await services.categories.get_expense_categories()
        assert [c.name for c in income] == ["Salary"]
        assert sorted(c.name for c in expense) == ["Groceries", "Rent"]

    async def test_defaults_applied_on_read(self, gateway, services):
        """Test missing color and icon fall back to defaults."""
        gateway.seed("category_c", [{"name_c": "Bare", "type_c": "expense"}])
        [category] = await services.categories.get_all()
        assert category.color == "#3B82F6"
        assert category.icon == "ShoppingCart"

    async def test_create_writes_name_column(self, gateway, services):
        """Test Name mirrors the category name."""
        created = await services.categories.create(Category(name="Pets", type="expense"))
        response = await gateway.get_record_by_id("category_c", created.id)
        assert response.data["Name"] == "Pets"


class TestBudgetService:
    """Tests for BudgetService."""

    @pytest.fixture
    def budgets(self, gateway, categories):
        return gateway.seed(BUDGET_TABLE, [
            {"amount_c": 300, "month_c": "2024-03", "category_id_c": categories["Groceries"]},
            {"amount_c": 200, "month_c": "2024-04", "category_id_c": categories["Groceries"]},
            {"amount_c": 1200, "month_c": "2024-04", "category_id_c": categories["Rent"]},
        ])

    async def test_create_names_budget_by_month(self, gateway, services, categories):
        """Test created budgets are named 'Budget - {month}'."""
        created = await services.budgets.create(
            Budget(amount=150, month="2024-05", category_id=categories["Rent"]),
        )
        assert created.name == "Budget - 2024-05"
        assert created.category_name == "Rent"
        assert created.spent == 0

    async def test_get_by_month(self, services, budgets):
        """Test filtering by month."""
        april = await services.budgets.get_by_month("2024-04")
        assert sorted(b.amount for b in april) == [200, 1200]

    async def test_get_by_category(self, services, categories, budgets):
        """Test filtering by category."""
        groceries = await services.budgets.get_by_category(categories["Groceries"])
        assert sorted(b.month for b in groceries) == ["2024-03", "2024-04"]

    async def test_get_by_category_and_month(self, services, categories, budgets):
        """Test the single-budget lookup and its miss."""
        found = await services.budgets.get_by_category_and_month(categories["Rent"], "2024-04")
        assert found.amount == 1200
        assert await services.budgets.get_by_category_and_month(categories["Rent"], "2024-03") is None

    async def test_update_spent_amount_not_persisted(self, services, budgets):
        """Test spent is set on the returned budget only."""
        budget = await services.budgets.update_spent_amount(budgets[0], 120)
        assert budget.spent == 120
        reloaded = await services.budgets.get_by_id(budgets[0])
        assert reloaded.spent == 0

    async def test_update_spent_amount_missing(self, services):
        """Test update_spent_amount on a missing budget raises NotFoundError."""
        with pytest.raises(NotFoundError):
            await services.budgets.update_spent_amount(404, 10)

    async def test_with_spending(self, services, categories, budgets, transactions):
        """Test spent comes from expenses of the same category and month."""
        april = await services.budgets.get_by_month("2024-04")
        april_tx = await services.transactions.get_by_date_range(date(2024, 4, 1), date(2024, 4, 30))
        by_category = {
            b.category_id: b for b in BudgetService.with_spending(april, april_tx)
        }
        assert by_category[categories["Groceries"]].spent == 45
        assert by_category[categories["Rent"]].spent == 0


class TestGoalService:
    """Tests for GoalService."""

    @pytest.fixture
    def goals(self, gateway):
        return gateway.seed(GOAL_TABLE, [
            {"name_c": "Car", "target_amount_c": 5000, "current_amount_c": 1000,
             "deadline_c": "2025-01-01"},
            {"name_c": "Trip", "target_amount_c": 800, "current_amount_c": 800},
        ])

    async def test_active_and_completed(self, services, goals):
        """Test goals are split by completion."""
        assert [g.name for g in await services.goals.get_active_goals()] == ["Car"]
        assert [g.name for g in await services.goals.get_completed_goals()] == ["Trip"]

    async def test_add_funds_persists(self, services, goals):
        """Test add_funds writes the new amount back."""
        updated = await services.goals.add_funds(goals[0], 250)
        assert updated.current_amount == 1250
        assert (await services.goals.get_by_id(goals[0])).current_amount == 1250

    async def test_add_funds_missing_goal(self, services):
        """Test add_funds on a missing goal raises NotFoundError."""
        with pytest.raises(NotFoundError):
            await services.goals.add_funds(404, 10)

    async def test_get_goal_progress(self, services, goals):
        """Test progress for a stored goal."""
        progress = await services.goals.get_goal_progress(goals[0])
        assert progress.progress == 20.0
        assert progress.remaining == 4000

    async def test_untitled_goal_name(self, gateway, services):
        """Test a goal without a name is stored as 'Untitled Goal'."""
        created = await services.goals.create(Goal(name="", target_amount=100))
        response = await gateway.get_record_by_id(GOAL_TABLE, created.id)
        assert response.data["Name"] == "Untitled Goal"
        assert response.data["current_amount_c"] == 0


class TestTransactionService:
    """Tests for TransactionService."""

    async def test_ordered_newest_first(self, services, transactions):
        """Test transactions are ordered by date, newest first."""
        dates = [tx.date for tx in await services.transactions.get_all()]
        assert dates == sorted(dates, reverse=True)
        assert dates[0] == date(2024, 4, 5)

    async def test_date_range_inclusive(self, services, transactions):
        """Test both ends of the date range are included."""
        result = await services.transactions.get_by_date_range(date(2024, 3, 2), date(2024, 4, 1))
        assert [tx.date for tx in result] == [
            date(2024, 4, 1), date(2024, 3, 15), date(2024, 3, 2),
        ]

    async def test_by_category_and_type(self, services, categories, transactions):
        """Test category and type filters."""
        groceries = await services.transactions.get_by_category(categories["Groceries"])
        assert sorted(tx.amount for tx in groceries) == [45, 80.5]
        assert all(tx.category_name == "Groceries" for tx in groceries)
        income = await services.transactions.get_by_type("income")
        assert len(income) == 2

    async def test_empty_text_written_as_null(self, gateway, services):
        """Test blank description and notes are stored as null."""
        created = await services.transactions.create(Transaction(
            amount=5, type="expense", date=date(2024, 4, 2), description="", notes="",
        ))
        response = await gateway.get_record_by_id(TRANSACTION_TABLE, created.id)
        assert response.data["description_c"] is None
        assert response.data["notes_c"] is None
        assert response.data["category_c"] is None

    async def test_rows_without_date_skipped(self, gateway, services, transactions):
        """Test unreadable records are skipped instead of failing the list."""
        gateway.seed(TRANSACTION_TABLE, [{"amount_c": 1, "type_c": "expense"}])
        assert len(await services.transactions.get_all()) == 6

    async def test_create_with_missing_category_raises(self, services, activity):
        """Test store field errors surface as RecordOperationError."""
        with pytest.raises(RecordOperationError) as exc_info:
            await services.transactions.create(Transaction(
                amount=5, type="expense", date=date(2024, 4, 2), category_id=404,
            ))
        assert exc_info.value.field_errors[0].field_label == "Category"
        [notice] = activity.drain_notices()
        assert notice.level == NoticeLevel.ERROR


class TestFailurePolicy:
    """Tests for how services behave when the store fails."""

    async def test_reads_return_empty_on_store_error(self, activity):
        """Test list reads log and return [] when the store is down."""
        services_gateway = FailingGateway()
        service = BankAccountService(services_gateway, activity, default_currency="USD")
        assert await service.get_all() == []
        assert await service.get_by_id(1) is None
        assert activity.load_failures == 2
        [first, _] = activity.drain_notices()
        assert first.message == "Failed to load bank account data"

    async def test_reads_return_empty_on_failed_response(self, activity):
        """Test a failed fetch response is treated like an error."""
        service = BankAccountService(RejectingGateway(), activity, default_currency="USD")
        assert await service.get_all() == []
        assert activity.load_failures == 1

    async def test_writes_raise_on_store_error(self, activity):
        """Test mutations propagate store errors."""
        service = BankAccountService(FailingGateway(), activity, default_currency="USD")
        with pytest.raises(RecordStoreError):
            await service.create(BankAccount(name="X", account_number="1", bank_name="B"))

    async def test_update_missing_record_raises(self, services):
        """Test updating a record that doesn't exist raises."""
        with pytest.raises(RecordOperationError, match="not found"):
            await services.goals.update(404, Goal(name="Ghost", target_amount=1))

    async def test_delete_missing_record_raises(self, services):
        """Test deleting a record that doesn't exist raises."""
        with pytest.raises(RecordOperationError):
            await services.categories.delete(404)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
