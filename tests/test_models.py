"""
Tests for Finance Manager models

Test strategy:
1. Unit tests for individual components (models, validators)
2. Integration tests for services (against the in-memory store)
3. No real API calls in tests (fake worksheets instead of Google Sheets)
"""

import pytest
from pydantic import ValidationError
from datetime import date

from src.models.activity import (
    ActivityEvent,
    ActivityEventBuilder,
    ActivityEventType,
    ActivitySeverity,
    NoticeLevel,
)
from src.models.finance import (
    BankAccount,
    Budget,
    Category,
    CategoryType,
    Goal,
    PeriodSummary,
    Transaction,
    TransactionType,
)
from src.models.forms import ValidationIssue, ValidationResult
from src.models.records import FetchParams, RecordResponse, RecordResult


class TestFinanceModels:
    """Tests for the domain view models."""

    def test_bank_account_normalizes_currency(self):
        """Test currency codes are upper-cased and whitespace stripped."""
        account = BankAccount(name="  Checking  ", currency="eur")
        assert account.name == "Checking"
        assert account.currency == "EUR"

    @pytest.mark.parametrize("value", [float("nan"), float("inf")])
    def test_amounts_must_be_finite(self, value):
        """Test balances and goal amounts reject NaN and infinity."""
        with pytest.raises(ValidationError):
            BankAccount(name="Checking", balance=value)
        with pytest.raises(ValidationError):
            Goal(name="Car", target_amount=value)

    def test_bank_account_defaults_to_usd(self):
        """Test an empty currency falls back to USD."""
        assert BankAccount(name="Cash", currency="").currency == "USD"

    def test_category_defaults(self):
        """Test Category default color, icon and type."""
        category = Category(name="Misc")
        assert category.color == "#3B82F6"
        assert category.icon == "ShoppingCart"
        assert category.type == CategoryType.EXPENSE

    def test_category_requires_name(self):
        """Test that a blank category name is rejected."""
        with pytest.raises(ValueError):
            Category(name="   ")

    def test_budget_month_format(self):
        """Test that budget months must be YYYY-MM."""
        with pytest.raises(ValueError):
            Budget(amount=100, month="2024-13")
        assert Budget(amount=100, month="2024-12").month == "2024-12"

    def test_budget_derived_values(self):
        """Test remaining, percent used and over-budget flags."""
        budget = Budget(amount=200, month="2024-04", spent=250)
        assert budget.remaining == -50
        assert budget.percent_used == 125
        assert budget.is_over_budget is True

    def test_budget_zero_amount_percent(self):
        """Test a zero budget reports 0% instead of dividing by zero."""
        assert Budget(amount=0, month="2024-04", spent=10).percent_used == 0.0

    def test_transaction_signed_amount_and_month(self):
        """Test expenses are negative and month is derived from the date."""
        tx = Transaction(amount=12.5, type=TransactionType.EXPENSE, date=date(2024, 2, 29))
        assert tx.signed_amount == -12.5
        assert tx.month == "2024-02"

    def test_transaction_rejects_negative_amount(self):
        """Test that negative amounts are rejected."""
        with pytest.raises(ValueError):
            Transaction(amount=-1, type="income", date=date(2024, 1, 1))

    def test_period_summary_savings_rate(self):
        """Test net and savings rate."""
        summary = PeriodSummary(income=2000, expense=1500)
        assert summary.net == 500
        assert summary.savings_rate == 25.0
        assert PeriodSummary(expense=10).savings_rate == 0.0


class TestGoalProgress:
    """Tests for goal progress derivation."""

    def test_progress_partial(self):
        """Test progress and remaining for a goal in progress."""
        progress = Goal(name="Car", target_amount=1000, current_amount=250).progress()
        assert progress.progress == 25.0
        assert progress.remaining == 750
        assert progress.is_completed is False

    def test_progress_clamped_when_overfunded(self):
        """Test progress never exceeds 100 and remaining never goes negative."""
        progress = Goal(name="Trip", target_amount=500, current_amount=800).progress()
        assert progress.progress == 100.0
        assert progress.remaining == 0
        assert progress.is_completed is True

    def test_progress_clamped_when_negative(self):
        """Test a negative saved amount reports 0%."""
        progress = Goal(name="Odd", target_amount=500, current_amount=-50).progress()
        assert progress.progress == 0.0

    def test_zero_target_counts_as_complete(self):
        """Test a zero target is 100% and completed."""
        goal = Goal(name="Nothing", target_amount=0, current_amount=0)
        assert goal.progress().progress == 100.0
        assert goal.is_completed is True


class TestActivityModels:
    """Tests for activity-related models."""

    def test_activity_event_creation(self):
        """Test ActivityEvent model creation."""
        event = ActivityEvent(
            event_type=ActivityEventType.RECORD_CREATED,
            description="Created goal record",
        )
        assert event.event_type == ActivityEventType.RECORD_CREATED
        assert event.severity == ActivitySeverity.INFO

    def test_activity_event_to_log_dict(self):
        """Test conversion to log dictionary."""
        event = ActivityEventBuilder.save_failed(
            "goal_c", "goal", "Target Amount: Invalid number", record_id=3,
            field_errors=[{"field_label": "Target Amount", "message": "Invalid number"}],
        )
        log_dict = event.to_log_dict()
        assert "event_id" in log_dict
        assert log_dict["event_type"] == "save_failed"
        assert log_dict["record_id"] == 3
        assert log_dict["details"]["field_errors"][0]["field_label"] == "Target Amount"

    def test_created_event_has_success_notice(self):
        """Test the created event carries a success notice."""
        notice = ActivityEventBuilder.record_created("goal_c", 1, "goal").to_notice()
        assert notice.level == NoticeLevel.SUCCESS
        assert notice.message == "Goal created successfully"

    def test_load_failed_event_has_error_notice(self):
        """Test load failures produce an error notice."""
        notice = ActivityEventBuilder.load_failed("budget_c", "budget", "timeout").to_notice()
        assert notice.level == NoticeLevel.ERROR
        assert notice.message == "Failed to load budget data"

    def test_skipped_record_has_no_notice(self):
        """Test skipped rows are logged but not shown to the user."""
        event = ActivityEventBuilder.record_skipped("transaction_c", 9, "bad date")
        assert event.severity == ActivitySeverity.WARNING
        assert event.to_notice() is None


class TestValidationResult:
    """Tests for ValidationResult model."""

    def test_validation_result_has_errors(self):
        """Test has_errors property."""
        result = ValidationResult(issues=[
            ValidationIssue(field="amount", message="Valid amount is required"),
            ValidationIssue(field="amount", message="Second message"),
        ])
        assert result.has_errors is True
        assert result.is_valid is False
        assert result.error_count == 2
        assert result.errors_by_field() == {"amount": "Valid amount is required"}

    def test_validation_result_warnings_only(self):
        """Test that warnings don't count as errors."""
        result = ValidationResult(issues=[
            ValidationIssue(field="date", message="Date in future", severity="warning"),
        ])
        assert result.has_errors is False
        assert result.error_count == 0
        assert result.warnings == ["Date in future"]

    def test_invalid_severity_rejected(self):
        """Test severity must be error or warning."""
        with pytest.raises(ValueError):
            ValidationIssue(field="x", message="y", severity="fatal")


class TestRecordModels:
    """Tests for the record API envelope."""

    def test_response_splits_results(self):
        """Test successful and failed results are separated."""
        response = RecordResponse(results=[
            RecordResult(success=True, data={"Id": 1}),
            RecordResult(success=False, message="Record failed validation"),
        ])
        assert [r.data for r in response.successful] == [{"Id": 1}]
        assert response.failed[0].message == "Record failed validation"

    def test_failure_response(self):
        """Test RecordResponse.failure."""
        response = RecordResponse.failure("Unknown table: nope")
        assert response.success is False
        assert response.message == "Unknown table: nope"

    def test_fetch_params_of(self):
        """Test FetchParams.of builds field specs from names."""
        params = FetchParams.of("name_c", "balance_c")
        assert [f.name for f in params.fields] == ["name_c", "balance_c"]
        assert params.where == []


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
