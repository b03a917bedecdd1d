"""
Form Validation

DESIGN DECISION: The record store enforces nothing, so every rule about
what a valid account, budget, category, goal or transaction looks like
is checked here, before a service is asked to write.

Each validate_* method takes the raw form values (strings from text
inputs, numbers from number inputs, dates from date pickers) and returns
a ValidationResult:
- errors block submission and are shown next to their field
- warnings are shown but don't block
- when valid, ``cleaned`` is the domain model to save

IMPORTANT: Validation NEVER silently fixes values.
Blank optional fields become None; everything else is reported.
"""

import re
from datetime import date
from typing import Any, Optional

from src.config import get_settings
from src.models.finance import (
    AccountType,
    BankAccount,
    Budget,
    Category,
    CategoryType,
    Goal,
    Transaction,
    TransactionType,
)
from src.models.forms import ValidationIssue, ValidationResult
from src.utils.currency import parse_amount
from src.utils.dates import parse_date, parse_month


COLOR_PATTERN = re.compile(r"^#[0-9A-Fa-f]{6}$")
MONTH_PATTERN = re.compile(r"^\d{4}-\d{2}$")

Form = dict[str, Any]


def _text(form: Form, key: str) -> str:
    value = form.get(key)
    return str(value).strip() if value is not None else ""


def _id(value: Any) -> Optional[int]:
    """A record Id from a select box value (int, str or {'Id': ...})."""
    if isinstance(value, dict):
        value = value.get("Id")
    if value is None or value == "" or isinstance(value, bool):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


class FormValidator:
    """Validates the add/edit forms of every page."""

    def __init__(self, supported_currencies: Optional[list[str]] = None):
        """
        Args:
            supported_currencies: Accepted currency codes.
                                  Defaults to AppSettings.currency_list.
        """
        self._currencies = supported_currencies or get_settings().app.currency_list

    @property
    def supported_currencies(self) -> list[str]:
        return list(self._currencies)

    @staticmethod
    def _required_text(form: Form, key: str, message: str, issues: list[ValidationIssue]) -> str:
        value = _text(form, key)
        if not value:
            issues.append(ValidationIssue(field=key, message=message))
        return value

    @staticmethod
    def _amount(
        form: Form,
        key: str,
        issues: list[ValidationIssue],
        label: str,
        allow_zero: bool,
        required: bool = True,
    ) -> Optional[float]:
        raw = form.get(key)
        if raw is None or (isinstance(raw, str) and not raw.strip()):
            if required:
                issues.append(ValidationIssue(field=key, message=f"Valid {label} is required"))
            return None

        value = parse_amount(raw)
        if value is None:
            issues.append(ValidationIssue(field=key, message=f"Valid {label} is required"))
            return None
        if value < 0:
            issues.append(ValidationIssue(
                field=key, message=f"{label.capitalize()} cannot be negative"
            ))
            return None
        if value == 0 and not allow_zero:
            issues.append(ValidationIssue(
                field=key, message=f"{label.capitalize()} must be greater than zero"
            ))
            return None
        return value

    @staticmethod
    def _result(issues: list[ValidationIssue], build) -> ValidationResult:
        result = ValidationResult(issues=issues)
        if result.is_valid:
            result.cleaned = build()
        return result

    # -------------------------------------------------------------------------
    # Forms
    # -------------------------------------------------------------------------

    def validate_bank_account(self, form: Form) -> ValidationResult:
        """
        Rules:
        - name, account number, bank name are required
        - balance is required, numeric and not negative
        - currency is required and one of the supported codes
        - account type is optional but must be a known type
        """
        issues: list[ValidationIssue] = []
        name = self._required_text(form, "name", "Account name is required", issues)
        number = self._required_text(form, "account_number", "Account number is required", issues)
        bank = self._required_text(form, "bank_name", "Bank name is required", issues)
        balance = self._amount(form, "balance", issues, "balance", allow_zero=True)

        currency = _text(form, "currency").upper()
        if not currency:
            issues.append(ValidationIssue(field="currency", message="Currency is required"))
        elif currency not in self._currencies:
            issues.append(ValidationIssue(
                field="currency",
                message=f"Unsupported currency: {currency}",
            ))

        account_type = _text(form, "account_type") or None
        if account_type and account_type not in {t.value for t in AccountType}:
            issues.append(ValidationIssue(
                field="account_type",
                message=f"Unknown account type: {account_type}",
            ))

        return self._result(issues, lambda: BankAccount(
            id=_id(form.get("id")),
            name=name,
            account_number=number,
            bank_name=bank,
            balance=balance,
            currency=currency,
            account_type=account_type,
        ))

    def validate_budget(self, form: Form) -> ValidationResult:
        """
        Rules:
        - amount is numeric and greater than zero
        - month is YYYY-MM
        - category is required
        """
        issues: list[ValidationIssue] = []
        amount = self._amount(form, "amount", issues, "amount", allow_zero=False)

        month = _text(form, "month")
        if not MONTH_PATTERN.match(month) or parse_month(month) is None:
            issues.append(ValidationIssue(field="month", message="Month must be in YYYY-MM format"))

        category_id = _id(form.get("category_id"))
        if category_id is None:
            issues.append(ValidationIssue(field="category_id", message="Category is required"))

        return self._result(issues, lambda: Budget(
            id=_id(form.get("id")),
            amount=amount,
            month=month,
            category_id=category_id,
        ))

    def validate_category(self, form: Form) -> ValidationResult:
        """
        Rules:
        - name is required
        - type is income or expense
        - color, when given, is #RRGGBB
        """
        issues: list[ValidationIssue] = []
        name = self._required_text(form, "name", "Category name is required", issues)
        if len(name) > 100:
            issues.append(ValidationIssue(field="name", message="Category name is too long"))

        category_type = _text(form, "type").lower()
        if category_type not in {t.value for t in CategoryType}:
            issues.append(ValidationIssue(field="type", message="Type must be income or expense"))

        color = _text(form, "color")
        if color and not COLOR_PATTERN.match(color):
            issues.append(ValidationIssue(field="color", message="Color must look like #3B82F6"))

        icon = _text(form, "icon")

        def build() -> Category:
            values = {"id": _id(form.get("id")), "name": name, "type": category_type}
            if color:
                values["color"] = color
            if icon:
                values["icon"] = icon
            return Category(**values)

        return self._result(issues, build)

    def validate_goal(self, form: Form, today: Optional[date] = None) -> ValidationResult:
        """
        Rules:
        - name is required
        - target amount is numeric and greater than zero
        - current amount is numeric and not negative (blank means 0)
        - deadline, when given, is a valid date (a past deadline only warns)
        """
        issues: list[ValidationIssue] = []
        name = self._required_text(form, "name", "Goal name is required", issues)
        target = self._amount(form, "target_amount", issues, "target amount", allow_zero=False)
        current = self._amount(
            form, "current_amount", issues, "current amount", allow_zero=True, required=False,
        )

        deadline = None
        raw_deadline = form.get("deadline")
        if raw_deadline not in (None, ""):
            deadline = parse_date(raw_deadline)
            if deadline is None:
                issues.append(ValidationIssue(field="deadline", message="Deadline must be a valid date"))
            elif deadline < (today or date.today()):
                issues.append(ValidationIssue(
                    field="deadline",
                    message="Deadline is in the past",
                    severity="warning",
                ))

        return self._result(issues, lambda: Goal(
            id=_id(form.get("id")),
            name=name,
            target_amount=target,
            current_amount=current or 0.0,
            deadline=deadline,
        ))

    def validate_transaction(self, form: Form, today: Optional[date] = None) -> ValidationResult:
        """
        Rules:
        - amount is numeric and greater than zero
        - type is income or expense
        - date is required and valid (a future date only warns)
        - category is optional
        """
        issues: list[ValidationIssue] = []
        amount = self._amount(form, "amount", issues, "amount", allow_zero=False)

        tx_type = _text(form, "type").lower()
        if tx_type not in {t.value for t in TransactionType}:
            issues.append(ValidationIssue(field="type", message="Type must be income or expense"))

        tx_date = parse_date(form.get("date"))
        if tx_date is None:
            issues.append(ValidationIssue(field="date", message="Valid date is required"))
        elif tx_date > (today or date.today()):
            issues.append(ValidationIssue(
                field="date",
                message="Transaction date is in the future",
                severity="warning",
            ))

        return self._result(issues, lambda: Transaction(
            id=_id(form.get("id")),
            amount=amount,
            type=tx_type,
            date=tx_date,
            category_id=_id(form.get("category_id")),
            description=_text(form, "description") or None,
            notes=_text(form, "notes") or None,
        ))

    @staticmethod
    def get_user_friendly_summary(result: ValidationResult) -> str:
        """One line per problem, for a form-level message."""
        if result.is_valid and not result.warnings:
            return "All fields look good."

        lines = []
        for issue in result.issues:
            prefix = "❌" if issue.severity == "error" else "⚠️"
            lines.append(f"{prefix} {issue.message}")
        return "\n".join(lines)
