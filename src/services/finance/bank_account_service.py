"""Bank accounts: CRUD plus the balance roll-ups shown on the accounts page."""

from typing import Any, Optional

from src.activity import ActivityLogger
from src.config import get_settings
from src.models.finance import BankAccount
from src.models.records import FieldSpec, OrderBy, SortType
from src.services.finance.base import RecordService
from src.services.records import BANK_ACCOUNT_TABLE, RecordGateway
from src.services.records.schema import ID_COLUMN
from src.utils.currency import parse_amount


class BankAccountService(RecordService[BankAccount]):
    """Facade over the ``bank_account_c`` table. Newest accounts first."""

    table = BANK_ACCOUNT_TABLE
    label = "bank account"
    fields = [
        FieldSpec(name="name_c"),
        FieldSpec(name="account_number_c"),
        FieldSpec(name="bank_name_c"),
        FieldSpec(name="balance_c"),
        FieldSpec(name="currency_c"),
        FieldSpec(name="account_type_c"),
    ]
    default_order = [OrderBy(field_name=ID_COLUMN, sort_type=SortType.DESC)]

    def __init__(
        self,
        gateway: RecordGateway,
        activity: Optional[ActivityLogger] = None,
        default_currency: Optional[str] = None,
    ):
        super().__init__(gateway, activity)
        self._default_currency = default_currency or get_settings().app.default_currency

    @property
    def default_currency(self) -> str:
        return self._default_currency

    def _record_to_model(self, record: dict[str, Any]) -> BankAccount:
        return BankAccount(
            id=record[ID_COLUMN],
            name=record.get("name_c") or "",
            account_number=record.get("account_number_c") or "",
            bank_name=record.get("bank_name_c") or "",
            balance=parse_amount(record.get("balance_c")) or 0.0,
            currency=record.get("currency_c") or self._default_currency,
            account_type=record.get("account_type_c") or None,
        )

    def _model_to_record(self, model: BankAccount) -> dict[str, Any]:
        return {
            "Name": model.name,
            "name_c": model.name,
            "account_number_c": model.account_number,
            "bank_name_c": model.bank_name,
            "balance_c": float(model.balance),
            "currency_c": model.currency,
            "account_type_c": model.account_type or None,
        }

    @staticmethod
    def totals_by_currency(
        accounts: list[BankAccount],
        default_currency: str = "USD",
    ) -> dict[str, float]:
        """
        Sum balances per currency, in order of first appearance.

        Accounts without a currency count as ``default_currency``.
        """
        totals: dict[str, float] = {}
        for account in accounts:
            currency = account.currency or default_currency
            totals[currency] = totals.get(currency, 0.0) + (account.balance or 0.0)
        return totals

    @classmethod
    def primary_total(
        cls,
        accounts: list[BankAccount],
        default_currency: str = "USD",
    ) -> tuple[str, float]:
        """The first currency's total, used for the headline stat."""
        totals = cls.totals_by_currency(accounts, default_currency)
        if not totals:
            return default_currency, 0.0
        currency = next(iter(totals))
        return currency, totals[currency]

    @staticmethod
    def search(accounts: list[BankAccount], term: str) -> list[BankAccount]:
        """Case-insensitive match on name, bank, account number or type."""
        needle = (term or "").strip().lower()
        if not needle:
            return list(accounts)
        return [
            account for account in accounts
            if any(
                needle in (value or "").lower()
                for value in (
                    account.name,
                    account.bank_name,
                    account.account_number,
                    account.account_type,
                )
            )
        ]
