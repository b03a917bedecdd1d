"""
Currency formatting.

Amounts are shown with the currency's symbol, thousands separators
and two decimals. Unknown currency codes are shown as the code itself.
"""

import math
from typing import Optional

CURRENCY_SYMBOLS = {
    "USD": "$",
    "EUR": "€",
    "GBP": "£",
    "JPY": "¥",
}

DEFAULT_CURRENCY = "USD"


def currency_symbol(currency: Optional[str]) -> str:
    """Symbol for a currency code, e.g. 'EUR' -> '€'."""
    code = (currency or DEFAULT_CURRENCY).upper()
    return CURRENCY_SYMBOLS.get(code, code)


def format_currency(amount: float, currency: Optional[str] = DEFAULT_CURRENCY) -> str:
    """Format an amount as currency, e.g. '-$1,234.56' or 'CAD 10.00'."""
    symbol = currency_symbol(currency)
    sign = "-" if amount < 0 else ""
    if symbol in CURRENCY_SYMBOLS.values():
        return f"{sign}{symbol}{abs(amount):,.2f}"
    return f"{sign}{symbol} {abs(amount):,.2f}"


def format_signed(amount: float, currency: Optional[str] = DEFAULT_CURRENCY) -> str:
    """Format with an explicit +/- sign."""
    sign = "+" if amount >= 0 else "-"
    return f"{sign}{format_currency(abs(amount), currency)}"


def parse_amount(value) -> Optional[float]:
    """
    Parse a user or store value as a float.

    None if it isn't numeric, or isn't finite ('nan', 'inf', '1e400').
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        raw = value
    else:
        raw = str(value).strip().replace(",", "")
        if not raw:
            return None
    try:
        number = float(raw)
    except (ValueError, OverflowError):
        return None
    return number if math.isfinite(number) else None
