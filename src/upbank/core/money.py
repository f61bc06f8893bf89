"""
Display formatting for monetary amounts.
"""

from __future__ import annotations

from decimal import Decimal, InvalidOperation

from babel.numbers import format_currency

__all__ = ["DEFAULT_LOCALE", "format_amount"]

DEFAULT_LOCALE = "en_AU"


def format_amount(currency_code: str, value: str, *, locale: str = DEFAULT_LOCALE) -> str:
    """
    Render ``value`` in ``currency_code`` using the locale's currency symbol.

    The home currency of the locale gets its narrow symbol (``AUD 1.00`` is
    ``$1.00`` in ``en_AU``).
    """
    try:
        amount = Decimal(value)
    except InvalidOperation as exc:
        raise ValueError(f"Amount '{value}' is not a valid decimal number") from exc
    return format_currency(amount, currency_code.upper(), locale=locale)
