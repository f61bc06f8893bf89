"""
Per-operation options for the client's list and create calls.

Each operation accepts only its own option class, so an accounts page size
cannot be handed to the transactions listing by mistake. Options are
additive: supplying the same one twice sends the parameter twice.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Iterable, List, Tuple, Type, TypeVar

__all__ = [
    "AccountsOption",
    "Option",
    "RegisterWebhookOption",
    "TransactionsOption",
    "apply_options",
    "format_timestamp",
    "with_description",
    "with_filter_since",
    "with_filter_until",
    "with_page_size",
    "with_transaction_page_size",
]

PAGE_SIZE = "page[size]"
FILTER_SINCE = "filter[since]"
FILTER_UNTIL = "filter[until]"
DESCRIPTION = "description"


@dataclass(frozen=True)
class Option:
    name: str
    value: str


@dataclass(frozen=True)
class AccountsOption(Option):
    pass


@dataclass(frozen=True)
class TransactionsOption(Option):
    pass


@dataclass(frozen=True)
class RegisterWebhookOption(Option):
    pass


OptionT = TypeVar("OptionT", bound=Option)


def _page_size(size: int) -> str:
    if isinstance(size, bool) or not isinstance(size, int) or size <= 0:
        raise ValueError(f"Page size must be a positive integer, got {size!r}")
    return str(size)


def format_timestamp(moment: datetime) -> str:
    """
    RFC 3339 rendering of ``moment``, keeping whatever offset it carries.
    """
    if moment.tzinfo is None or moment.utcoffset() is None:
        raise ValueError("Filter timestamps must be timezone-aware")
    return moment.isoformat(timespec="seconds")


def with_page_size(size: int) -> AccountsOption:
    return AccountsOption(PAGE_SIZE, _page_size(size))


def with_transaction_page_size(size: int) -> TransactionsOption:
    return TransactionsOption(PAGE_SIZE, _page_size(size))


def with_filter_since(moment: datetime) -> TransactionsOption:
    """Only return transactions created at or after ``moment``."""
    return TransactionsOption(FILTER_SINCE, format_timestamp(moment))


def with_filter_until(moment: datetime) -> TransactionsOption:
    """Only return transactions created before ``moment``."""
    return TransactionsOption(FILTER_UNTIL, format_timestamp(moment))


def with_description(description: str) -> RegisterWebhookOption:
    return RegisterWebhookOption(DESCRIPTION, description)


def apply_options(
    options: Iterable[Option],
    expected: Type[OptionT],
    operation: str,
) -> List[Tuple[str, str]]:
    """
    Flatten ``options`` into ordered ``(name, value)`` pairs.

    Raises :class:`TypeError` when an option built for another operation is
    passed in.
    """
    pairs: List[Tuple[str, str]] = []
    for option in options:
        if not isinstance(option, expected):
            raise TypeError(
                f"{operation} does not accept {type(option).__name__}; "
                f"expected {expected.__name__}"
            )
        pairs.append((option.name, option.value))
    return pairs
