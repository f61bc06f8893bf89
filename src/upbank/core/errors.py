"""
Exception hierarchy for the Up Bank client and the error aggregator.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional, Sequence, Tuple, Type

if TYPE_CHECKING:
    from .models import ErrorEnvelope, ErrorObject

__all__ = [
    "APIError",
    "ConfigError",
    "DecodeError",
    "NetworkError",
    "PingError",
    "UpBankError",
    "aggregate",
]


class UpBankError(Exception):
    """Base exception for Up Bank client errors."""


class ConfigError(UpBankError):
    """Raised when the supplied configuration or credential is invalid."""


class NetworkError(UpBankError):
    """Failed to send a request or receive a response."""


class DecodeError(UpBankError):
    """A response body was malformed or did not match the expected shape."""

    def __init__(
        self,
        message: str,
        *,
        unknown_fields: Sequence[str] = (),
        body: Optional[bytes] = None,
    ) -> None:
        self.unknown_fields: Tuple[str, ...] = tuple(unknown_fields)
        self.body = body
        super().__init__(message)


class APIError(UpBankError):
    """
    The service answered with an error envelope.

    Every entry of the envelope is kept, in order, so no ``detail`` is ever
    lost. Two errors compare equal when they carry the same ordered details.
    """

    def __init__(
        self,
        errors: Sequence["ErrorObject"],
        status_code: Optional[int] = None,
    ) -> None:
        if not errors:
            raise ValueError("APIError requires at least one error entry")
        self.errors: Tuple["ErrorObject", ...] = tuple(errors)
        self.status_code = status_code
        super().__init__(self._render())

    @property
    def details(self) -> Tuple[str, ...]:
        return tuple(error.detail for error in self.errors)

    def _render(self) -> str:
        return "; ".join(self.details)

    def __str__(self) -> str:
        return self._render()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, APIError):
            return NotImplemented
        return type(self) is type(other) and self.details == other.details

    def __hash__(self) -> int:
        return hash((type(self), self.details))

    def __repr__(self) -> str:
        return f"{type(self).__name__}(status_code={self.status_code!r}, details={list(self.details)!r})"


class PingError(APIError):
    """Ping surfaces only the first entry, as ``ping failed: <detail>``."""

    def _render(self) -> str:
        return f"ping failed: {self.details[0]}"


def aggregate(
    envelope: "ErrorEnvelope",
    status_code: Optional[int] = None,
    *,
    error_cls: Type[APIError] = APIError,
) -> APIError:
    """
    Combine the entries of an error envelope into a single :class:`APIError`.
    """
    return error_cls(envelope.errors, status_code)
