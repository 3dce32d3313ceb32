from __future__ import annotations

from decimal import Decimal


class LedgerError(Exception):
    """Base class for validation failures raised by the ledger engine."""


class InvalidAmountError(LedgerError):
    def __init__(self, amount: object, reason: str) -> None:
        self.amount = amount
        self.reason = reason
        super().__init__(f"Invalid amount {amount!r}: {reason}")


class UnknownCurrencyError(LedgerError):
    def __init__(self, currency: object) -> None:
        self.currency = currency
        super().__init__(f"Unknown currency: {currency!r}")


class SameCurrencyError(LedgerError):
    def __init__(self, currency: str) -> None:
        self.currency = currency
        super().__init__(f"Cannot exchange {currency} into itself")


class InsufficientBalanceError(LedgerError):
    def __init__(
        self,
        *,
        currency: str,
        attempted: Decimal,
        available: Decimal,
    ) -> None:
        self.currency = currency
        self.attempted = attempted
        self.available = available
        message = f"Insufficient balance for currency={currency} attempted={attempted} available={available}"
        super().__init__(message)


class MissingRateError(LedgerError):
    def __init__(self, *, from_currency: str, to_currency: str) -> None:
        self.from_currency = from_currency
        self.to_currency = to_currency
        super().__init__(f"No exchange rate configured for {from_currency}->{to_currency}")


class StorageUnavailableError(Exception):
    """Durable storage could not be read or written.

    Not a LedgerError: a failed save leaves the in-memory mutation in place.
    """

    def __init__(self, operation: str, detail: str) -> None:
        self.operation = operation
        self.detail = detail
        super().__init__(f"Storage {operation} failed: {detail}")
