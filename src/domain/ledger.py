from __future__ import annotations

import logging
import threading
from decimal import Decimal, InvalidOperation
from types import MappingProxyType
from typing import Mapping

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .base_types import CurrencyCode, minor_unit
from .errors import InsufficientBalanceError, InvalidAmountError, SameCurrencyError
from .money import coerce_amount, convert, credit, parse_currency
from .rates import ExchangeRateTable

logger = logging.getLogger(__name__)


class LedgerState(BaseModel):
    """Point-in-time balances, one entry per supported currency.

    Missing currencies are filled with zero. Every balance is finite,
    non-negative and held at the currency's minor-unit precision. The
    mapping is a read-only view; use ``as_dict`` for a mutable copy.
    """

    model_config = ConfigDict(frozen=True)

    balances: Mapping[CurrencyCode, Decimal] = Field(default_factory=dict, validate_default=True)

    @field_validator("balances")
    @classmethod
    def _validate_balances(cls, balances: Mapping[CurrencyCode, Decimal]) -> Mapping[CurrencyCode, Decimal]:
        filled: dict[CurrencyCode, Decimal] = {}
        for currency in CurrencyCode:
            amount = balances.get(currency, Decimal(0))
            if not amount.is_finite():
                raise ValueError(f"Balance for {currency} must be finite")
            if amount < 0:
                raise ValueError(f"Balance for {currency} must be >= 0, got {amount}")
            try:
                quantized = amount.quantize(minor_unit(currency))
            except InvalidOperation as error:
                raise ValueError(f"Balance for {currency} is too large: {amount}") from error
            if quantized != amount:
                raise ValueError(f"Balance for {currency} is finer than its minor unit: {amount}")
            filled[currency] = quantized
        return MappingProxyType(filled)

    @classmethod
    def zero(cls) -> LedgerState:
        return cls()

    def balance(self, currency: CurrencyCode | str) -> Decimal:
        return self.balances[parse_currency(currency)]

    def as_dict(self) -> dict[CurrencyCode, Decimal]:
        return dict(self.balances)


class ExchangeResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    state: LedgerState
    from_currency: CurrencyCode
    to_currency: CurrencyCode
    amount: Decimal
    converted_amount: Decimal
    rate_applied: Decimal


class LedgerEngine:
    """Owns the wallet balances and applies deposits and exchanges atomically.

    Every operation either moves the ledger from one valid state to another or
    raises a LedgerError and leaves the balances untouched. Mutations and
    snapshots share one lock so a reader never sees half of an exchange.
    """

    def __init__(self, rate_table: ExchangeRateTable, initial_state: LedgerState | None = None) -> None:
        self._rate_table = rate_table
        if initial_state is None:
            initial_state = LedgerState.zero()
        # Re-validated: LedgerState.model_construct skips the balance checks.
        self._balances = LedgerState(balances=dict(initial_state.balances)).as_dict()
        self._lock = threading.Lock()

    @property
    def rate_table(self) -> ExchangeRateTable:
        return self._rate_table

    def deposit(self, currency: CurrencyCode | str, amount: object) -> LedgerState:
        code = parse_currency(currency)
        value = coerce_amount(amount, code)
        with self._lock:
            updated = dict(self._balances)
            updated[code] = credit(updated[code], value, code)
            state = self._commit_locked(updated)
        logger.info("Deposited %s %s, balance now %s", value, code, state.balances[code])
        return state

    def exchange(
        self,
        from_currency: CurrencyCode | str,
        to_currency: CurrencyCode | str,
        amount: object,
    ) -> ExchangeResult:
        from_code = parse_currency(from_currency)
        to_code = parse_currency(to_currency)
        if from_code == to_code:
            raise SameCurrencyError(from_code)
        value = coerce_amount(amount, from_code)
        rate = self._rate_table.rate(from_code, to_code)
        converted = convert(value, rate, to_code)
        if converted <= 0:
            raise InvalidAmountError(amount, f"converts to less than one {to_code} minor unit")

        with self._lock:
            available = self._balances[from_code]
            if value > available:
                raise InsufficientBalanceError(currency=from_code, attempted=value, available=available)
            updated = dict(self._balances)
            updated[from_code] = available - value
            updated[to_code] = credit(updated[to_code], converted, to_code)
            state = self._commit_locked(updated)

        logger.info("Exchanged %s %s -> %s %s at rate %s", value, from_code, converted, to_code, rate)
        return ExchangeResult(
            state=state,
            from_currency=from_code,
            to_currency=to_code,
            amount=value,
            converted_amount=converted,
            rate_applied=rate,
        )

    def snapshot(self) -> LedgerState:
        with self._lock:
            return self._snapshot_locked()

    def quote_rate(self, from_currency: CurrencyCode | str, to_currency: CurrencyCode | str) -> Decimal:
        return self._rate_table.rate(parse_currency(from_currency), parse_currency(to_currency))

    def preview(
        self,
        from_currency: CurrencyCode | str,
        to_currency: CurrencyCode | str,
        amount: object,
    ) -> Decimal:
        """Amount `exchange` would credit, without touching or checking balances."""
        from_code = parse_currency(from_currency)
        to_code = parse_currency(to_currency)
        rate = self.quote_rate(from_code, to_code)
        return convert(coerce_amount(amount, from_code), rate, to_code)

    def _snapshot_locked(self) -> LedgerState:
        return LedgerState(balances=dict(self._balances))

    def _commit_locked(self, updated: dict[CurrencyCode, Decimal]) -> LedgerState:
        # Validate before swapping so a rejected state never becomes current.
        state = LedgerState(balances=updated)
        self._balances = state.as_dict()
        return state


__all__ = ["ExchangeResult", "LedgerEngine", "LedgerState"]
