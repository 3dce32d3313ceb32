from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal

from domain.base_types import CurrencyCode
from domain.errors import StorageUnavailableError
from domain.ledger import ExchangeResult, LedgerEngine, LedgerState
from domain.rates import ExchangeRateTable

from .ledger_store import LedgerStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class WalletOutcome:
    """Result of a mutation as seen by the caller.

    ``state`` is always the engine's new in-memory state. ``persisted`` tells
    whether the store accepted it; when it did not, ``storage_error`` holds
    the reason and the caller may ``retry_save``.
    """

    state: LedgerState
    persisted: bool
    exchange: ExchangeResult | None = None
    storage_error: StorageUnavailableError | None = None


class WalletService:
    """Caller side of the ledger: loads at session start, saves after each mutation."""

    def __init__(self, engine: LedgerEngine, store: LedgerStore) -> None:
        self._engine = engine
        self._store = store

    @classmethod
    def open(
        cls,
        store: LedgerStore,
        rate_table: ExchangeRateTable,
        *,
        starting_state: LedgerState | None = None,
    ) -> WalletService:
        restored = store.load()
        if restored is None:
            logger.info("No stored balances found, starting a fresh ledger")
            initial = starting_state or LedgerState.zero()
        else:
            initial = restored
        return cls(LedgerEngine(rate_table, initial), store)

    @property
    def engine(self) -> LedgerEngine:
        return self._engine

    def deposit(self, currency: CurrencyCode | str, amount: object) -> WalletOutcome:
        state = self._engine.deposit(currency, amount)
        return self._persist(state)

    def exchange(
        self,
        from_currency: CurrencyCode | str,
        to_currency: CurrencyCode | str,
        amount: object,
    ) -> WalletOutcome:
        result = self._engine.exchange(from_currency, to_currency, amount)
        return self._persist(result.state, exchange=result)

    def retry_save(self) -> WalletOutcome:
        return self._persist(self._engine.snapshot())

    def snapshot(self) -> LedgerState:
        return self._engine.snapshot()

    def quote_rate(self, from_currency: CurrencyCode | str, to_currency: CurrencyCode | str) -> Decimal:
        return self._engine.quote_rate(from_currency, to_currency)

    def preview(
        self,
        from_currency: CurrencyCode | str,
        to_currency: CurrencyCode | str,
        amount: object,
    ) -> Decimal:
        return self._engine.preview(from_currency, to_currency, amount)

    def reset(self) -> LedgerState:
        """Forget stored balances and start over from zero (sign-out)."""
        self._store.clear()
        self._engine = LedgerEngine(self._engine.rate_table)
        logger.info("Ledger reset")
        return self._engine.snapshot()

    def _persist(self, state: LedgerState, *, exchange: ExchangeResult | None = None) -> WalletOutcome:
        try:
            self._store.save(state)
        except StorageUnavailableError as error:
            logger.warning("Balances updated in memory but not saved: %s", error)
            return WalletOutcome(state=state, persisted=False, exchange=exchange, storage_error=error)
        return WalletOutcome(state=state, persisted=True, exchange=exchange)


__all__ = ["WalletOutcome", "WalletService"]
