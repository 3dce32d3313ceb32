from __future__ import annotations

import json
import logging
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Protocol

from pydantic import ValidationError

from domain.errors import InvalidAmountError, LedgerError, StorageUnavailableError
from domain.ledger import LedgerState
from domain.money import parse_currency, quantize, to_decimal

logger = logging.getLogger(__name__)


class LedgerStore(Protocol):
    def load(self) -> LedgerState | None: ...

    def save(self, state: LedgerState) -> None: ...

    def clear(self) -> None: ...


class JsonLedgerStore(LedgerStore):
    """Balances as a single JSON object keyed by currency code.

    Amounts are written as decimal strings, e.g.
    ``{"USD": "1000.00", "EUR": "0.00", "TRY": "0.00"}``. Files written by
    the older app hold plain JSON numbers that may carry float drift such as
    ``850.0000000001``; those are rounded to the minor unit once, at load,
    with a warning. String amounts are never rounded.
    """

    def __init__(self, *, path: Path) -> None:
        self.path = path

    def load(self) -> LedgerState | None:
        if not self.path.exists():
            return None
        try:
            payload = json.loads(self.path.read_text(encoding="utf-8"), parse_float=Decimal)
        except (OSError, ValueError) as error:
            raise StorageUnavailableError("load", f"cannot read {self.path}: {error}") from error
        if not isinstance(payload, dict):
            raise StorageUnavailableError("load", f"{self.path} must contain a JSON object")
        try:
            return LedgerState(balances=self._round_numeric(payload))
        except (LedgerError, ValidationError) as error:
            raise StorageUnavailableError("load", f"invalid balances in {self.path}: {error}") from error

    def _round_numeric(self, payload: dict[str, object]) -> dict[str, object]:
        balances: dict[str, object] = {}
        for key, value in payload.items():
            if isinstance(value, bool) or not isinstance(value, (int, Decimal)):
                balances[key] = value
                continue
            currency = parse_currency(key)
            amount = to_decimal(value)
            try:
                rounded = quantize(amount, currency)
            except InvalidOperation as error:
                raise InvalidAmountError(value, "too large") from error
            if rounded != amount:
                logger.warning("Rounded stored %s balance %s to %s in %s", currency, amount, rounded, self.path)
            balances[key] = rounded
        return balances

    def save(self, state: LedgerState) -> None:
        record = {currency.value: str(amount) for currency, amount in state.balances.items()}
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(json.dumps(record, indent=2), encoding="utf-8")
        except OSError as error:
            raise StorageUnavailableError("save", f"cannot write {self.path}: {error}") from error
        logger.debug("Saved balances to %s", self.path)

    def clear(self) -> None:
        try:
            self.path.unlink(missing_ok=True)
        except OSError as error:
            raise StorageUnavailableError("clear", f"cannot remove {self.path}: {error}") from error


class InMemoryLedgerStore(LedgerStore):
    def __init__(self, state: LedgerState | None = None) -> None:
        self.state = state

    def load(self) -> LedgerState | None:
        return self.state

    def save(self, state: LedgerState) -> None:
        self.state = state

    def clear(self) -> None:
        self.state = None


__all__ = ["InMemoryLedgerStore", "JsonLedgerStore", "LedgerStore"]
