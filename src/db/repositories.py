from __future__ import annotations

import logging
from datetime import datetime, timezone

from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from db import models
from domain.base_types import CurrencyCode
from domain.errors import StorageUnavailableError, UnknownCurrencyError
from domain.ledger import LedgerState
from domain.money import from_minor_units, parse_currency, to_minor_units

logger = logging.getLogger(__name__)


class BalanceRepository:
    """SQLite-backed ledger store: one row per currency in integer minor units."""

    def __init__(self, session: Session) -> None:
        self._session = session

    def load(self) -> LedgerState | None:
        try:
            rows = self._session.query(models.BalanceOrm).all()
        except SQLAlchemyError as error:
            self._session.rollback()
            raise StorageUnavailableError("load", str(error)) from error
        if not rows:
            return None
        return self._to_domain(rows)

    def save(self, state: LedgerState) -> None:
        now = datetime.now(timezone.utc)
        try:
            for currency, amount in state.balances.items():
                self._session.merge(
                    models.BalanceOrm(
                        currency=currency.value,
                        amount_minor=to_minor_units(amount, currency),
                        updated_at=now,
                    )
                )
            self._session.commit()
        except SQLAlchemyError as error:
            self._session.rollback()
            raise StorageUnavailableError("save", str(error)) from error
        logger.debug("Saved balances for %d currencies", len(state.balances))

    def clear(self) -> None:
        try:
            self._session.query(models.BalanceOrm).delete()
            self._session.commit()
        except SQLAlchemyError as error:
            self._session.rollback()
            raise StorageUnavailableError("clear", str(error)) from error

    @staticmethod
    def _to_domain(rows: list[models.BalanceOrm]) -> LedgerState:
        balances = {}
        try:
            for row in rows:
                currency: CurrencyCode = parse_currency(row.currency)
                balances[currency] = from_minor_units(row.amount_minor, currency)
            return LedgerState(balances=balances)
        except (UnknownCurrencyError, ValidationError) as error:
            raise StorageUnavailableError("load", f"stored balances are invalid: {error}") from error


__all__ = ["BalanceRepository"]
