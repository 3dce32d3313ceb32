from __future__ import annotations

from decimal import Decimal
from itertools import permutations
from typing import Mapping

from .base_types import CurrencyCode
from .errors import InvalidAmountError, MissingRateError, SameCurrencyError
from .money import parse_currency, to_decimal

CurrencyPair = tuple[CurrencyCode, CurrencyCode]

# Hardcoded in the mobile app; the two directions are independent constants.
DEFAULT_RATES: dict[str, dict[str, str]] = {
    "USD": {"EUR": "0.85", "TRY": "27.5"},
    "EUR": {"USD": "1.18", "TRY": "32.5"},
    "TRY": {"USD": "0.036", "EUR": "0.031"},
}


def all_pairs() -> list[CurrencyPair]:
    return list(permutations(CurrencyCode, 2))


def _parse_pair(raw_from: object, raw_to: object) -> CurrencyPair:
    from_currency = parse_currency(raw_from)
    to_currency = parse_currency(raw_to)
    if from_currency == to_currency:
        msg = f"Rate table must not map {from_currency} to itself"
        raise ValueError(msg)
    return from_currency, to_currency


def _parse_rate(pair: CurrencyPair, raw_rate: object) -> Decimal:
    from_currency, to_currency = pair
    try:
        rate = to_decimal(raw_rate)
    except InvalidAmountError as error:
        msg = f"Rate for {from_currency}->{to_currency} is not a finite number: {raw_rate!r}"
        raise ValueError(msg) from error
    if rate <= 0:
        msg = f"Rate for {from_currency}->{to_currency} must be positive, got {raw_rate!r}"
        raise ValueError(msg)
    return rate


class ExchangeRateTable:
    """Static multiplier per ordered currency pair.

    Strict tables (the default) must cover every ordered pair of distinct
    currencies. Non-strict tables may be partial; lookups of absent pairs
    raise MissingRateError.
    """

    def __init__(self, rates: Mapping[tuple[object, object], object], *, strict: bool = True) -> None:
        validated: dict[CurrencyPair, Decimal] = {}
        for (raw_from, raw_to), raw_rate in rates.items():
            pair = _parse_pair(raw_from, raw_to)
            validated[pair] = _parse_rate(pair, raw_rate)

        if strict:
            missing = [pair for pair in all_pairs() if pair not in validated]
            if missing:
                names = ", ".join(f"{a}->{b}" for a, b in missing)
                msg = f"Rate table is missing pairs: {names}"
                raise ValueError(msg)

        self._rates = validated

    @classmethod
    def from_nested(cls, nested: Mapping[str, Mapping[str, object]], *, strict: bool = True) -> ExchangeRateTable:
        flat = {(from_id, to_id): rate for from_id, row in nested.items() for to_id, rate in row.items()}
        return cls(flat, strict=strict)

    @classmethod
    def with_derived_inverses(cls, canonical: Mapping[tuple[object, object], object]) -> ExchangeRateTable:
        """Build a reciprocal table from one rate per unordered pair.

        Inverses are computed here, once, so lookups never derive anything.
        """
        rates: dict[CurrencyPair, Decimal] = {}
        for (raw_from, raw_to), raw_rate in canonical.items():
            pair = _parse_pair(raw_from, raw_to)
            from_currency, to_currency = pair
            if (to_currency, from_currency) in rates:
                msg = f"Pair {from_currency}/{to_currency} given in both directions"
                raise ValueError(msg)
            rate = _parse_rate(pair, raw_rate)
            rates[pair] = rate
            rates[(to_currency, from_currency)] = Decimal(1) / rate
        return cls(rates)

    @classmethod
    def default(cls) -> ExchangeRateTable:
        return cls.from_nested(DEFAULT_RATES)

    def rate(self, from_currency: CurrencyCode, to_currency: CurrencyCode) -> Decimal:
        if from_currency == to_currency:
            raise SameCurrencyError(from_currency)
        try:
            return self._rates[(from_currency, to_currency)]
        except KeyError as error:
            raise MissingRateError(from_currency=from_currency, to_currency=to_currency) from error

    def pairs(self) -> list[CurrencyPair]:
        return sorted(self._rates)

    def as_nested(self) -> dict[str, dict[str, str]]:
        nested: dict[str, dict[str, str]] = {}
        for (from_currency, to_currency), rate in sorted(self._rates.items()):
            nested.setdefault(from_currency.value, {})[to_currency.value] = str(rate)
        return nested

    def __contains__(self, pair: object) -> bool:
        return pair in self._rates

    def __len__(self) -> int:
        return len(self._rates)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ExchangeRateTable):
            return NotImplemented
        return self._rates == other._rates

    def __repr__(self) -> str:
        return f"ExchangeRateTable({self.as_nested()!r})"


__all__ = ["DEFAULT_RATES", "CurrencyPair", "ExchangeRateTable", "all_pairs"]
