from decimal import Decimal

import pytest

from domain.errors import MissingRateError, SameCurrencyError, UnknownCurrencyError
from domain.rates import DEFAULT_RATES, ExchangeRateTable, all_pairs
from tests.constants import EUR, TRY, USD


def test_default_table_covers_every_pair() -> None:
    table = ExchangeRateTable.default()

    assert len(table) == 6
    assert table.pairs() == sorted(all_pairs())
    assert table.rate(USD, EUR) == Decimal("0.85")
    assert table.rate(USD, TRY) == Decimal("27.5")
    assert table.rate(EUR, USD) == Decimal("1.18")
    assert table.rate(EUR, TRY) == Decimal("32.5")
    assert table.rate(TRY, USD) == Decimal("0.036")
    assert table.rate(TRY, EUR) == Decimal("0.031")


def test_default_table_is_not_reciprocal() -> None:
    table = ExchangeRateTable.default()

    assert table.rate(USD, EUR) * table.rate(EUR, USD) == Decimal("1.003")


def test_strict_table_requires_every_pair() -> None:
    with pytest.raises(ValueError, match="missing pairs"):
        ExchangeRateTable({(USD, EUR): "0.85"})


def test_partial_table_raises_missing_rate_on_lookup() -> None:
    table = ExchangeRateTable({("usd", "eur"): "0.85"}, strict=False)

    assert (USD, EUR) in table
    assert table.rate(USD, EUR) == Decimal("0.85")
    with pytest.raises(MissingRateError):
        table.rate(EUR, USD)


@pytest.mark.parametrize("rate", ["0", "-1.2", "abc", "Infinity", None])
def test_rates_must_be_positive_finite_numbers(rate: object) -> None:
    with pytest.raises(ValueError):
        ExchangeRateTable({(USD, EUR): rate}, strict=False)


def test_pair_cannot_map_to_itself() -> None:
    with pytest.raises(ValueError, match="itself"):
        ExchangeRateTable({(USD, USD): "1"}, strict=False)


def test_unknown_currency_in_table() -> None:
    with pytest.raises(UnknownCurrencyError):
        ExchangeRateTable({(USD, "GBP"): "0.8"}, strict=False)


def test_same_currency_lookup_fails() -> None:
    with pytest.raises(SameCurrencyError):
        ExchangeRateTable.default().rate(TRY, TRY)


def test_nested_layout_round_trips() -> None:
    table = ExchangeRateTable.from_nested(DEFAULT_RATES)

    assert ExchangeRateTable.from_nested(table.as_nested()) == table
    assert table.as_nested()["USD"] == {"EUR": "0.85", "TRY": "27.5"}


def test_derived_inverses_are_stored_up_front() -> None:
    table = ExchangeRateTable.with_derived_inverses({(USD, EUR): "0.8", (USD, TRY): "32", (EUR, TRY): "40"})

    assert table.rate(EUR, USD) == Decimal("1.25")
    assert table.rate(TRY, USD) == Decimal("0.03125")
    assert table.rate(TRY, EUR) == Decimal("0.025")


def test_derived_inverses_reject_both_directions() -> None:
    with pytest.raises(ValueError, match="both directions"):
        ExchangeRateTable.with_derived_inverses({(USD, EUR): "0.8", (EUR, USD): "1.25"})
