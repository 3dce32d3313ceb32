from decimal import Decimal

from domain.ledger import LedgerState
from domain.rates import ExchangeRateTable
from tests.constants import EUR, TRY, USD
from utils.formatting import format_currency, format_decimal, format_rate, render_balances, render_rate_table


def test_format_currency_uses_symbol_and_two_decimals() -> None:
    assert format_currency(Decimal("27800"), TRY) == "₺27,800.00 TRY"
    assert format_currency(Decimal("0"), EUR) == "€0.00 EUR"
    assert format_currency(Decimal("12.5"), USD) == "$12.50 USD"


def test_format_rate_drops_trailing_zeros() -> None:
    assert format_rate(USD, EUR, Decimal("0.850")) == "1 USD = 0.85 EUR"
    assert format_rate(EUR, TRY, Decimal("40.00")) == "1 EUR = 40 TRY"
    assert format_decimal(Decimal("1E+2")) == "100"


def test_render_balances_lists_every_currency() -> None:
    lines = render_balances(LedgerState(balances={USD: Decimal("1000")}))

    assert lines == ["$1,000.00 USD", "€0.00 EUR", "₺0.00 TRY"]


def test_render_rate_table_lists_every_pair() -> None:
    lines = render_rate_table(ExchangeRateTable.default())

    assert len(lines) == 6
    assert "1 USD = 0.85 EUR" in lines
    assert "1 TRY = 0.031 EUR" in lines
