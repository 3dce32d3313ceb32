from __future__ import annotations

from decimal import Decimal

from domain.base_types import CurrencyCode, minor_unit
from domain.ledger import LedgerState
from domain.rates import ExchangeRateTable

CURRENCY_SYMBOLS: dict[CurrencyCode, str] = {
    CurrencyCode.USD: "$",
    CurrencyCode.EUR: "€",
    CurrencyCode.TRY: "₺",
}


def format_decimal(value: Decimal) -> str:
    quantized = value.normalize()
    # Avoid scientific notation for integers.
    if quantized == quantized.to_integral():
        return f"{quantized:.0f}"
    return format(quantized, "f")


def format_currency(value: Decimal, currency: CurrencyCode) -> str:
    amount = value.quantize(minor_unit(currency))
    return f"{CURRENCY_SYMBOLS[currency]}{amount:,} {currency.value}"


def format_rate(from_currency: CurrencyCode, to_currency: CurrencyCode, rate: Decimal) -> str:
    return f"1 {from_currency.value} = {format_decimal(rate)} {to_currency.value}"


def render_balances(state: LedgerState) -> list[str]:
    return [format_currency(amount, currency) for currency, amount in state.balances.items()]


def render_rate_table(table: ExchangeRateTable) -> list[str]:
    return [
        format_rate(from_currency, to_currency, table.rate(from_currency, to_currency))
        for from_currency, to_currency in table.pairs()
    ]
