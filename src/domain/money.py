"""Amount coercion and rounding.

All money entering the ledger passes through ``coerce_amount`` so that the
engine only ever sees finite, positive Decimals at minor-unit precision.
Conversion results are rounded exactly once, in ``convert``.
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from .base_types import MINOR_UNITS, CurrencyCode, minor_unit
from .errors import InvalidAmountError, UnknownCurrencyError


def parse_currency(value: object) -> CurrencyCode:
    if isinstance(value, CurrencyCode):
        return value
    if not isinstance(value, str):
        raise UnknownCurrencyError(value)
    try:
        return CurrencyCode(value.strip().upper())
    except ValueError as error:
        raise UnknownCurrencyError(value) from error


def to_decimal(value: object) -> Decimal:
    """Convert caller input to Decimal without passing through binary floats."""
    # bool is an int subclass; True is not an amount.
    if isinstance(value, bool):
        raise InvalidAmountError(value, "not a number")
    if isinstance(value, Decimal):
        result = value
    elif isinstance(value, int):
        result = Decimal(value)
    elif isinstance(value, float):
        result = Decimal(repr(value))
    elif isinstance(value, str):
        try:
            result = Decimal(value.strip())
        except InvalidOperation as error:
            raise InvalidAmountError(value, "not a number") from error
    else:
        raise InvalidAmountError(value, "not a number")
    if not result.is_finite():
        raise InvalidAmountError(value, "not finite")
    return result


def coerce_amount(value: object, currency: CurrencyCode) -> Decimal:
    amount = to_decimal(value)
    if amount <= 0:
        raise InvalidAmountError(value, "must be greater than zero")
    try:
        quantized = amount.quantize(minor_unit(currency))
    except InvalidOperation as error:
        raise InvalidAmountError(value, "too large") from error
    if quantized != amount:
        raise InvalidAmountError(value, f"more precise than the {currency} minor unit")
    return quantized


def quantize(value: Decimal, currency: CurrencyCode) -> Decimal:
    return value.quantize(minor_unit(currency), rounding=ROUND_HALF_UP)


def convert(amount: Decimal, rate: Decimal, to_currency: CurrencyCode) -> Decimal:
    try:
        return quantize(amount * rate, to_currency)
    except InvalidOperation as error:
        raise InvalidAmountError(amount, f"too large to convert into {to_currency}") from error


def credit(balance: Decimal, amount: Decimal, currency: CurrencyCode) -> Decimal:
    """Balance after adding ``amount``, refusing sums beyond Decimal precision."""
    try:
        return (balance + amount).quantize(minor_unit(currency))
    except InvalidOperation as error:
        raise InvalidAmountError(amount, f"too large, {currency} balance would overflow") from error


def to_minor_units(amount: Decimal, currency: CurrencyCode) -> int:
    return int((amount * (Decimal(10) ** MINOR_UNITS[currency])).to_integral_value(rounding=ROUND_HALF_UP))


def from_minor_units(value: int, currency: CurrencyCode) -> Decimal:
    return Decimal(value).scaleb(-MINOR_UNITS[currency])


__all__ = [
    "coerce_amount",
    "convert",
    "credit",
    "from_minor_units",
    "parse_currency",
    "quantize",
    "to_decimal",
    "to_minor_units",
]
