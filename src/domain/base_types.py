from __future__ import annotations

from decimal import Decimal
from enum import StrEnum


class CurrencyCode(StrEnum):
    USD = "USD"
    EUR = "EUR"
    TRY = "TRY"


# Decimal places of the smallest subdivision (cents, kuruş).
MINOR_UNITS: dict[CurrencyCode, int] = {
    CurrencyCode.USD: 2,
    CurrencyCode.EUR: 2,
    CurrencyCode.TRY: 2,
}


def minor_unit(currency: CurrencyCode) -> Decimal:
    return Decimal(1).scaleb(-MINOR_UNITS[currency])
