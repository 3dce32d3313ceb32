from __future__ import annotations

import json
from decimal import Decimal
from pathlib import Path

from domain.errors import UnknownCurrencyError
from domain.rates import ExchangeRateTable


def load_rate_table(path: Path) -> ExchangeRateTable:
    """Read a strict rate table from ``{"USD": {"EUR": "0.85", ...}, ...}``."""
    payload = json.loads(path.read_text(encoding="utf-8"), parse_float=Decimal)
    if not isinstance(payload, dict):
        msg = "Rate file must contain a JSON object keyed by source currency."
        raise ValueError(msg)

    for from_id, row in payload.items():
        if not isinstance(row, dict):
            msg = f"Rates for {from_id!r} must be an object keyed by target currency."
            raise ValueError(msg)
        for to_id, rate in row.items():
            if not isinstance(rate, (str, int, Decimal)) or isinstance(rate, bool):
                msg = f"Rate {from_id}->{to_id} must be a number or numeric string, got {rate!r}."
                raise ValueError(msg)

    try:
        return ExchangeRateTable.from_nested(payload)
    except UnknownCurrencyError as error:
        msg = f"Rate file references an unsupported currency: {error.currency!r}"
        raise ValueError(msg) from error


__all__ = ["load_rate_table"]
