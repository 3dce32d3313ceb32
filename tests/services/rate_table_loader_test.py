import json
from decimal import Decimal
from pathlib import Path

import pytest

from domain.rates import DEFAULT_RATES, ExchangeRateTable
from services.rate_table_loader import load_rate_table
from tests.constants import EUR, TRY, USD


def _write(tmp_path: Path, payload: object) -> Path:
    path = tmp_path / "rates.json"
    path.write_text(json.dumps(payload))
    return path


def test_loads_nested_rate_file(tmp_path: Path) -> None:
    path = _write(tmp_path, DEFAULT_RATES)

    assert load_rate_table(path) == ExchangeRateTable.default()


def test_numeric_rates_keep_their_decimal_digits(tmp_path: Path) -> None:
    path = tmp_path / "rates.json"
    path.write_text(
        '{"USD": {"EUR": 0.1, "TRY": 30}, "EUR": {"USD": 10, "TRY": 300}, "TRY": {"USD": 0.03, "EUR": 0.003}}'
    )

    table = load_rate_table(path)

    assert table.rate(USD, EUR) == Decimal("0.1")
    assert table.rate(TRY, EUR) == Decimal("0.003")
    assert table.rate(EUR, TRY) == Decimal("300")


@pytest.mark.parametrize(
    "payload, message",
    [
        (["USD"], "JSON object"),
        ({"USD": "0.85"}, "object keyed by target"),
        ({"USD": {"EUR": True}}, "numeric string"),
        ({"USD": {"GBP": "0.7"}}, "unsupported currency"),
        ({"USD": {"EUR": "0.85"}}, "missing pairs"),
    ],
)
def test_rejects_malformed_rate_files(tmp_path: Path, payload: object, message: str) -> None:
    path = _write(tmp_path, payload)

    with pytest.raises(ValueError, match=message):
        load_rate_table(path)
