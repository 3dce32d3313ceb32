from decimal import Decimal
from typing import Generator

import pytest
from sqlalchemy import Engine, create_engine
from sqlalchemy.orm import Session, sessionmaker

from config import config
from db.models import Base
from domain.ledger import LedgerEngine, LedgerState
from domain.rates import ExchangeRateTable
from tests.constants import EUR, TRY, USD

engine: Engine = create_engine("sqlite:///:memory:", connect_args={"check_same_thread": False})
session_factory = sessionmaker(engine)


@pytest.fixture(scope="function")
def test_session() -> Generator[Session, None, None]:
    with session_factory() as session:
        yield session


@pytest.fixture(scope="function", autouse=True)
def reset_db() -> Generator[None, None, None]:
    Base.metadata.create_all(engine)
    yield
    Base.metadata.drop_all(engine)


@pytest.fixture(autouse=True)
def _reset_config_cache() -> Generator[None, None, None]:
    config.cache_clear()
    yield
    config.cache_clear()


@pytest.fixture(scope="function")
def rate_table() -> ExchangeRateTable:
    return ExchangeRateTable.default()


@pytest.fixture(scope="function")
def funded_state() -> LedgerState:
    return LedgerState(balances={USD: Decimal("1000"), EUR: Decimal("850"), TRY: Decimal("27800")})


@pytest.fixture(scope="function")
def ledger(rate_table: ExchangeRateTable, funded_state: LedgerState) -> LedgerEngine:
    return LedgerEngine(rate_table, funded_state)
