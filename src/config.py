from __future__ import annotations

from functools import cache
from pathlib import Path
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict

PROJECT_ROOT = Path(__file__).resolve().parents[1]
ARTIFACTS_DIR = PROJECT_ROOT / "artifacts"


class ConfigurationError(Exception):
    """Settings point at something the application cannot use."""


class AppSettings(BaseSettings):
    storage_backend: Literal["json", "sqlite"] = "json"
    data_dir: Path = ARTIFACTS_DIR
    balances_file: str = "balances.json"
    db_file: str = "currency_ledger.db"
    # Unset means the built-in table.
    rates_file: Path | None = None
    log_level: str = "INFO"

    model_config = SettingsConfigDict(env_prefix="LEDGER_", env_file=".env", env_file_encoding="utf-8", extra="ignore")

    @property
    def balances_path(self) -> Path:
        return self.data_dir / self.balances_file

    @property
    def db_path(self) -> Path:
        return self.data_dir / self.db_file


@cache
def config() -> AppSettings:
    return AppSettings()
