from __future__ import annotations

import argparse
import logging
import sys
from typing import Sequence

from pydantic import ValidationError

from config import AppSettings, ConfigurationError, config
from db.db import init_db
from db.repositories import BalanceRepository
from domain.errors import LedgerError, StorageUnavailableError
from domain.money import parse_currency
from domain.rates import ExchangeRateTable
from services.ledger_store import JsonLedgerStore, LedgerStore
from services.rate_table_loader import load_rate_table
from services.wallet_service import WalletOutcome, WalletService
from utils.formatting import format_currency, format_rate, render_balances, render_rate_table

EXIT_OK = 0
EXIT_REJECTED = 1
EXIT_STORAGE = 2
EXIT_CONFIG = 3

logger = logging.getLogger(__name__)


def build_store(settings: AppSettings) -> LedgerStore:
    if settings.storage_backend == "sqlite":
        logger.info("Using SQLite balances at %s", settings.db_path)
        return BalanceRepository(init_db(db_file=settings.db_path))
    logger.info("Using JSON balances at %s", settings.balances_path)
    return JsonLedgerStore(path=settings.balances_path)


def build_rate_table(settings: AppSettings) -> ExchangeRateTable:
    if settings.rates_file is None:
        return ExchangeRateTable.default()
    logger.info("Loading rates from %s", settings.rates_file)
    try:
        return load_rate_table(settings.rates_file)
    except (OSError, ValueError) as error:
        raise ConfigurationError(f"cannot load rates from {settings.rates_file}: {error}") from error


def print_balances(service: WalletService) -> None:
    print("Balances:")
    for line in render_balances(service.snapshot()):
        print(f"  {line}")


def report_outcome(outcome: WalletOutcome) -> int:
    if outcome.exchange is not None:
        result = outcome.exchange
        print(
            f"Exchanged {format_currency(result.amount, result.from_currency)} -> "
            f"{format_currency(result.converted_amount, result.to_currency)} "
            f"({format_rate(result.from_currency, result.to_currency, result.rate_applied)})"
        )
    for line in render_balances(outcome.state):
        print(f"  {line}")
    if not outcome.persisted:
        print(f"Warning: balances were not saved: {outcome.storage_error}", file=sys.stderr)
        return EXIT_STORAGE
    return EXIT_OK


def run(args: argparse.Namespace, settings: AppSettings) -> int:
    rate_table = build_rate_table(settings)
    if args.command == "rates":
        for line in render_rate_table(rate_table):
            print(line)
        return EXIT_OK

    service = WalletService.open(build_store(settings), rate_table)
    if args.command == "balances":
        print_balances(service)
        return EXIT_OK
    if args.command == "deposit":
        return report_outcome(service.deposit(args.currency, args.amount))
    if args.command == "exchange":
        return report_outcome(service.exchange(args.from_currency, args.to_currency, args.amount))
    if args.command == "quote":
        from_currency = parse_currency(args.from_currency)
        to_currency = parse_currency(args.to_currency)
        print(format_rate(from_currency, to_currency, service.quote_rate(from_currency, to_currency)))
        if args.amount is not None:
            converted = service.preview(from_currency, to_currency, args.amount)
            print(f"{args.amount} {from_currency.value} -> {format_currency(converted, to_currency)}")
        return EXIT_OK
    if args.command == "reset":
        service.reset()
        print("Balances cleared.")
        return EXIT_OK
    raise ValueError(f"Unsupported command: {args.command}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Multi-currency wallet ledger.")
    parser.add_argument("--backend", choices=("json", "sqlite"), help="Override the configured storage backend.")
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("balances", help="Show current balances.")

    deposit = subparsers.add_parser("deposit", help="Add funds in one currency.")
    deposit.add_argument("currency")
    deposit.add_argument("amount")

    exchange = subparsers.add_parser("exchange", help="Convert funds between currencies.")
    exchange.add_argument("from_currency")
    exchange.add_argument("to_currency")
    exchange.add_argument("amount")

    quote = subparsers.add_parser("quote", help="Show the rate for a pair, optionally previewing an amount.")
    quote.add_argument("from_currency")
    quote.add_argument("to_currency")
    quote.add_argument("amount", nargs="?")

    subparsers.add_parser("rates", help="List the configured rate table.")
    subparsers.add_parser("reset", help="Clear stored balances.")
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    try:
        settings = config()
    except ValidationError as error:
        problems = "; ".join(f"{'.'.join(map(str, item['loc']))}: {item['msg']}" for item in error.errors())
        print(f"Configuration error: {problems}", file=sys.stderr)
        return EXIT_CONFIG
    if args.backend is not None:
        settings = settings.model_copy(update={"storage_backend": args.backend})
    logging.basicConfig(level=settings.log_level, format="%(asctime)s %(levelname)s %(name)s %(message)s")

    try:
        return run(args, settings)
    except LedgerError as error:
        print(f"Error: {error}", file=sys.stderr)
        return EXIT_REJECTED
    except StorageUnavailableError as error:
        print(f"Storage error: {error}", file=sys.stderr)
        return EXIT_STORAGE
    except ConfigurationError as error:
        print(f"Configuration error: {error}", file=sys.stderr)
        return EXIT_CONFIG


if __name__ == "__main__":
    raise SystemExit(main())
