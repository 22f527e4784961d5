"""
propfirm-engine — command line front end for the propfirm rule engine.

Loads one account snapshot from YAML, runs the firm's strategy over it and
prints the evaluation as JSON on stdout. Logs go to stderr and the log file.

Usage:
    # Evaluate an account
    python -m src.main --account config/accounts/topstep_50k_eval.yaml

    # Evaluate as of a given day (drives today's PnL in the progress snapshot)
    python -m src.main --account config/accounts/topstep_50k_eval.yaml --today 2026-03-06

    # List the account sizes a firm supports
    python -m src.main --firm TRADEIFY --list-sizes
"""

import argparse
import json
import os
import sys
from datetime import date
from pathlib import Path

from dotenv import load_dotenv
from loguru import logger
from pydantic import ValidationError

from src.config import AppConfig, load_config
from src.propfirm.account import load_account
from src.propfirm.evaluation import evaluate_account
from src.propfirm.selector import get_strategy, supported_sizes

LOG_LEVEL_ENV = "PROPFIRM_LOG_LEVEL"


def setup_logging(config: AppConfig) -> None:
    """Configure loguru logging from config, PROPFIRM_LOG_LEVEL overrides the level."""
    level = os.getenv(LOG_LEVEL_ENV, config.logging.level).upper()
    log_dir = Path(config.logging.file).parent
    log_dir.mkdir(parents=True, exist_ok=True)

    logger.remove()  # Remove default handler
    logger.add(
        sys.stderr,
        level=level,
        format="<green>{time:HH:mm:ss}</green> | <level>{level:8}</level> | {message}",
    )
    logger.add(
        config.logging.file,
        level=level,
        rotation=config.logging.rotation,
        retention=config.logging.retention,
        encoding="utf-8",
    )


def _parse_day(value: str) -> date:
    try:
        return date.fromisoformat(value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(f"invalid date '{value}', expected YYYY-MM-DD") from e


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="propfirm-engine — propfirm account rules")
    parser.add_argument(
        "--config",
        default="config/default.yaml",
        help="Path to engine config YAML",
    )
    parser.add_argument(
        "--account",
        default=None,
        help="Path to an account snapshot YAML to evaluate",
    )
    parser.add_argument(
        "--today",
        type=_parse_day,
        default=None,
        help="Override today's date for the progress snapshot (YYYY-MM-DD)",
    )
    parser.add_argument(
        "--firm",
        default=None,
        help="Firm identifier for --list-sizes (e.g. TOPSTEP)",
    )
    parser.add_argument(
        "--list-sizes",
        action="store_true",
        help="Print the account sizes the firm supports",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    """CLI entry point. Returns the process exit status."""
    parser = build_parser()
    args = parser.parse_args(argv)

    load_dotenv()

    config = load_config(args.config)
    setup_logging(config)

    if args.list_sizes:
        if not args.firm:
            parser.error("--list-sizes requires --firm")
        strategy = get_strategy(args.firm)
        sizes = supported_sizes(args.firm, config.engine.probe_sizes)
        logger.info("{}: {} supported sizes", strategy.get_name(), len(sizes))
        print(json.dumps({"firm": strategy.get_name(), "sizes": sizes}))
        return 0

    if not args.account:
        parser.error("one of --account or --firm/--list-sizes is required")

    try:
        account = load_account(args.account)
    except (FileNotFoundError, ValidationError) as e:
        logger.error("Could not load account {}: {}", args.account, e)
        return 1

    logger.info("Account: {} ({})", account.name, args.account)
    evaluation = evaluate_account(account, today=args.today)
    print(evaluation.model_dump_json(indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
