"""
Command-line interface for exercising the FIB payment APIs.
"""

from __future__ import annotations

import argparse
import asyncio
import enum
import json
import logging
import sys
from dataclasses import asdict
from datetime import datetime
from typing import Any, Iterable, Optional, Sequence, Tuple

from .api import create_payment_client, load_fib_config
from .core.client import FibClient
from .core.errors import FibError


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(message)s",
    )


def _env_override(value: str) -> Tuple[str, str]:
    if "=" not in value:
        raise argparse.ArgumentTypeError("Overrides must look like KEY=VALUE")
    key, val = value.split("=", 1)
    key = key.strip()
    if not key:
        raise argparse.ArgumentTypeError("Override key must not be empty")
    return key, val


def _collect_overrides(pairs: Iterable[Tuple[str, str]]) -> dict[str, str]:
    overrides: dict[str, str] = {}
    for key, value in pairs:
        overrides[key] = value
    return overrides


def _json_default(value: Any) -> Any:
    if isinstance(value, enum.Enum):
        return value.value
    if isinstance(value, datetime):
        return value.isoformat()
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="fib-payments",
        description="Create, inspect, refund or cancel FIB payments",
    )
    parser.add_argument(
        "--env-file",
        default=".env",
        help="Path to the .env file containing FIB_* settings (default: .env)",
    )
    parser.add_argument(
        "--set",
        action="append",
        type=_env_override,
        metavar="KEY=VALUE",
        default=None,
        help="Override an environment variable without editing the .env file",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        help="Python logging level (default: INFO)",
    )

    commands = parser.add_subparsers(dest="command", required=True)

    create = commands.add_parser("create", help="Create a new payment")
    create.add_argument("amount", type=float, help="Amount to charge")
    create.add_argument("--currency", help="Currency code (default: FIB_CURRENCY or IQD)")
    create.add_argument("--callback-url", help="Status callback URL for this payment")
    create.add_argument("--description", help="Description shown to the payer")
    create.add_argument(
        "--refundable-for",
        help="ISO-8601 refund window (default: FIB_REFUNDABLE_FOR or P7D)",
    )

    for name, help_text in (
        ("status", "Show the status of a payment"),
        ("refund", "Refund a paid payment"),
        ("cancel", "Cancel an unpaid payment"),
    ):
        sub = commands.add_parser(name, help=help_text)
        sub.add_argument("payment_id", help="Identifier returned when the payment was created")

    return parser


async def _dispatch(client: FibClient, args: argparse.Namespace) -> Any:
    async with client:
        if args.command == "create":
            return await client.create_payment(
                args.amount,
                currency=args.currency,
                callback_url=args.callback_url,
                description=args.description,
                refundable_for=args.refundable_for,
            )
        if args.command == "status":
            return await client.get_payment_status(args.payment_id)
        if args.command == "refund":
            return await client.refund_payment(args.payment_id)
        return await client.cancel_payment(args.payment_id)


def run_cli(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    _configure_logging(args.log_level)
    overrides = _collect_overrides(args.set or ())

    try:
        config = load_fib_config(env_file=args.env_file, overrides=overrides)
    except FibError as exc:
        logging.error("Invalid configuration: %s", exc)
        return 1

    client = create_payment_client(config=config)
    try:
        result = asyncio.run(_dispatch(client, args))
    except FibError as exc:
        logging.error("%s request failed: %s", args.command.capitalize(), exc)
        return 1

    print(json.dumps(asdict(result), indent=2, default=_json_default))
    return 0


def main(argv: Optional[Sequence[str]] = None) -> None:
    sys.exit(run_cli(argv))

