"""
Minimal script that uses the public API to create, inspect and refund a payment.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys

from fib_payments import ConfigError, FibError, create_payment_client, load_fib_config


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Run a FIB payment round trip")
    parser.add_argument(
        "--env-file",
        default=".env",
        help="Path to the .env file containing FIB_* settings",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        help="Python logging level (default: INFO)",
    )
    parser.add_argument(
        "--amount",
        type=float,
        default=1000.0,
        help="Amount to charge (default: 1000)",
    )
    parser.add_argument("--currency", help="Override the currency (default: FIB_CURRENCY)")
    parser.add_argument(
        "--description",
        default="Test payment",
        help="Description shown to the payer",
    )
    parser.add_argument(
        "--skip-refund",
        action="store_true",
        help="Stop after reading the payment status",
    )
    return parser.parse_args()


async def run(args: argparse.Namespace) -> int:
    try:
        config = load_fib_config(env_file=args.env_file)
    except ConfigError as exc:
        logging.error("Invalid configuration: %s", exc)
        return 1

    async with create_payment_client(config=config) as client:
        logging.info("Creating payment against %s", config.base_url)
        try:
            payment = await client.create_payment(
                args.amount,
                currency=args.currency,
                description=args.description,
            )
        except FibError as exc:
            logging.error("Payment creation failed: %s", exc)
            return 1
        logging.info(
            "Created payment %s (readable code %s, valid until %s)",
            payment.payment_id,
            payment.readable_code,
            payment.valid_until.isoformat(),
        )

        try:
            status = await client.get_payment_status(payment.payment_id)
        except FibError as exc:
            logging.error("Status request failed: %s", exc)
            return 1
        logging.info("Payment status: %s", status.status.value)

        if args.skip_refund:
            return 0

        try:
            refund = await client.refund_payment(payment.payment_id)
        except FibError as exc:
            logging.error("Refund failed: %s", exc)
            return 0
        logging.info("Refund accepted for payment %s", refund.payment_id)
    return 0


def main() -> int:
    args = parse_args()
    logging.basicConfig(
        level=getattr(logging, args.log_level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(message)s",
    )
    return asyncio.run(run(args))


if __name__ == "__main__":
    sys.exit(main())
