"""Protean Engine runner for the ordering service.

Starts the Engine workers that consume events asynchronously, most notably
``Payments.PaymentCompleted.v1`` from the ``payments::payment`` stream.

Usage:
    python src/server.py
    python src/server.py --test-mode   # Drain pending messages and exit
"""

import argparse
import asyncio

from protean.server.engine import Engine


def _get_domain():
    from ordering.domain import ordering

    ordering.init()
    return ordering


async def run(test_mode: bool = False):
    engine = Engine(_get_domain(), test_mode=test_mode)
    await engine.run()


def main():
    parser = argparse.ArgumentParser(description="Ordering Engine runner")
    parser.add_argument(
        "--test-mode",
        action="store_true",
        help="Process what is pending, then stop",
    )
    args = parser.parse_args()

    asyncio.run(run(test_mode=args.test_mode))


if __name__ == "__main__":
    main()
