"""Command-line interface for the staking ledger."""
from __future__ import annotations

import argparse
import asyncio
import logging
import sys

from .clock import ManualClock, SystemClock
from .config import load_config
from .deploy import deploy
from .errors import InvalidAmount, InvalidRateTier
from .interfaces.notifier import Notifier
from .ledger import validate_amount
from .logging_setup import configure_logging
from .notifications import TelegramNotifier
from .rewards import SECONDS_PER_DAY, compute_payout, decode_tier
from .services import EventRelay, Simulator, StepResult, load_scenario

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    """Build the argparse CLI parser."""
    parser = argparse.ArgumentParser(
        prog="stake-ledger",
        description="Deposit/reward staking ledger",
    )
    parser.add_argument(
        "--config",
        default=None,
        help="Path to config.yaml (default: config.yaml in project root)",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: INFO)",
    )

    sub = parser.add_subparsers(dest="command")

    quote_parser = sub.add_parser("quote", help="Payout for a hypothetical position")
    quote_parser.add_argument("amount", type=int, help="Principal in base units")
    quote_parser.add_argument("tier", help="no_lock | six_month | one_year, or 0-2")
    quote_parser.add_argument(
        "--elapsed-days",
        type=int,
        default=0,
        help="Days since deposit (default: 0)",
    )

    simulate_parser = sub.add_parser("simulate", help="Replay a scenario file")
    simulate_parser.add_argument("scenario", help="Path to a scenario YAML file")

    return parser


def _format_result(result: StepResult) -> str:
    if not result.ok:
        return f"{result.index:>3}  {result.action:<9} REJECTED  {result.error}"
    values = "  ".join(f"{k}={v}" for k, v in result.values.items())
    return f"{result.index:>3}  {result.action:<9} ok        {values}"


def _quote(args: argparse.Namespace) -> int:
    try:
        amount = validate_amount(args.amount)
        tier = decode_tier(args.tier)
    except (InvalidAmount, InvalidRateTier) as e:
        print(f"error: {e}", file=sys.stderr)
        return 2
    withdrawable, reward = compute_payout(
        amount, tier, 0, args.elapsed_days * SECONDS_PER_DAY
    )
    print(f"withdrawable={withdrawable} reward={reward}")
    return 0


def _simulate(args: argparse.Namespace) -> int:
    config = load_config(args.config)
    steps = load_scenario(args.scenario)

    clock = ManualClock(SystemClock().now())
    deployment = deploy(config, clock=clock)

    notifiers: list[Notifier] = []
    if config.notifications.telegram.enabled:
        telegram = TelegramNotifier(config.notifications.telegram)
        if telegram.configured:
            notifiers.append(telegram)
        else:
            logger.warning("Telegram enabled but bot token or chat id missing; skipping")
    relay = EventRelay(
        deployment.ledger,
        notifiers,
        principal_symbol=deployment.principal_token.symbol,
        reward_symbol=deployment.reward_token.symbol,
    )

    results = Simulator(deployment, clock).run(steps)
    for result in results:
        print(_format_result(result))

    asyncio.run(relay.flush())
    return 0 if all(r.ok for r in results) else 1


def main() -> None:
    """Entry point."""
    parser = build_parser()
    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        sys.exit(1)

    configure_logging(args.log_level)
    if args.command == "quote":
        sys.exit(_quote(args))
    sys.exit(_simulate(args))
