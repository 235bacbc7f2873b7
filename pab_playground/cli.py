"""Command-line interface for the PAB playground store."""
from __future__ import annotations

import argparse
import asyncio
import sys

from .config import load_config
from .logging_setup import configure_logging
from .models import Asset
from .pab import ACTIONS
from .store import Store


def build_parser() -> argparse.ArgumentParser:
    """Build the argparse CLI parser."""
    parser = argparse.ArgumentParser(
        prog="pab-playground",
        description="Uniswap playground client for the Plutus Application Backend",
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

    sub.add_parser("status", help="Show wallets, funds, pools and the activity log")

    action_parser = sub.add_parser("action", help="Run a uniswap action")
    action_parser.add_argument("name", choices=ACTIONS, help="Endpoint to call")
    action_parser.add_argument(
        "--wallet", default=None, help="Wallet to act for (default: first wallet)"
    )
    action_parser.add_argument(
        "--param",
        action="append",
        default=[],
        metavar="KEY=VALUE",
        help="Action parameter, e.g. coinA=A or amountA=100 (repeatable)",
    )

    return parser


def parse_params(pairs: list[str]) -> dict[str, str]:
    """Turn ``KEY=VALUE`` strings into a dict."""
    params: dict[str, str] = {}
    for pair in pairs:
        key, sep, value = pair.partition("=")
        if not sep or not key:
            raise ValueError(f"Invalid parameter '{pair}', expected KEY=VALUE")
        params[key.strip()] = value.strip()
    return params


def _format_assets(title: str, assets: list[Asset]) -> str:
    lines = [f"{title}:"]
    if not assets:
        lines.append("  —")
    for asset in assets:
        symbol = asset.currency_symbol or "(ada)"
        token = asset.token_name or "(lovelace)"
        lines.append(f"  {symbol[:10]:<10} {token:<10} {asset.amount:>20,}")
    return "\n".join(lines)


def render(store: Store) -> str:
    """Plain-text view of the store's observable fields."""
    wallets = ", ".join(
        f"[{w}]" if w == store.current_wallet else w for w in store.wallets
    )
    sections = [
        f"Wallets: {wallets or '—'}",
        _format_assets("Funds", store.funds),
        _format_assets("Pools", store.pools),
        "Activity:",
    ]
    for entry in store.logs:
        first, _, rest = entry.message.partition("\n\n")
        sections.append(f"  {entry.time:%H:%M:%S} {entry.type.value:<7} {first}")
        if rest:
            sections.append("      " + rest.replace("\n", "\n      "))
    if store.global_error:
        sections.append(f"Error: {store.global_error}")
    return "\n".join(sections)


async def _run(args: argparse.Namespace) -> int:
    """Execute the selected command and return the exit status."""
    configure_logging(args.log_level)
    config = load_config(args.config)
    store = Store.from_config(config)

    await store.init_project()
    if store.global_error:
        print(render(store))
        return 1

    if args.command == "action":
        if args.wallet:
            task = store.switch_wallet(args.wallet)
            if task is not None:
                await task
        await store.call_action(args.name, parse_params(args.param))

    print(render(store))
    return 0


def main() -> None:
    """Entry point."""
    parser = build_parser()
    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        sys.exit(1)

    try:
        parse_params(getattr(args, "param", []))
    except ValueError as e:
        parser.error(str(e))

    sys.exit(asyncio.run(_run(args)))
