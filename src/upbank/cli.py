"""
Command-line interface for talking to Up Bank.
"""

from __future__ import annotations

import argparse
import getpass
import logging
import sys
from datetime import datetime
from typing import Callable, Dict, Iterable, List, Optional, Sequence, Tuple

from .api import create_client
from .core.client import Client
from .core.config import ConfigError, load_client_config
from .core.credentials import store_token
from .core.errors import UpBankError
from .core.options import (
    with_description,
    with_filter_since,
    with_filter_until,
    with_page_size,
    with_transaction_page_size,
)


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.WARNING),
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


def _collect_overrides(pairs: Iterable[Tuple[str, str]]) -> Dict[str, str]:
    overrides: Dict[str, str] = {}
    for key, value in pairs:
        overrides[key] = value
    return overrides


def _positive_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"'{value}' is not an integer") from exc
    if number <= 0:
        raise argparse.ArgumentTypeError("Page size must be greater than zero")
    return number


def _timestamp(value: str) -> datetime:
    try:
        moment = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"'{value}' is not an RFC 3339 timestamp") from exc
    if moment.tzinfo is None:
        raise argparse.ArgumentTypeError(f"'{value}' needs a UTC offset, e.g. {value}+10:00")
    return moment


def render_table(rows: Sequence[Sequence[str]], padding: int = 3) -> str:
    """Left-align ``rows`` into columns separated by ``padding`` spaces."""
    if not rows:
        return ""
    widths = [0] * max(len(row) for row in rows)
    for row in rows:
        for index, cell in enumerate(row):
            widths[index] = max(widths[index], len(cell))
    lines = []
    for row in rows:
        cells = [cell.ljust(widths[index]) for index, cell in enumerate(row[:-1])]
        cells.append(row[-1])
        lines.append((" " * padding).join(cells).rstrip())
    return "\n".join(lines)


def _format_date(moment: datetime) -> str:
    return moment.strftime("%a, %d %b %Y %H:%M:%S %Z").rstrip()


def _ping(client: Client, args: argparse.Namespace) -> int:
    client.ping()
    print("Successfully pinged Up Bank ⚡")
    return 0


def _list_accounts(client: Client, args: argparse.Namespace) -> int:
    options = [with_page_size(args.page_size)] if args.page_size else []
    accounts = client.list_accounts(*options)
    rows = [
        [
            account.attributes.display_name,
            account.attributes.account_type.value,
            account.attributes.balance.format(),
        ]
        for account in accounts.data
    ]
    print(render_table(rows))
    return 0


def _list_transactions(client: Client, args: argparse.Namespace) -> int:
    options = []
    if args.page_size:
        options.append(with_transaction_page_size(args.page_size))
    if args.since:
        options.append(with_filter_since(args.since))
    if args.until:
        options.append(with_filter_until(args.until))
    transactions = client.list_transactions(*options)
    rows = [
        [
            transaction.attributes.created_at.date().isoformat(),
            transaction.attributes.description,
            transaction.attributes.amount.format(),
            transaction.attributes.status.value,
        ]
        for transaction in transactions.data
    ]
    print(render_table(rows))
    return 0


def _list_webhooks(client: Client, args: argparse.Namespace) -> int:
    webhooks = client.list_webhooks()
    rows = [
        [
            webhook.id,
            webhook.attributes.url,
            webhook.attributes.description or "",
        ]
        for webhook in webhooks.data
    ]
    print(render_table(rows))
    return 0


def _get_account(client: Client, args: argparse.Namespace) -> int:
    account = client.get_account(args.id).data
    print(
        render_table(
            [
                ["Name:", account.attributes.display_name],
                ["Type:", account.attributes.account_type.value],
                ["Amount:", account.attributes.balance.format()],
            ]
        )
    )
    return 0


def _get_transaction(client: Client, args: argparse.Namespace) -> int:
    transaction = client.get_transaction(args.id).data
    attributes = transaction.attributes
    print(
        render_table(
            [
                ["Description:", attributes.description],
                ["Message:", attributes.message or "N/A"],
                ["Amount:", attributes.amount.format()],
                ["Date:", _format_date(attributes.created_at)],
            ]
        )
    )
    return 0


def _add_webhook(client: Client, args: argparse.Namespace) -> int:
    options = [with_description(args.description)] if args.description else []
    webhook = client.register_webhook(args.url, *options)
    print(f"Successfully registered webhook at {args.url} 💸")
    print()
    print("Here's the secret key:")
    print(f"\t{webhook.data.attributes.secret_key}")
    print("Use it to verify requests sent to the webhook URL.")
    return 0


def _ping_webhook(client: Client, args: argparse.Namespace) -> int:
    event = client.ping_webhook(args.id).data
    print(f"Sent {event.attributes.event_type.value} event {event.id} to webhook {args.id}")
    return 0


_HANDLERS: Dict[str, Callable[[Client, argparse.Namespace], int]] = {
    "ping": _ping,
    "list accounts": _list_accounts,
    "list transactions": _list_transactions,
    "list webhooks": _list_webhooks,
    "get account": _get_account,
    "get transaction": _get_transaction,
    "add webhook": _add_webhook,
    "ping-webhook": _ping_webhook,
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="upbank",
        description="Talk to your bank from the CLI!",
    )
    parser.add_argument(
        "--env-file",
        default=".env",
        help="Path to the .env file containing UPBANK_* settings (default: .env)",
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
        default=None,
        help="Python logging level (default: WARNING, or INFO with --verbose)",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log every request and response",
    )

    commands = parser.add_subparsers(dest="command", required=True, metavar="COMMAND")
    commands.add_parser("init", help="Store your Up Bank token in the OS keyring")
    commands.add_parser("ping", help="Ping Up Bank. Useful to test your token is correct")

    list_parser = commands.add_parser("list", help="List accounts, transactions or webhooks")
    list_kinds = list_parser.add_subparsers(dest="kind", required=True, metavar="KIND")
    accounts = list_kinds.add_parser("accounts", help="List accounts")
    accounts.add_argument("--page-size", type=_positive_int, default=None)
    transactions = list_kinds.add_parser("transactions", help="List transactions")
    transactions.add_argument("--page-size", type=_positive_int, default=None)
    transactions.add_argument(
        "--since", type=_timestamp, default=None, help="Only transactions at or after this time"
    )
    transactions.add_argument(
        "--until", type=_timestamp, default=None, help="Only transactions before this time"
    )
    list_kinds.add_parser("webhooks", help="List webhooks")

    get_parser = commands.add_parser("get", help="Get an account or transaction by ID")
    get_kinds = get_parser.add_subparsers(dest="kind", required=True, metavar="KIND")
    get_kinds.add_parser("account", help="Get account by its ID").add_argument("id")
    get_kinds.add_parser("transaction", help="Get transaction by its ID").add_argument("id")

    add_parser = commands.add_parser("add", help="Register resources")
    add_kinds = add_parser.add_subparsers(dest="kind", required=True, metavar="KIND")
    add_webhook = add_kinds.add_parser("webhook", help="Register a webhook at URL")
    add_webhook.add_argument("url", metavar="URL")
    add_webhook.add_argument(
        "-d", "--description", default=None, help="Webhook description (optional)"
    )

    ping_webhook = commands.add_parser("ping-webhook", help="Send a PING event to a webhook")
    ping_webhook.add_argument("id")
    return parser


def _init() -> int:
    print("Enter your Up Bank token below and it will be stored in your keyring.")
    token = getpass.getpass("Up Bank token: ")
    try:
        store_token(token)
    except ConfigError as exc:
        logging.error("%s", exc)
        return 1
    print("Token stored.")
    return 0


def run_cli(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    _configure_logging(args.log_level or ("INFO" if args.verbose else "WARNING"))

    if args.command == "init":
        return _init()

    overrides = _collect_overrides(args.set or ())
    try:
        config = load_client_config(
            env_file=args.env_file,
            overrides=overrides,
            verbose=True if args.verbose else None,
        )
    except ConfigError as exc:
        logging.error("Invalid configuration: %s", exc)
        return 1

    client = create_client(config=config)
    name = " ".join(part for part in (args.command, getattr(args, "kind", None)) if part)
    handler = _HANDLERS[name]
    try:
        return handler(client, args)
    except (UpBankError, ValueError) as exc:
        logging.error("upbank %s: %s", name, exc)
        return 1


def main(argv: Optional[List[str]] = None) -> None:
    sys.exit(run_cli(argv))
