from __future__ import annotations

import argparse
import sys

from .config import get_settings
from .context import AppContext, create_context
from .errors import OrderNotFound
from .events import ORDER_ACTION_SEND_SMS
from .logging_config import setup_logging


def init_db(ctx: AppContext, args: argparse.Namespace) -> int:
    # create_context() already created the tables and default settings
    print(f"Database ready at {ctx.config.database_url}")
    return 0


def send(ctx: AppContext, args: argparse.Namespace) -> int:
    """Run the "Send order SMS to customer" action for one order."""
    try:
        ctx.request_action(args.order_id, ORDER_ACTION_SEND_SMS)
    except OrderNotFound as exc:
        print(exc, file=sys.stderr)
        return 1

    for notice in ctx.notices.pop_all():
        print(f"[{notice['type']}] {notice['notice']}")
    for note in ctx.orders.notes(args.order_id):
        print(f"note: {note}")
    return 0


def notices(ctx: AppContext, args: argparse.Namespace) -> int:
    pending = ctx.notices.pop_all()
    if not pending:
        print("No notices.")
    for notice in pending:
        print(f"[{notice['type']}] {notice['notice']}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="sms-manager")
    commands = parser.add_subparsers(dest="command", required=True)

    commands.add_parser("init-db", help="create tables and default settings").set_defaults(
        func=init_db
    )

    send_parser = commands.add_parser("send", help="send the order SMS for one order")
    send_parser.add_argument("order_id", type=int)
    send_parser.set_defaults(func=send)

    commands.add_parser("notices", help="print and clear pending admin notices").set_defaults(
        func=notices
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    config = get_settings()
    setup_logging(config.log_level)
    ctx = create_context(config)
    return args.func(ctx, args)


if __name__ == "__main__":
    sys.exit(main())
