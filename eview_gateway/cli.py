"""Command-line front end for the Eview SMS gateway."""

from __future__ import annotations

import argparse
import logging
import sys
from typing import Optional

from .catalog import commands_by_category, default_params, get_command
from .db import init_db, make_engine
from .errors import GatewayError, PersistenceFailure
from .history import SqlHistoryStore
from .settings import settings
from .workflow import SubmissionRequest, preview, submit

LOGGER = logging.getLogger(__name__)


def _parse_params(pairs: list[str]) -> dict[str, str]:
    params: dict[str, str] = {}
    for pair in pairs:
        key, sep, value = pair.partition("=")
        if not sep or not key:
            raise argparse.ArgumentTypeError(f"expected key=value, got {pair!r}")
        # values stay text so "00" and "060" reach the device as typed
        params[key.strip()] = value
    return params


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="eview-gateway", description="Compose and log SMS commands for Eview trackers"
    )
    parser.add_argument(
        "--database",
        default=settings.database_url,
        help=f"History database URL (default: {settings.database_url})",
    )
    parser.add_argument("--verbose", action="store_true", help="Enable INFO-level logging")

    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("list", help="List the command catalog")

    show = subparsers.add_parser("show", help="Show one command's parameters")
    show.add_argument("command_id")

    enc = subparsers.add_parser("encode", help="Print the SMS text for a command")
    enc.add_argument("command_id")
    enc.add_argument("params", nargs="*", metavar="KEY=VALUE")

    send = subparsers.add_parser("send", help="Send (simulated) and record a command")
    send.add_argument("command_id")
    send.add_argument("params", nargs="*", metavar="KEY=VALUE")
    send.add_argument("--phone", default="", help="Destination phone number")
    send.add_argument("--device", default=settings.default_device_name, help="Device label")

    hist = subparsers.add_parser("history", help="Show recently sent commands")
    hist.add_argument("--limit", type=int, default=settings.history_limit)

    return parser


def _with_defaults(command_id: str, pairs: list[str]) -> dict[str, object]:
    params: dict[str, object] = dict(default_params(get_command(command_id)))
    params.update(_parse_params(pairs))
    return params


def main(argv: Optional[list[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(level=logging.INFO if args.verbose else logging.WARNING)

    try:
        if args.command == "list":
            for category, cmds in commands_by_category().items():
                print(f"[{category.value}]")
                for c in cmds:
                    print(f"  {c.id:<16} {c.name:<22} {c.structure}")
            return 0

        if args.command == "show":
            c = get_command(args.command_id)
            print(f"{c.name} ({c.category.value}): {c.structure}")
            defaults = default_params(c)
            for p in c.params:
                line = f"  {p.name}={defaults[p.name]!s:<8} {p.kind.value:<7} {p.label}"
                if p.options:
                    line += " [" + ", ".join(f"{o.value}={o.label}" for o in p.options) + "]"
                if p.description:
                    line += f" ({p.description})"
                print(line)
            return 0

        if args.command == "encode":
            res = preview(args.command_id, _with_defaults(args.command_id, args.params))
            if res.raw_message:
                print(res.raw_message)
                print(f"{res.byte_length} bytes")
            for err in res.errors:
                print(f"{err.field}: {err.reason}", file=sys.stderr)
            return 0 if res.accepted else 1

        engine = make_engine(args.database)
        init_db(engine)
        store = SqlHistoryStore(engine)

        if args.command == "send":
            req = SubmissionRequest(
                device_name=args.device,
                phone_number=args.phone,
                command=args.command_id,
                params=_with_defaults(args.command_id, args.params),
            )
            try:
                res = submit(req, store)
            except PersistenceFailure as exc:
                LOGGER.error("History write failed: %s", exc.reason)
                return 2
            if not res.accepted:
                for err in res.errors:
                    print(f"{err.field}: {err.reason}", file=sys.stderr)
                return 1
            print(res.raw_message)
            print(f"logged as #{res.record_id} ({res.status})")
            return 0

        if args.command == "history":
            for r in store.recent(args.limit):
                print(f"#{r.id} {r.timestamp:%Y-%m-%d %H:%M:%S} {r.status:<7} "
                      f"{r.device_name} -> {r.phone_number}: {r.raw_message}")
            return 0
    except argparse.ArgumentTypeError as exc:
        parser.error(str(exc))
    except GatewayError as exc:
        print(f"{exc.field}: {exc.reason}", file=sys.stderr)
        return 1

    LOGGER.error("Unknown command: %s", args.command)
    return 1


if __name__ == "__main__":
    sys.exit(main())
