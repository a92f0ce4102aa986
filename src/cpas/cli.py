from __future__ import annotations

import argparse
import dataclasses
import json
import logging
from pathlib import Path
from typing import Any, List, Optional

from cpas.client import CpasClient
from cpas.config.loader import load_config, resolve_connection, resolve_dispatch_settings
from cpas.dispatch.outcome import CallOutcome
from cpas.utils.logging import parse_level, setup_logging


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="cpas", description="CPAS administrative service client")
    subparsers = parser.add_subparsers(dest="command", required=True)

    info_parser = subparsers.add_parser("info", help="Fetch identity and verification info for a player")
    info_parser.add_argument("config", help="Path to config.yaml")
    info_parser.add_argument("game_id", help="Player game ID")
    info_parser.add_argument("--ip", default="", help="Player IP address.")
    info_parser.add_argument("--verbose", action="store_true", help="Request the verbose info variant.")

    ban_parser = subparsers.add_parser("ban", help="Ban a player")
    ban_parser.add_argument("config", help="Path to config.yaml")
    ban_parser.add_argument("game_id", help="Player game ID")
    ban_parser.add_argument("handle", help="Player in-game name")
    ban_parser.add_argument("banner_id", help="Game ID of the admin issuing the ban")
    ban_parser.add_argument(
        "--admin",
        dest="admin_ids",
        action="append",
        default=[],
        help="Game ID of an online admin. Repeat for several admins.",
    )
    ban_parser.add_argument("--minutes", type=int, default=0, help="Ban length in minutes (default: 0).")
    ban_parser.add_argument("--reason", default="", help="Ban reason.")

    ban_info_parser = subparsers.add_parser("ban-info", help="Fetch the current ban state of a player")
    ban_info_parser.add_argument("config", help="Path to config.yaml")
    ban_info_parser.add_argument("game_id", help="Player game ID")

    history_parser = subparsers.add_parser("ban-history", help="Fetch past bans of a player")
    history_parser.add_argument("config", help="Path to config.yaml")
    history_parser.add_argument("game_id", help="Player game ID")
    history_parser.add_argument("--count", type=int, default=10, help="Number of bans to fetch (default: 10).")

    return parser


def main(argv: Optional[List[str]] = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        outcome = _run_command(args)
    except Exception as err:
        raise SystemExit(f"cpas {args.command} failed: {err}") from None

    if not outcome.ok:
        raise SystemExit(f"cpas {args.command} failed: {outcome.error_message}")
    print(render_result(outcome.value))


def render_result(value: Any) -> str:
    return json.dumps(dataclasses.asdict(value), indent=2, default=str, ensure_ascii=False)


def _run_command(args: argparse.Namespace) -> CallOutcome:
    cfg, _ = load_config(args.config)
    logging_cfg = cfg.get("logging", {})
    logs_dir = logging_cfg.get("dir") or ""
    setup_logging(Path(logs_dir) if logs_dir else None, parse_level(logging_cfg.get("level"), logging.WARNING))

    with CpasClient(resolve_connection(cfg), settings=resolve_dispatch_settings(cfg)) as client:
        if args.command == "info":
            future = client.fetch_info(args.game_id, args.ip, args.verbose)
        elif args.command == "ban":
            future = client.ban_user(
                args.game_id,
                args.handle,
                args.banner_id,
                args.admin_ids,
                minutes=args.minutes,
                reason=args.reason,
            )
        elif args.command == "ban-info":
            future = client.fetch_ban_info(args.game_id)
        else:
            future = client.fetch_ban_history(args.game_id, args.count)
        return future.result()
