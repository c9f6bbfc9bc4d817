"""Command-line front end emitting launcher-style JSON items."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import Any, Optional, Sequence

from fuzzydrive.config import AppContext
from fuzzydrive.errors import FuzzyDriveError
from fuzzydrive.models import UNKNOWN_FOLDER_NAME, MatchResult
from fuzzydrive.service import SearchService

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="fuzzydrive",
        description="Fuzzy file-name search over selected Google Drive folders.",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="log progress to stderr (-vv for debug output)",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    init = sub.add_parser("init", help="authorize with Google Drive and run the first sync")
    init.add_argument("--client-id", help="OAuth client id (saved to config)")
    init.add_argument("--client-secret", help="OAuth client secret (saved to config)")

    sub.add_parser("sync", help="rebuild the local file list from Drive")
    sub.add_parser("check-sync", help="sync only if the last sync is over an hour old")

    search = sub.add_parser("search", help="search file names")
    search.add_argument("query", nargs="?", default="", help="text to look for")

    return parser


def main(argv: Optional[Sequence[str]] = None, *, context: Optional[AppContext] = None) -> int:
    args = build_parser().parse_args(argv)
    _configure_logging(args.verbose)

    try:
        service = SearchService(context or AppContext.from_environment())
        items = _dispatch(service, args)
    except FuzzyDriveError as exc:
        print(f"fuzzydrive: {exc}", file=sys.stderr)
        logger.debug("Fatal error details: %s", exc.details, exc_info=exc)
        return 1

    print(json.dumps({"items": items}, ensure_ascii=False))
    return 0


def _dispatch(service: SearchService, args: argparse.Namespace) -> list[dict[str, Any]]:
    if args.command == "init":
        count = service.initialize(args.client_id, args.client_secret)
        return [_message_item("Initialization complete", f"{count} files indexed")]

    if args.command == "sync":
        result = service.sync()
        return [_message_item("Sync complete", f"{result.file_count} files indexed")]

    if args.command == "check-sync":
        result = service.check_and_sync()
        if result is None:
            return [_message_item("Already up to date", "Last sync was less than an hour ago")]
        return [_message_item("Sync complete", f"{result.file_count} files indexed")]

    results = service.search(args.query)
    folder_names = service.folder_names()
    return [_result_item(r, folder_names) for r in results]


def _result_item(result: MatchResult, folder_names: dict[str, str]) -> dict[str, Any]:
    record = result.file
    folder = UNKNOWN_FOLDER_NAME
    if record.parents:
        folder = folder_names.get(record.parents[0], UNKNOWN_FOLDER_NAME)
    return {
        "uid": record.id,
        "title": record.name,
        "subtitle": folder,
        "arg": record.web_view_link,
        "valid": bool(record.web_view_link),
        "score": result.score,
        "matched_ranges": [list(r) for r in result.matched_ranges],
    }


def _message_item(title: str, subtitle: str) -> dict[str, Any]:
    return {"title": title, "subtitle": subtitle, "valid": False}


def _configure_logging(verbosity: int) -> None:
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity >= 2:
        level = logging.DEBUG
    logging.basicConfig(
        level=level,
        stream=sys.stderr,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
