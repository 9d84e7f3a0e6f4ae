"""
Command line entry point for kupli.

Operates on the repository discovered from the current directory.
"""

from __future__ import annotations

import argparse
import json
import sys
from importlib.metadata import PackageNotFoundError, version
from typing import Any

from .config import load_config
from .errors import KupliError
from .logging import configure_logging, logger
from .session import ResolutionSession

_VERBOSITY_LEVELS = {1: "INFO", 2: "DEBUG"}


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="kupli",
        description="kupli CLI. Re-resolve fragment links as git history advances.",
    )
    parser.add_argument(
        "--version",
        action="store_true",
        help="Print the installed kupli version and exit.",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Log to stderr (-v info, -vv debug).",
    )
    parser.add_argument(
        "--log-level",
        help="Explicit log level (overrides -v), for example DEBUG or WARNING.",
    )
    subparsers = parser.add_subparsers(dest="command")
    subparsers.add_parser(
        "links",
        help="Show the link sets committed in HEAD and present in the working copy.",
    )
    subparsers.add_parser(
        "log",
        help="Walk first-parent history from HEAD and list each commit's blobs.",
    )
    resolve = subparsers.add_parser(
        "resolve",
        help="Find where each fragment link's blob first changed after its anchor commit.",
    )
    resolve.add_argument(
        "--source",
        choices=["head", "workdir", "all"],
        default="all",
        help="Which link set to resolve (default: all).",
    )
    resolve.add_argument(
        "--diff",
        action="store_true",
        help="Attach diff events for every diverged transition.",
    )
    return parser


def _print_json(payload: Any) -> None:
    print(json.dumps(payload, ensure_ascii=False, indent=2))


def _history(session: ResolutionSession) -> list[dict[str, Any]]:
    entries = []
    for commit_id in session.chain.commits:
        commit = session.repository.read_commit(commit_id)
        entries.append(
            {
                "commit": commit.id,
                "message": commit.message,
                "blobs": [
                    {"path": entry.path, "id": entry.id}
                    for entry in session.repository.iter_tree(commit.tree)
                    if entry.is_blob
                ],
            }
        )
    return entries


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.version:
        try:
            print(version("kupli"))
        except PackageNotFoundError:
            print("kupli (not installed)")
        return 0

    if args.command is None:
        parser.print_help()
        return 0

    # The CLI owns stderr, loguru's default sink included.
    logger.remove()
    config = load_config(log_level=args.log_level or _VERBOSITY_LEVELS.get(min(args.verbose, 2)))
    configure_logging(config.log_level)

    try:
        session = ResolutionSession.discover(config=config)

        if args.command == "links":
            sources = session.load_link_sets()
            _print_json(sources.model_dump(mode="json"))
            return 0

        if args.command == "log":
            _print_json(_history(session))
            return 0

        only = None if args.source == "all" else args.source
        sources, reports = session.resolve_all(with_diffs=args.diff, only=only)
        _print_json(
            {
                "errors": {
                    source: failure.model_dump(mode="json")
                    for source, failure in sources.errors.items()
                },
                "reports": [report.model_dump(mode="json") for report in reports],
            }
        )
        return 0
    except KupliError as exc:
        print(f"kupli: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
