from __future__ import annotations

import argparse
import logging
import sys
from signal import SIGINT, signal
from typing import TYPE_CHECKING

from dotenv import load_dotenv

from bulkimport import __version__
from bulkimport.app import create_user, import_file, initialize_database
from bulkimport.config import ConfigurationError, configure_logging

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

log = logging.getLogger(__name__)


def _positive_int(value: str) -> int:
    try:
        parsed = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"Invalid number: {value}") from exc
    if parsed < 1:
        raise argparse.ArgumentTypeError(f"Expected a positive number, got {value}")
    return parsed


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Bulk import rows into items, item sets and media")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Log debug messages",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    init_db = subparsers.add_parser("init-db", help="Create or upgrade the database schema")
    init_db.add_argument(
        "--database-uri",
        type=str,
        help="SQLAlchemy URL (defaults to DATABASE_URI or the data directory)",
    )
    init_db.add_argument(
        "--no-seed",
        action="store_true",
        help="Do not register the bundled Dublin Core vocabularies",
    )

    run = subparsers.add_parser("run", help="Import a delimited file using a job file")
    run.add_argument("job", type=str, help="Job file (.toml or .json)")
    run.add_argument("source", type=str, help="Delimited source file (.csv or .tsv)")
    run.add_argument(
        "--batch-size",
        type=_positive_int,
        default=None,
        help="Number of entries per batch (defaults to the job or 20)",
    )
    run.add_argument(
        "--caller-id",
        type=_positive_int,
        default=None,
        help="User id owning the resources when the job owner is 'current'",
    )
    run.add_argument(
        "--separator",
        type=str,
        default=None,
        help="Multi-value separator inside cells (defaults to the job's)",
    )
    run.add_argument(
        "--delimiter",
        type=str,
        default=None,
        help="Field delimiter (defaults to the job's or the file extension's)",
    )

    user = subparsers.add_parser("user", help="User management commands")
    user_sub = user.add_subparsers(dest="user_command", required=True)
    user_create = user_sub.add_parser("create", help="Create a user")
    user_create.add_argument("--email", type=str, required=True, help="Email address")
    user_create.add_argument("--name", type=str, required=True, help="Display name")

    return parser.parse_args(list(argv))


def _dispatch(args: argparse.Namespace) -> None:
    match args.command:
        case "init-db":
            initialize_database(database_uri=args.database_uri, seed=not args.no_seed)
        case "run":
            counters = import_file(
                job_path=args.job,
                source_path=args.source,
                caller_id=args.caller_id,
                entries_by_batch=args.batch_size,
                separator=args.separator,
                delimiter=args.delimiter,
            )
            if counters.errors:
                log.warning("Import finished with %s errors", counters.errors)
        case "user" if args.user_command == "create":
            user_id = create_user(email=args.email, name=args.name)
            log.info("Created user #%s", user_id)
        case _:
            raise ValueError(f"Unsupported command: {args.command}")


def main(argv: Sequence[str] | None = None) -> None:
    """Parse the command line and run one command.

    Exits with 2 on configuration problems and 1 on any other failure.
    """
    load_dotenv()
    args = _parse_args(sys.argv[1:] if argv is None else argv)

    configure_logging(level=logging.DEBUG if args.verbose else logging.INFO)
    signal(SIGINT, sigint_handler)

    try:
        _dispatch(args)
    except (ConfigurationError, ValueError):
        log.exception("Invalid configuration")
        sys.exit(2)
    except Exception:
        log.exception("Fatal error during import")
        sys.exit(1)


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    log.info("Closed by user (Ctrl+C)")
    sys.exit(0)


if __name__ == "__main__":
    main()
