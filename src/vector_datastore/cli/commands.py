"""
CLI commands - entry points for datastore operations.

Each command follows a consistent pattern:
1. Load environment (.env)
2. Parse arguments
3. Wire a repository from configuration
4. Run one repository operation
5. Print results and return an exit code

Exit codes: 0 success, 1 datastore failure, 2 unreadable input file.
"""

from __future__ import annotations

import argparse
import logging
import sys

from dotenv import load_dotenv
from pydantic import ValidationError

from vector_datastore.config import get_config
from vector_datastore.core.errors import DatastoreError
from vector_datastore.datastore.repository import DatastoreRepository, get_repository
from vector_datastore.observability import init_tracing, shutdown_tracing
from vector_datastore.schemas.payloads import dump_documents, load_documents

logger = logging.getLogger(__name__)


def _load_env() -> None:
    """Load environment variables from .env file."""
    load_dotenv()


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


# ---------------------------------------------------------------------------
# COMMANDS
# ---------------------------------------------------------------------------


def run_create(repo: DatastoreRepository, args: argparse.Namespace) -> int:
    repo.create_collection(args.collection, timeout=args.timeout)
    print(f"Created collection: {args.collection}")
    return 0


def run_delete(repo: DatastoreRepository, args: argparse.Namespace) -> int:
    repo.delete_collection(args.collection, timeout=args.timeout)
    print(f"Deleted collection: {args.collection}")
    return 0


def run_list(repo: DatastoreRepository, args: argparse.Namespace) -> int:
    names = repo.list(timeout=args.timeout)
    for name in sorted(names):
        print(name)
    if not names:
        print("(no collections)", file=sys.stderr)
    return 0


def run_upsert(repo: DatastoreRepository, args: argparse.Namespace) -> int:
    try:
        documents = load_documents(args.file)
    except (OSError, ValidationError) as e:
        print(f"Error: cannot read {args.file}: {e}", file=sys.stderr)
        return 2

    written = repo.upsert_documents(args.collection, documents, timeout=args.timeout)
    print(f"Upserted {written} documents into {args.collection}")
    return 0


def run_search(repo: DatastoreRepository, args: argparse.Namespace) -> int:
    documents = repo.search(args.collection, args.query, timeout=args.timeout)
    print(dump_documents(documents))
    return 0


COMMANDS = {
    "create": run_create,
    "delete": run_delete,
    "list": run_list,
    "upsert": run_upsert,
    "search": run_search,
}


# ---------------------------------------------------------------------------
# ENTRY POINT
# ---------------------------------------------------------------------------


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="vector-datastore",
        description="Manage and search document collections in a vector database",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  vector-datastore create articles
  vector-datastore upsert articles docs.json
  vector-datastore search articles "how do vector indexes work?"
  vector-datastore list
  vector-datastore delete articles

Set DATASTORE_BACKEND=milvus to talk to a Milvus server; the default
in-memory backend only lives for a single command.
        """,
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    parser.add_argument(
        "--timeout",
        type=float,
        default=None,
        help="Deadline in seconds for each backend call (default: DATASTORE_TIMEOUT)",
    )

    sub = parser.add_subparsers(dest="command", required=True)

    create = sub.add_parser("create", help="Create a collection and its index")
    create.add_argument("collection")

    delete = sub.add_parser("delete", help="Drop a collection and all its documents")
    delete.add_argument("collection")

    sub.add_parser("list", help="List collection names")

    upsert = sub.add_parser("upsert", help="Upsert documents from a JSON array file")
    upsert.add_argument("collection")
    upsert.add_argument("file", help="JSON array of {id, title, content, category}")

    search = sub.add_parser("search", help="Return the 3 most similar documents")
    search.add_argument("collection")
    search.add_argument("query")

    return parser


def main(argv: list[str] | None = None) -> int:
    """
    Main CLI entry point with subcommands.

    Usage:
        vector-datastore create NAME
        vector-datastore delete NAME
        vector-datastore list
        vector-datastore upsert NAME FILE
        vector-datastore search NAME QUERY
    """
    _load_env()

    args = build_parser().parse_args(argv)
    _configure_logging(args.verbose)

    config = get_config()
    if args.timeout is None:
        args.timeout = config.timeout

    init_tracing()
    try:
        repo = get_repository(config=config)
        return COMMANDS[args.command](repo, args)
    except DatastoreError as e:
        logger.debug("Command failed", exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        return 1
    finally:
        shutdown_tracing()


if __name__ == "__main__":
    sys.exit(main())
