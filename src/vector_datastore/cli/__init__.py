"""
CLI module - command-line interface over DatastoreRepository.

Provides entry points for:
- Creating, deleting and listing collections
- Upserting documents from a JSON file
- Searching a collection
"""

from vector_datastore.cli.commands import (
    main,
    build_parser,
    run_create,
    run_delete,
    run_list,
    run_upsert,
    run_search,
)

__all__ = [
    "main",
    "build_parser",
    "run_create",
    "run_delete",
    "run_list",
    "run_upsert",
    "run_search",
]
