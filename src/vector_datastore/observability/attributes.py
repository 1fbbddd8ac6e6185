"""
Semantic Conventions for Span Attributes

Attribute keys follow the OpenTelemetry database conventions where one
exists, plus a custom ``datastore`` namespace.

Reference: https://opentelemetry.io/docs/specs/semconv/database/
"""

from __future__ import annotations

from typing import Any

# ---------------------------------------------------------------------------
# DB NAMESPACE (OTel standard)
# ---------------------------------------------------------------------------

DB_SYSTEM = "db.system"  # "milvus", "memory"
DB_OPERATION = "db.operation.name"  # "search", "upsert", ...
DB_COLLECTION_NAME = "db.collection.name"


# ---------------------------------------------------------------------------
# DATASTORE NAMESPACE (custom)
# ---------------------------------------------------------------------------

DATASTORE_DOCUMENT_COUNT = "datastore.document_count"  # upsert batch size
DATASTORE_RESULT_COUNT = "datastore.result_count"  # documents returned by search
DATASTORE_COLLECTION_COUNT = "datastore.collection_count"  # list() size
DATASTORE_ERROR_STAGE = "datastore.error.stage"  # DatastoreError.stage


# ---------------------------------------------------------------------------
# HELPERS
# ---------------------------------------------------------------------------


def operation_attributes(
    operation: str,
    collection_name: str | None = None,
    db_system: str = "milvus",
) -> dict[str, Any]:
    """Build the attribute set every datastore span starts with."""
    attrs: dict[str, Any] = {
        DB_SYSTEM: db_system,
        DB_OPERATION: operation,
    }
    if collection_name is not None:
        attrs[DB_COLLECTION_NAME] = collection_name
    return attrs
