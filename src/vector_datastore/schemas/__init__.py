"""Input/output schemas for document files."""

from vector_datastore.schemas.payloads import (
    DocumentPayload,
    parse_documents,
    load_documents,
    dump_documents,
)

__all__ = [
    "DocumentPayload",
    "parse_documents",
    "load_documents",
    "dump_documents",
]
