"""
Datastore module - collections of documents in a vector backend.

This package provides:
- Document: The document model
- define_schema / define_index / define_search_request: Collection layout
- documents_to_columns / columns_to_documents: Row <-> column transforms

The components (CollectionManager, DocumentWriter, SearchEngine) and the
DatastoreRepository facade live in their own modules and are re-exported
from the top-level package.
"""

from vector_datastore.datastore.document import Document
from vector_datastore.datastore.schema import (
    EMBEDDING_DIM,
    define_schema,
    define_index,
    define_search_request,
)
from vector_datastore.datastore.columns import (
    documents_to_columns,
    columns_to_documents,
)

__all__ = [
    "Document",
    "EMBEDDING_DIM",
    "define_schema",
    "define_index",
    "define_search_request",
    "documents_to_columns",
    "columns_to_documents",
]
