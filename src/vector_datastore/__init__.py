"""
vector-datastore - document collections with dense embeddings on Milvus.

USAGE:
------
from vector_datastore import Document, get_repository

repo = get_repository()
repo.create_collection("articles")
repo.upsert_documents("articles", [Document(id="1", title="...", content="...", category="...")])
repo.search("articles", "what is a vector index?")
"""

from vector_datastore.core.errors import (
    DatastoreError,
    CollectionCreationError,
    IndexConstructionError,
    CollectionNotFoundError,
    CollectionDeletionError,
    CollectionListError,
    EncodingError,
    UpsertError,
    CollectionLoadError,
    CollectionNotFoundOnLoadError,
    SearchExecutionError,
    CollectionReleaseError,
    DimensionMismatchError,
)
from vector_datastore.datastore.document import Document
from vector_datastore.datastore.repository import DatastoreRepository, get_repository

__all__ = [
    "Document",
    "DatastoreRepository",
    "get_repository",
    # Errors
    "DatastoreError",
    "CollectionCreationError",
    "IndexConstructionError",
    "CollectionNotFoundError",
    "CollectionDeletionError",
    "CollectionListError",
    "EncodingError",
    "UpsertError",
    "CollectionLoadError",
    "CollectionNotFoundOnLoadError",
    "SearchExecutionError",
    "CollectionReleaseError",
    "DimensionMismatchError",
]
