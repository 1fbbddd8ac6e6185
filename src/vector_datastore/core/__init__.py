"""
Core module - shared protocols, types and errors for the entire system.

This module provides the foundational contracts that enable:
- Dependency injection of the backend and encoder handles
- Testing against InMemoryBackend and MockEncoder
- A single error taxonomy for every datastore operation

USAGE:
------
from vector_datastore.core import VectorBackend, TextEncoder

class MyBackend:
    '''Implements VectorBackend protocol.'''
    ...
"""

from vector_datastore.core.protocols import (
    # Protocols
    TextEncoder,
    VectorBackend,
    DocumentRepository,
    # Data classes
    Columns,
    FieldType,
    FieldSpec,
    CollectionSpec,
    IndexSpec,
    SearchRequest,
)
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

__all__ = [
    # Protocols
    "TextEncoder",
    "VectorBackend",
    "DocumentRepository",
    # Data classes
    "Columns",
    "FieldType",
    "FieldSpec",
    "CollectionSpec",
    "IndexSpec",
    "SearchRequest",
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
