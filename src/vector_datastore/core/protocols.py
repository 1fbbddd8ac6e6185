"""
Core protocols defining contracts for the entire system.

All infrastructure components implement these protocols,
enabling dependency injection and easy testing.

PATTERN:
- Protocol defines the contract
- Production implementation (MilvusBackend, OpenAIEncoder)
- Test double (InMemoryBackend, MockEncoder)
- Factory functions for instantiation

The backend types below (FieldSpec, CollectionSpec, IndexSpec, SearchRequest)
are backend-neutral. MilvusBackend translates them into pymilvus
objects; InMemoryBackend interprets them directly.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any, Mapping, Protocol, Sequence, runtime_checkable

import numpy as np

if TYPE_CHECKING:
    from vector_datastore.datastore.document import Document


# Columnar payload: field name -> values, all lists aligned by position.
Columns = Mapping[str, Sequence[Any]]


# ---------------------------------------------------------------------------
# SCHEMA TYPES
# ---------------------------------------------------------------------------


class FieldType(str, Enum):
    VARCHAR = "VARCHAR"
    FLOAT_VECTOR = "FLOAT_VECTOR"


@dataclass(frozen=True)
class FieldSpec:
    """One typed column of a collection."""
    name: str
    dtype: FieldType
    is_primary: bool = False
    auto_id: bool = False
    max_length: int | None = None  # VARCHAR only
    dim: int | None = None  # FLOAT_VECTOR only


@dataclass(frozen=True)
class CollectionSpec:
    """Ordered, immutable column layout of a collection."""
    name: str
    fields: tuple[FieldSpec, ...]
    description: str = ""
    auto_id: bool = False

    @property
    def field_names(self) -> list[str]:
        return [f.name for f in self.fields]

    def get_field(self, name: str) -> FieldSpec | None:
        for f in self.fields:
            if f.name == name:
                return f
        return None


@dataclass(frozen=True)
class IndexSpec:
    """Approximate nearest-neighbor index over one vector field."""
    field_name: str
    index_type: str
    metric_type: str
    params: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class SearchRequest:
    """Everything a backend needs to run a similarity search, minus vectors."""
    anns_field: str
    metric_type: str
    limit: int
    offset: int
    output_fields: tuple[str, ...]
    params: dict[str, Any] = field(default_factory=dict)
    consistency_level: str = "Strong"
    ignore_growing: bool = False


# ---------------------------------------------------------------------------
# TEXT ENCODER PROTOCOL
# ---------------------------------------------------------------------------


@runtime_checkable
class TextEncoder(Protocol):
    """
    Contract for text-to-vector encoding.

    Implementations:
    - OpenAIEncoder (production, any OpenAI-compatible endpoint)
    - MockEncoder (testing)
    """

    @property
    def dimensions(self) -> int:
        """Length of every vector this encoder returns."""
        ...

    def encode(self, text: str) -> np.ndarray:
        """Encode text. Raises on failure, never returns a placeholder."""
        ...


# ---------------------------------------------------------------------------
# VECTOR BACKEND PROTOCOL
# ---------------------------------------------------------------------------


@runtime_checkable
class VectorBackend(Protocol):
    """
    Contract for the vector database engine.

    Every method accepts ``timeout`` (seconds, None = no deadline) and raises
    the backend's own exception type on failure. The datastore layer wraps
    those exceptions; backends never raise DatastoreError themselves.

    Implementations:
    - MilvusBackend (production)
    - InMemoryBackend (testing/development)
    """

    def create_collection(
        self, spec: CollectionSpec, shards_num: int, timeout: float | None = None
    ) -> None:
        ...

    def create_index(
        self, collection_name: str, index: IndexSpec, timeout: float | None = None
    ) -> None:
        ...

    def has_collection(self, collection_name: str, timeout: float | None = None) -> bool:
        ...

    def drop_collection(self, collection_name: str, timeout: float | None = None) -> None:
        ...

    def list_collections(self, timeout: float | None = None) -> list[str]:
        ...

    def upsert(
        self, collection_name: str, columns: Columns, timeout: float | None = None
    ) -> int:
        """Insert-or-replace by primary key. Returns the number of rows written."""
        ...

    def load_collection(self, collection_name: str, timeout: float | None = None) -> None:
        ...

    def release_collection(self, collection_name: str, timeout: float | None = None) -> None:
        ...

    def search(
        self,
        collection_name: str,
        vectors: Sequence[np.ndarray],
        request: SearchRequest,
        timeout: float | None = None,
    ) -> list[dict[str, list[Any]]]:
        """One column mapping per query vector, rows ordered by similarity."""
        ...


# ---------------------------------------------------------------------------
# REPOSITORY PROTOCOL
# ---------------------------------------------------------------------------


@runtime_checkable
class DocumentRepository(Protocol):
    """
    Public contract exposed to callers.

    Implementations:
    - datastore.repository.DatastoreRepository
    """

    def create_collection(self, collection_name: str, timeout: float | None = None) -> None:
        ...

    def delete_collection(self, collection_name: str, timeout: float | None = None) -> None:
        ...

    def list(self, timeout: float | None = None) -> list[str]:
        ...

    def upsert_documents(
        self,
        collection_name: str,
        documents: Sequence[Document],
        timeout: float | None = None,
    ) -> int:
        ...

    def search(
        self, collection_name: str, query: str, timeout: float | None = None
    ) -> list[Document]:
        ...
