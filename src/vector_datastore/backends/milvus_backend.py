"""
Milvus backend (production).

Thin adapter from the VectorBackend protocol onto the pymilvus ORM API.
Backend-neutral specs are translated into FieldSchema / CollectionSchema
objects here and nowhere else. pymilvus exceptions propagate unchanged;
the datastore layer wraps them.

ORM SURFACE USED:
- Collection.upsert takes column-oriented data, one list per schema field
- Collection.search returns per-hit entities, folded back into columns here
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Any, Sequence

import numpy as np
from pymilvus import (
    Collection,
    CollectionSchema,
    DataType,
    FieldSchema,
    connections,
    utility,
)

from vector_datastore.core.protocols import (
    Columns,
    CollectionSpec,
    FieldSpec,
    FieldType,
    IndexSpec,
    SearchRequest,
)

logger = logging.getLogger(__name__)


class MilvusBackendError(Exception):
    """Raised for conditions the adapter detects before calling Milvus."""


# ---------------------------------------------------------------------------
# CONFIGURATION
# ---------------------------------------------------------------------------


@dataclass
class MilvusConfig:
    """Connection settings for a Milvus server."""

    uri: str = "http://localhost:19530"
    token: str | None = None
    db_name: str = "default"
    alias: str = "default"


# ---------------------------------------------------------------------------
# SCHEMA TRANSLATION
# ---------------------------------------------------------------------------


def to_field_schema(spec: FieldSpec) -> FieldSchema:
    """Translate a backend-neutral field into a pymilvus FieldSchema."""
    if spec.dtype is FieldType.VARCHAR:
        kwargs: dict[str, Any] = {"max_length": spec.max_length}
        if spec.is_primary:
            kwargs["is_primary"] = True
            kwargs["auto_id"] = spec.auto_id
        return FieldSchema(name=spec.name, dtype=DataType.VARCHAR, **kwargs)
    if spec.dtype is FieldType.FLOAT_VECTOR:
        return FieldSchema(name=spec.name, dtype=DataType.FLOAT_VECTOR, dim=spec.dim)
    raise MilvusBackendError(f"unsupported field type: {spec.dtype}")


def to_collection_schema(spec: CollectionSpec) -> CollectionSchema:
    return CollectionSchema(
        fields=[to_field_schema(f) for f in spec.fields],
        description=spec.description,
        auto_id=spec.auto_id,
    )


# ---------------------------------------------------------------------------
# BACKEND
# ---------------------------------------------------------------------------


class MilvusBackend:
    """
    VectorBackend over a Milvus connection.

    The connection is registered under ``config.alias`` on first use and
    shared by every call. Registration happens once under a lock; pymilvus
    connections are safe for concurrent use after that.
    """

    def __init__(self, config: MilvusConfig | None = None):
        self.config = config or MilvusConfig()
        self._connected = False
        self._lock = threading.Lock()

    def connect(self) -> None:
        """Register the pymilvus connection (no-op if already registered)."""
        with self._lock:
            if self._connected:
                return
            connections.connect(
                alias=self.config.alias,
                uri=self.config.uri,
                token=self.config.token or "",
                db_name=self.config.db_name,
            )
            self._connected = True
        logger.info(f"Connected to Milvus at {self.config.uri} (db={self.config.db_name})")

    def close(self) -> None:
        """Drop the pymilvus connection."""
        with self._lock:
            if self._connected:
                connections.disconnect(self.config.alias)
                self._connected = False

    def _ensure_connected(self) -> None:
        if not self._connected:
            self.connect()

    def _collection(self, collection_name: str, timeout: float | None = None) -> Collection:
        # Collection() itself issues has_collection/describe_collection RPCs
        self._ensure_connected()
        return Collection(collection_name, using=self.config.alias, timeout=timeout)

    # -- collection lifecycle ----------------------------------------------

    def create_collection(
        self, spec: CollectionSpec, shards_num: int, timeout: float | None = None
    ) -> None:
        self._ensure_connected()
        # Collection() silently returns an existing collection with a matching schema
        if utility.has_collection(spec.name, using=self.config.alias, timeout=timeout):
            raise MilvusBackendError(f"collection already exists: {spec.name}")
        Collection(
            name=spec.name,
            schema=to_collection_schema(spec),
            using=self.config.alias,
            shards_num=shards_num,
            timeout=timeout,
        )

    def create_index(
        self, collection_name: str, index: IndexSpec, timeout: float | None = None
    ) -> None:
        self._collection(collection_name, timeout=timeout).create_index(
            field_name=index.field_name,
            index_params={
                "index_type": index.index_type,
                "metric_type": index.metric_type,
                "params": dict(index.params),
            },
            timeout=timeout,
        )

    def has_collection(self, collection_name: str, timeout: float | None = None) -> bool:
        self._ensure_connected()
        return utility.has_collection(collection_name, using=self.config.alias, timeout=timeout)

    def drop_collection(self, collection_name: str, timeout: float | None = None) -> None:
        self._ensure_connected()
        utility.drop_collection(collection_name, timeout=timeout, using=self.config.alias)

    def list_collections(self, timeout: float | None = None) -> list[str]:
        self._ensure_connected()
        return list(utility.list_collections(timeout=timeout, using=self.config.alias))

    # -- writes ------------------------------------------------------------

    def upsert(
        self, collection_name: str, columns: Columns, timeout: float | None = None
    ) -> int:
        collection = self._collection(collection_name, timeout=timeout)

        data = []
        for schema_field in collection.schema.fields:
            values = list(columns[schema_field.name])
            if schema_field.dtype == DataType.FLOAT_VECTOR:
                values = [np.asarray(v, dtype=np.float32).tolist() for v in values]
            data.append(values)

        result = collection.upsert(data, timeout=timeout)
        return int(result.upsert_count)

    # -- reads -------------------------------------------------------------

    def load_collection(self, collection_name: str, timeout: float | None = None) -> None:
        self._collection(collection_name, timeout=timeout).load(timeout=timeout)

    def release_collection(self, collection_name: str, timeout: float | None = None) -> None:
        self._collection(collection_name, timeout=timeout).release(timeout=timeout)

    def search(
        self,
        collection_name: str,
        vectors: Sequence[np.ndarray],
        request: SearchRequest,
        timeout: float | None = None,
    ) -> list[dict[str, list[Any]]]:
        hits_per_query = self._collection(collection_name, timeout=timeout).search(
            data=[np.asarray(v, dtype=np.float32).tolist() for v in vectors],
            anns_field=request.anns_field,
            param={"metric_type": request.metric_type, "params": dict(request.params)},
            limit=request.limit,
            output_fields=list(request.output_fields),
            timeout=timeout,
            offset=request.offset,
            consistency_level=request.consistency_level,
            ignore_growing=request.ignore_growing,
        )

        results = []
        for hits in hits_per_query:
            columns: dict[str, list[Any]] = {name: [] for name in request.output_fields}
            for hit in hits:
                for name in request.output_fields:
                    columns[name].append(hit.entity.get(name))
            results.append(columns)
        return results
