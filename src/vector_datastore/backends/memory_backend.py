"""
In-memory vector backend (testing/development).

Implements the same interface as MilvusBackend but doesn't require a server.
It mirrors the engine's observable rules closely enough for the datastore
layer to be tested end to end:

- VARCHAR values longer than ``max_length`` are rejected, never truncated
- vectors must match the field dimension
- a collection needs an index before it can be loaded
- a collection must be loaded before it can be searched
- upsert replaces rows by primary key

Search is an exact cosine scan; there is no ANN structure here.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from typing import Any, Sequence

import numpy as np

from vector_datastore.core.protocols import (
    Columns,
    CollectionSpec,
    FieldType,
    IndexSpec,
    SearchRequest,
)

logger = logging.getLogger(__name__)

SUPPORTED_METRICS = {"COSINE", "IP", "L2"}
SUPPORTED_INDEX_TYPES = {"FLAT", "IVF_FLAT", "IVF_SQ8", "IVF_PQ", "HNSW"}


class InMemoryBackendError(Exception):
    """Raised for anything the real engine would reject."""


@dataclass
class _Collection:
    spec: CollectionSpec
    index: IndexSpec | None = None
    loaded: bool = False
    rows: dict[str, dict[str, Any]] = field(default_factory=dict)


class InMemoryBackend:
    """
    Dict-backed vector backend.

    Thread-safe: all state lives behind one re-entrant lock, so a single
    instance can be shared the way a real client handle is.
    """

    def __init__(self) -> None:
        self._collections: dict[str, _Collection] = {}
        self._lock = threading.RLock()

    # -- helpers -----------------------------------------------------------

    def _get(self, collection_name: str) -> _Collection:
        coll = self._collections.get(collection_name)
        if coll is None:
            raise InMemoryBackendError(f"collection not found: {collection_name}")
        return coll

    # -- collection lifecycle ----------------------------------------------

    def create_collection(
        self, spec: CollectionSpec, shards_num: int, timeout: float | None = None
    ) -> None:
        with self._lock:
            if spec.name in self._collections:
                raise InMemoryBackendError(f"collection already exists: {spec.name}")
            if shards_num < 1:
                raise InMemoryBackendError(f"invalid shards_num: {shards_num}")
            primaries = [f for f in spec.fields if f.is_primary]
            if len(primaries) != 1:
                raise InMemoryBackendError("schema must have exactly one primary key")
            self._collections[spec.name] = _Collection(spec=spec)
        logger.debug(f"Created in-memory collection {spec.name}")

    def create_index(
        self, collection_name: str, index: IndexSpec, timeout: float | None = None
    ) -> None:
        with self._lock:
            coll = self._get(collection_name)
            target = coll.spec.get_field(index.field_name)
            if target is None:
                raise InMemoryBackendError(f"field not found: {index.field_name}")
            if target.dtype is not FieldType.FLOAT_VECTOR:
                raise InMemoryBackendError(f"field is not a vector: {index.field_name}")
            if index.metric_type not in SUPPORTED_METRICS:
                raise InMemoryBackendError(f"unsupported metric: {index.metric_type}")
            if index.index_type not in SUPPORTED_INDEX_TYPES:
                raise InMemoryBackendError(f"unsupported index type: {index.index_type}")
            nlist = index.params.get("nlist")
            if nlist is not None and not (1 <= int(nlist) <= 65536):
                raise InMemoryBackendError(f"nlist out of range: {nlist}")
            coll.index = index

    def has_collection(self, collection_name: str, timeout: float | None = None) -> bool:
        with self._lock:
            return collection_name in self._collections

    def drop_collection(self, collection_name: str, timeout: float | None = None) -> None:
        with self._lock:
            self._get(collection_name)
            del self._collections[collection_name]

    def list_collections(self, timeout: float | None = None) -> list[str]:
        with self._lock:
            return list(self._collections)

    # -- writes ------------------------------------------------------------

    def _validate_columns(self, spec: CollectionSpec, columns: Columns) -> int:
        missing = [name for name in spec.field_names if name not in columns]
        if missing:
            raise InMemoryBackendError(f"missing columns: {missing}")

        lengths = {len(columns[name]) for name in spec.field_names}
        if len(lengths) != 1:
            raise InMemoryBackendError("column lengths differ")
        n_rows = lengths.pop()

        for f in spec.fields:
            for value in columns[f.name]:
                if f.dtype is FieldType.VARCHAR:
                    if not isinstance(value, str):
                        raise InMemoryBackendError(f"{f.name}: expected string")
                    if f.max_length is not None and len(value) > f.max_length:
                        raise InMemoryBackendError(
                            f"{f.name}: length {len(value)} exceeds max_length {f.max_length}"
                        )
                elif f.dtype is FieldType.FLOAT_VECTOR:
                    if np.asarray(value).shape != (f.dim,):
                        raise InMemoryBackendError(
                            f"{f.name}: expected dim {f.dim}, got {np.asarray(value).shape}"
                        )
        return n_rows

    def upsert(
        self, collection_name: str, columns: Columns, timeout: float | None = None
    ) -> int:
        with self._lock:
            coll = self._get(collection_name)
            spec = coll.spec
            n_rows = self._validate_columns(spec, columns)

            primary = next(f.name for f in spec.fields if f.is_primary)
            # All rows validated above, so the write below cannot half-apply.
            for i in range(n_rows):
                row = {}
                for f in spec.fields:
                    value = columns[f.name][i]
                    if f.dtype is FieldType.FLOAT_VECTOR:
                        value = np.asarray(value, dtype=np.float32).copy()
                    row[f.name] = value
                coll.rows[row[primary]] = row
            return n_rows

    # -- reads -------------------------------------------------------------

    def load_collection(self, collection_name: str, timeout: float | None = None) -> None:
        with self._lock:
            coll = self._get(collection_name)
            if coll.index is None:
                raise InMemoryBackendError(f"index not found for collection {collection_name}")
            coll.loaded = True

    def release_collection(self, collection_name: str, timeout: float | None = None) -> None:
        with self._lock:
            self._get(collection_name).loaded = False

    def is_loaded(self, collection_name: str) -> bool:
        with self._lock:
            return self._get(collection_name).loaded

    def count(self, collection_name: str) -> int:
        with self._lock:
            return len(self._get(collection_name).rows)

    def get(self, collection_name: str, primary_key: str) -> dict[str, Any] | None:
        """Return a copy of one stored row (vectors included), or None."""
        with self._lock:
            row = self._get(collection_name).rows.get(primary_key)
            return dict(row) if row is not None else None

    @staticmethod
    def _similarity(metric: str, query: np.ndarray, candidates: np.ndarray) -> np.ndarray:
        if metric == "COSINE":
            norms = np.linalg.norm(candidates, axis=1) * np.linalg.norm(query)
            norms[norms == 0] = 1.0
            return candidates @ query / norms
        if metric == "IP":
            return candidates @ query
        # L2: smaller distance is better, negate so sorting stays descending
        return -np.linalg.norm(candidates - query, axis=1)

    def search(
        self,
        collection_name: str,
        vectors: Sequence[np.ndarray],
        request: SearchRequest,
        timeout: float | None = None,
    ) -> list[dict[str, list[Any]]]:
        with self._lock:
            coll = self._get(collection_name)
            if not coll.loaded:
                raise InMemoryBackendError(f"collection not loaded: {collection_name}")
            if coll.index is None or coll.index.field_name != request.anns_field:
                raise InMemoryBackendError(f"no index on field {request.anns_field}")
            if request.metric_type != coll.index.metric_type:
                raise InMemoryBackendError(
                    f"metric mismatch: index {coll.index.metric_type}, "
                    f"search {request.metric_type}"
                )
            unknown = [f for f in request.output_fields if coll.spec.get_field(f) is None]
            if unknown:
                raise InMemoryBackendError(f"unknown output fields: {unknown}")

            rows = list(coll.rows.values())
            results = []
            for vector in vectors:
                query = np.asarray(vector, dtype=np.float32)
                columns: dict[str, list[Any]] = {name: [] for name in request.output_fields}
                if rows:
                    matrix = np.stack([row[request.anns_field] for row in rows])
                    scores = self._similarity(request.metric_type, query, matrix)
                    order = np.argsort(-scores, kind="stable")
                    window = order[request.offset:request.offset + request.limit]
                    for i in window:
                        for name in request.output_fields:
                            columns[name].append(rows[i][name])
                results.append(columns)
            return results
