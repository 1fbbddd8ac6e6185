"""
Collection lifecycle: create (schema + index), delete, list.
"""

from __future__ import annotations

import logging

from vector_datastore.core.errors import (
    CollectionCreationError,
    CollectionDeletionError,
    CollectionListError,
    CollectionNotFoundError,
    IndexConstructionError,
)
from vector_datastore.core.protocols import VectorBackend
from vector_datastore.datastore.schema import (
    DEFAULT_SHARD_NUMBER,
    define_index,
    define_schema,
)

logger = logging.getLogger(__name__)


class IndexManager:
    """Builds the ANN index over the embedding field of a collection."""

    def __init__(self, backend: VectorBackend):
        self._backend = backend

    def build(self, collection_name: str, timeout: float | None = None) -> None:
        index = define_index()
        try:
            self._backend.create_index(collection_name, index, timeout=timeout)
        except Exception as e:
            raise IndexConstructionError(
                f"failed to create {index.index_type} index on {index.field_name!r}: {e}",
                collection=collection_name,
            ) from e
        logger.debug(
            f"Built {index.index_type}/{index.metric_type} index {index.params} "
            f"on {collection_name}.{index.field_name}"
        )


class CollectionManager:
    """
    Provisions and destroys collections.

    Creation is two backend calls (schema, then index). If the index step
    fails the collection stays schema-defined but unindexed; callers must
    delete and retry.
    """

    def __init__(self, backend: VectorBackend):
        self._backend = backend
        self._indexes = IndexManager(backend)

    def create(self, collection_name: str, timeout: float | None = None) -> None:
        schema = define_schema(collection_name)
        try:
            self._backend.create_collection(
                schema, shards_num=DEFAULT_SHARD_NUMBER, timeout=timeout
            )
        except Exception as e:
            raise CollectionCreationError(
                f"failed to create collection: {e}", collection=collection_name
            ) from e

        self._indexes.build(collection_name, timeout=timeout)
        logger.info(f"Created collection {collection_name}")

    def delete(self, collection_name: str, timeout: float | None = None) -> None:
        """Drop a collection and every document in it. Irreversible."""
        try:
            exists = self._backend.has_collection(collection_name, timeout=timeout)
        except Exception as e:
            raise CollectionDeletionError(
                f"failed to look up collection: {e}", collection=collection_name
            ) from e

        if not exists:
            raise CollectionNotFoundError(
                "collection does not exist", collection=collection_name
            )

        try:
            self._backend.drop_collection(collection_name, timeout=timeout)
        except Exception as e:
            raise CollectionDeletionError(
                f"failed to drop collection: {e}", collection=collection_name
            ) from e
        logger.info(f"Dropped collection {collection_name}")

    def list(self, timeout: float | None = None) -> list[str]:
        """Names of existing collections, in no particular order."""
        try:
            return list(self._backend.list_collections(timeout=timeout))
        except Exception as e:
            raise CollectionListError(f"failed to list collections: {e}") from e
