"""
DatastoreRepository - the public facade.

Dependencies are INJECTED, not created internally: one backend handle and
one encoder gateway, both long-lived and shared by every call. The facade
holds no other state, so one instance can serve concurrent callers.

Each operation runs inside a tracing span named ``datastore.<operation>``.
"""

from __future__ import annotations

import logging
from typing import ContextManager, Sequence

from vector_datastore.backends import MilvusBackend, MilvusConfig, get_backend
from vector_datastore.config import DatastoreConfig, get_config
from vector_datastore.core.protocols import SearchRequest, TextEncoder, VectorBackend
from vector_datastore.datastore.collections import CollectionManager
from vector_datastore.datastore.document import Document
from vector_datastore.datastore.schema import EMBEDDING_DIM, define_search_request
from vector_datastore.datastore.search import SearchEngine
from vector_datastore.datastore.writer import DocumentWriter
from vector_datastore.embeddings import EncoderGateway, get_encoder
from vector_datastore.observability.attributes import (
    DATASTORE_COLLECTION_COUNT,
    DATASTORE_DOCUMENT_COUNT,
    DATASTORE_RESULT_COUNT,
)
from vector_datastore.observability.tracer import (
    SpanProtocol,
    TracerProtocol,
    get_tracer,
    operation_span,
)

logger = logging.getLogger(__name__)


class DatastoreRepository:
    """
    Collection management, bulk upsert and similarity search over a
    vector backend.
    """

    def __init__(
        self,
        backend: VectorBackend,
        encoder: EncoderGateway | TextEncoder,
        search_request: SearchRequest | None = None,
        tracer: TracerProtocol | None = None,
        db_system: str = "milvus",
        default_timeout: float | None = None,
    ):
        """
        Initialize with injected dependencies.

        Args:
            backend: Vector database handle
            encoder: EncoderGateway, or a raw TextEncoder to wrap in one
            search_request: Override search parameters (defaults: top 3, nprobe 10)
            tracer: Tracer for operation spans (global tracer if not provided)
            db_system: Value of the db.system span attribute
            default_timeout: Deadline in seconds for calls that pass none
        """
        gateway = encoder if isinstance(encoder, EncoderGateway) else EncoderGateway(encoder)

        self._collections = CollectionManager(backend)
        self._writer = DocumentWriter(backend, gateway)
        self._search = SearchEngine(backend, gateway, search_request or define_search_request())
        self._tracer = tracer
        self._db_system = db_system
        self.default_timeout = default_timeout

    def _deadline(self, timeout: float | None) -> float | None:
        return self.default_timeout if timeout is None else timeout

    def _span(
        self, operation: str, collection_name: str | None = None
    ) -> ContextManager[SpanProtocol]:
        return operation_span(
            self._tracer or get_tracer(),
            operation,
            collection_name,
            db_system=self._db_system,
        )

    # -- collection management ---------------------------------------------

    def create_collection(self, collection_name: str, timeout: float | None = None) -> None:
        with self._span("create_collection", collection_name):
            self._collections.create(collection_name, timeout=self._deadline(timeout))

    def delete_collection(self, collection_name: str, timeout: float | None = None) -> None:
        with self._span("delete_collection", collection_name):
            self._collections.delete(collection_name, timeout=self._deadline(timeout))

    def list(self, timeout: float | None = None) -> list[str]:
        with self._span("list_collections") as span:
            names = self._collections.list(timeout=self._deadline(timeout))
            span.set_attribute(DATASTORE_COLLECTION_COUNT, len(names))
            return names

    # -- documents ---------------------------------------------------------

    def upsert_documents(
        self,
        collection_name: str,
        documents: Sequence[Document],
        timeout: float | None = None,
    ) -> int:
        with self._span("upsert", collection_name) as span:
            span.set_attribute(DATASTORE_DOCUMENT_COUNT, len(documents))
            return self._writer.upsert(
                collection_name, documents, timeout=self._deadline(timeout)
            )

    def search(
        self, collection_name: str, query: str, timeout: float | None = None
    ) -> list[Document]:
        with self._span("search", collection_name) as span:
            documents = self._search.search(
                collection_name, query, timeout=self._deadline(timeout)
            )
            span.set_attribute(DATASTORE_RESULT_COUNT, len(documents))
            return documents


# ---------------------------------------------------------------------------
# FACTORY FUNCTION
# ---------------------------------------------------------------------------


def get_repository(
    backend: VectorBackend | None = None,
    encoder: TextEncoder | None = None,
    config: DatastoreConfig | None = None,
) -> DatastoreRepository:
    """
    Factory function wiring a repository from configuration.

    Args:
        backend: Backend handle (built from config if not provided)
        encoder: Text encoder (built from config if not provided)
        config: Datastore configuration (env-derived if not provided)
    """
    config = config or get_config()

    if backend is None:
        backend = get_backend(
            use_milvus=config.use_milvus,
            config=MilvusConfig(
                uri=config.milvus_uri,
                token=config.milvus_token,
                db_name=config.milvus_db_name,
            ),
        )

    if encoder is None:
        encoder = get_encoder(
            use_mock=config.use_mock_encoder,
            model=config.encoder_model,
            base_url=config.encoder_base_url,
            dimensions=EMBEDDING_DIM,
        )

    return DatastoreRepository(
        backend,
        encoder,
        search_request=define_search_request(ignore_growing=config.search_ignore_growing),
        db_system="milvus" if isinstance(backend, MilvusBackend) else "memory",
        default_timeout=config.timeout,
    )
