"""
Document Writer - encode a batch, transpose it, upsert it in one call.
"""

from __future__ import annotations

import logging
from typing import Sequence

from vector_datastore.core.errors import UpsertError
from vector_datastore.core.protocols import VectorBackend
from vector_datastore.datastore.columns import documents_to_columns
from vector_datastore.datastore.document import Document
from vector_datastore.embeddings.gateway import EncoderGateway

logger = logging.getLogger(__name__)


class DocumentWriter:
    """
    Writes batches of documents with insert-or-replace semantics.

    Every embedding is computed before the backend is contacted, so an
    encoding failure anywhere in the batch leaves the collection untouched.
    Atomicity of the single upsert call is whatever the backend provides.
    """

    def __init__(self, backend: VectorBackend, encoder: EncoderGateway):
        self._backend = backend
        self._encoder = encoder

    def upsert(
        self,
        collection_name: str,
        documents: Sequence[Document],
        timeout: float | None = None,
    ) -> int:
        """
        Upsert documents into a collection.

        Args:
            collection_name: Target collection
            documents: Batch to write; an existing id is replaced entirely
            timeout: Deadline in seconds for the backend call

        Returns:
            Number of documents written (0 for an empty batch)

        Raises:
            EncodingError: a document's content could not be encoded
            UpsertError: the backend rejected the write
        """
        if not documents:
            logger.debug(f"Empty batch for {collection_name}, nothing to upsert")
            return 0

        embeddings = [
            self._encoder.encode(doc.content, document_id=doc.id, collection=collection_name)
            for doc in documents
        ]

        columns = documents_to_columns(documents, embeddings)

        try:
            written = self._backend.upsert(collection_name, columns, timeout=timeout)
        except Exception as e:
            raise UpsertError(
                f"failed to upsert {len(documents)} documents: {e}",
                collection=collection_name,
            ) from e

        logger.info(f"Upserted {len(documents)} documents into {collection_name}")
        return written
