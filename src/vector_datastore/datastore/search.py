"""
Search Engine - encode, load, search, decode, release.

The load/release pair is a scoped acquisition (``loaded_collection``): the
collection is released on every exit path, including a failed search.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Iterator

from vector_datastore.core.errors import (
    CollectionLoadError,
    CollectionNotFoundOnLoadError,
    CollectionReleaseError,
    SearchExecutionError,
)
from vector_datastore.core.protocols import SearchRequest, VectorBackend
from vector_datastore.datastore.columns import columns_to_documents
from vector_datastore.datastore.document import Document
from vector_datastore.datastore.schema import define_search_request
from vector_datastore.embeddings.gateway import EncoderGateway

logger = logging.getLogger(__name__)


@contextmanager
def loaded_collection(
    backend: VectorBackend,
    collection_name: str,
    timeout: float | None = None,
) -> Iterator[None]:
    """
    Hold a collection in query-serving state for the duration of the block.

    Raises:
        CollectionNotFoundOnLoadError: the collection does not exist
        CollectionLoadError: the backend could not load it
        CollectionReleaseError: release failed after the block succeeded
    """
    try:
        exists = backend.has_collection(collection_name, timeout=timeout)
    except Exception as e:
        raise CollectionLoadError(
            f"failed to look up collection: {e}", collection=collection_name
        ) from e
    if not exists:
        raise CollectionNotFoundOnLoadError(
            "collection does not exist", collection=collection_name
        )

    try:
        backend.load_collection(collection_name, timeout=timeout)
    except Exception as e:
        raise CollectionLoadError(
            f"failed to load collection: {e}", collection=collection_name
        ) from e

    try:
        yield
    except BaseException:
        # The block's error wins; a release failure here is only logged.
        try:
            backend.release_collection(collection_name, timeout=timeout)
        except Exception as release_error:
            logger.warning(
                f"Failed to release {collection_name} after search error: {release_error}"
            )
        raise

    try:
        backend.release_collection(collection_name, timeout=timeout)
    except Exception as e:
        raise CollectionReleaseError(
            f"failed to release collection: {e}", collection=collection_name
        ) from e


class SearchEngine:
    """Similarity search returning at most ``request.limit`` documents."""

    def __init__(
        self,
        backend: VectorBackend,
        encoder: EncoderGateway,
        request: SearchRequest | None = None,
    ):
        self._backend = backend
        self._encoder = encoder
        self.request = request or define_search_request()

    def search(
        self,
        collection_name: str,
        query: str,
        timeout: float | None = None,
    ) -> list[Document]:
        """
        Return documents ordered by descending similarity to ``query``.

        Result documents carry title/content/category only; ``id`` is "".

        Raises:
            EncodingError: the query could not be encoded
            CollectionNotFoundOnLoadError: the collection does not exist
            CollectionLoadError: the collection could not be loaded
            SearchExecutionError: the backend search call failed
            CollectionReleaseError: release failed after a successful search
        """
        vector = self._encoder.encode(query, collection=collection_name)

        with loaded_collection(self._backend, collection_name, timeout=timeout):
            try:
                result_sets = self._backend.search(
                    collection_name, [vector], self.request, timeout=timeout
                )
            except Exception as e:
                raise SearchExecutionError(
                    f"failed to search collection: {e}", collection=collection_name
                ) from e

            if not result_sets:
                raise SearchExecutionError(
                    "backend returned no result set for the query",
                    collection=collection_name,
                )
            documents = columns_to_documents(result_sets[0])

        logger.debug(f"Search on {collection_name} returned {len(documents)} documents")
        return documents[: self.request.limit]
