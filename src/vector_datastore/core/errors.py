"""
Error taxonomy for the datastore.

Every backend or encoder failure is wrapped in one of these classes with a
stage-identifying message. The underlying exception stays reachable through
``__cause__`` (always raise with ``raise ... from exc``).

Callers that only care about "did it work" can catch ``DatastoreError``.
"""

from __future__ import annotations


class DatastoreError(Exception):
    """Base class for all datastore failures."""

    stage: str = "datastore"

    def __init__(self, message: str, *, collection: str | None = None):
        super().__init__(message)
        self.message = message
        self.collection = collection

    def __str__(self) -> str:
        if self.collection:
            return f"[{self.stage}] {self.message} (collection={self.collection!r})"
        return f"[{self.stage}] {self.message}"


# ---------------------------------------------------------------------------
# COLLECTION LIFECYCLE
# ---------------------------------------------------------------------------


class CollectionCreationError(DatastoreError):
    """The backend rejected the collection schema."""

    stage = "create_collection"


class IndexConstructionError(DatastoreError):
    """The backend rejected the index parameters or the vector field is absent."""

    stage = "create_index"


class CollectionNotFoundError(DatastoreError):
    """The backend reports no collection with the given name."""

    stage = "lookup_collection"


class CollectionDeletionError(DatastoreError):
    stage = "drop_collection"


class CollectionListError(DatastoreError):
    stage = "list_collections"


# ---------------------------------------------------------------------------
# WRITE PATH
# ---------------------------------------------------------------------------


class EncodingError(DatastoreError):
    """The encoder failed for a document or a query."""

    stage = "encode"

    def __init__(
        self,
        message: str,
        *,
        collection: str | None = None,
        document_id: str | None = None,
    ):
        super().__init__(message, collection=collection)
        self.document_id = document_id


class UpsertError(DatastoreError):
    """The backend write failed. No per-document status is available."""

    stage = "upsert"


# ---------------------------------------------------------------------------
# READ PATH
# ---------------------------------------------------------------------------


class CollectionLoadError(DatastoreError):
    stage = "load_collection"


class CollectionNotFoundOnLoadError(CollectionLoadError, CollectionNotFoundError):
    """Load failed because the collection does not exist."""

    stage = "load_collection"


class SearchExecutionError(DatastoreError):
    stage = "search"


class CollectionReleaseError(DatastoreError):
    """Release failed after a successful search; the results are discarded."""

    stage = "release_collection"


# ---------------------------------------------------------------------------
# CONFIGURATION DEFECTS
# ---------------------------------------------------------------------------


class DimensionMismatchError(DatastoreError):
    """
    The encoder produced vectors of the wrong size for the schema.

    A wiring problem (wrong model for the collection layout). Not an
    EncodingError, never retried.
    """

    stage = "configuration"

    def __init__(self, expected: int, actual: int):
        super().__init__(
            f"encoder returned {actual}-dimensional vectors, schema expects {expected}"
        )
        self.expected = expected
        self.actual = actual
