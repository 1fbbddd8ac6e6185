"""
Unit Tests for InMemoryBackend

The in-memory double must enforce the same observable rules as the real
engine, otherwise the repository tests built on it prove nothing.
"""

import numpy as np
import pytest

from vector_datastore.backends import InMemoryBackend, InMemoryBackendError, get_backend
from vector_datastore.backends.milvus_backend import MilvusBackend
from vector_datastore.core.protocols import (
    CollectionSpec,
    FieldSpec,
    FieldType,
    IndexSpec,
    SearchRequest,
    VectorBackend,
)

DIM = 3


@pytest.fixture
def spec():
    """A small collection layout with 3-dimensional vectors."""
    return CollectionSpec(
        name="c",
        fields=(
            FieldSpec("id", FieldType.VARCHAR, is_primary=True, max_length=8),
            FieldSpec("title", FieldType.VARCHAR, max_length=8),
            FieldSpec("vec", FieldType.FLOAT_VECTOR, dim=DIM),
        ),
    )


@pytest.fixture
def index():
    return IndexSpec(field_name="vec", index_type="IVF_FLAT", metric_type="COSINE", params={"nlist": 4})


@pytest.fixture
def request_():
    return SearchRequest(
        anns_field="vec",
        metric_type="COSINE",
        limit=2,
        offset=0,
        output_fields=("title",),
    )


@pytest.fixture
def backend(spec, index):
    """A backend with one indexed, loaded collection and three rows."""
    b = InMemoryBackend()
    b.create_collection(spec, shards_num=1)
    b.create_index("c", index)
    b.upsert("c", {
        "id": ["x", "y", "z"],
        "title": ["X", "Y", "Z"],
        "vec": [np.array([1.0, 0, 0]), np.array([0, 1.0, 0]), np.array([0.9, 0.1, 0])],
    })
    b.load_collection("c")
    return b


# ---------------------------------------------------------------------------
# COLLECTION LIFECYCLE
# ---------------------------------------------------------------------------


class TestCollections:
    """Create, index, list, drop."""

    def test_implements_protocol(self):
        assert isinstance(InMemoryBackend(), VectorBackend)

    def test_list_empty(self):
        assert InMemoryBackend().list_collections() == []

    def test_create_and_list(self, spec):
        b = InMemoryBackend()
        b.create_collection(spec, shards_num=1)

        assert b.list_collections() == ["c"]
        assert b.has_collection("c")

    def test_create_duplicate_fails(self, spec):
        b = InMemoryBackend()
        b.create_collection(spec, shards_num=1)

        with pytest.raises(InMemoryBackendError):
            b.create_collection(spec, shards_num=1)

    def test_create_requires_one_primary_key(self):
        spec = CollectionSpec(name="c", fields=(FieldSpec("v", FieldType.FLOAT_VECTOR, dim=2),))
        with pytest.raises(InMemoryBackendError):
            InMemoryBackend().create_collection(spec, shards_num=1)

    def test_index_on_missing_field_fails(self, spec):
        b = InMemoryBackend()
        b.create_collection(spec, shards_num=1)

        with pytest.raises(InMemoryBackendError):
            b.create_index("c", IndexSpec("nope", "IVF_FLAT", "COSINE"))

    def test_index_on_scalar_field_fails(self, spec):
        b = InMemoryBackend()
        b.create_collection(spec, shards_num=1)

        with pytest.raises(InMemoryBackendError):
            b.create_index("c", IndexSpec("title", "IVF_FLAT", "COSINE"))

    def test_index_with_bad_params_fails(self, spec):
        b = InMemoryBackend()
        b.create_collection(spec, shards_num=1)

        with pytest.raises(InMemoryBackendError):
            b.create_index("c", IndexSpec("vec", "IVF_FLAT", "COSINE", {"nlist": 0}))

    def test_drop(self, backend):
        backend.drop_collection("c")
        assert not backend.has_collection("c")

    def test_drop_missing_fails(self):
        with pytest.raises(InMemoryBackendError):
            InMemoryBackend().drop_collection("missing")


# ---------------------------------------------------------------------------
# WRITES
# ---------------------------------------------------------------------------


class TestUpsert:
    """Column validation and primary-key replacement."""

    def test_upsert_returns_row_count(self, backend):
        assert backend.count("c") == 3

    def test_upsert_replaces_by_primary_key(self, backend):
        backend.upsert("c", {"id": ["x"], "title": ["X2"], "vec": [np.array([0, 0, 1.0])]})

        assert backend.count("c") == 3
        assert backend.get("c", "x")["title"] == "X2"

    def test_varchar_over_max_length_rejected(self, backend):
        with pytest.raises(InMemoryBackendError):
            backend.upsert("c", {"id": ["w"], "title": ["123456789"], "vec": [np.ones(DIM)]})
        assert backend.get("c", "w") is None

    def test_wrong_vector_dim_rejected(self, backend):
        with pytest.raises(InMemoryBackendError):
            backend.upsert("c", {"id": ["w"], "title": ["W"], "vec": [np.ones(DIM + 1)]})

    def test_missing_column_rejected(self, backend):
        with pytest.raises(InMemoryBackendError):
            backend.upsert("c", {"id": ["w"], "vec": [np.ones(DIM)]})

    def test_ragged_columns_rejected(self, backend):
        with pytest.raises(InMemoryBackendError):
            backend.upsert("c", {"id": ["w", "v"], "title": ["W"], "vec": [np.ones(DIM)]})

    def test_invalid_batch_writes_nothing(self, backend):
        """One bad row rejects the whole batch."""
        with pytest.raises(InMemoryBackendError):
            backend.upsert("c", {
                "id": ["ok", "bad"],
                "title": ["fine", "way too long"],
                "vec": [np.ones(DIM), np.ones(DIM)],
            })
        assert backend.get("c", "ok") is None

    def test_upsert_into_missing_collection_fails(self):
        with pytest.raises(InMemoryBackendError):
            InMemoryBackend().upsert("missing", {})


# ---------------------------------------------------------------------------
# READS
# ---------------------------------------------------------------------------


class TestSearch:
    """Load state and cosine ranking."""

    def test_ranked_by_cosine_similarity(self, backend, request_):
        results = backend.search("c", [np.array([1.0, 0, 0])], request_)

        assert results == [{"title": ["X", "Z"]}]

    def test_limit_and_offset(self, backend):
        request = SearchRequest(
            anns_field="vec", metric_type="COSINE", limit=5, offset=1, output_fields=("id",)
        )
        results = backend.search("c", [np.array([1.0, 0, 0])], request)

        assert results[0]["id"] == ["z", "y"]

    def test_one_result_set_per_query_vector(self, backend, request_):
        results = backend.search("c", [np.array([1.0, 0, 0]), np.array([0, 1.0, 0])], request_)

        assert len(results) == 2
        assert results[1]["title"][0] == "Y"

    def test_search_requires_load(self, backend, request_):
        backend.release_collection("c")

        with pytest.raises(InMemoryBackendError):
            backend.search("c", [np.ones(DIM)], request_)

    def test_load_requires_index(self, spec):
        b = InMemoryBackend()
        b.create_collection(spec, shards_num=1)

        with pytest.raises(InMemoryBackendError):
            b.load_collection("c")

    def test_load_and_release_toggle_state(self, backend):
        assert backend.is_loaded("c")
        backend.release_collection("c")
        assert not backend.is_loaded("c")

    def test_metric_mismatch_rejected(self, backend):
        request = SearchRequest(
            anns_field="vec", metric_type="L2", limit=1, offset=0, output_fields=("title",)
        )
        with pytest.raises(InMemoryBackendError):
            backend.search("c", [np.ones(DIM)], request)

    def test_unknown_output_field_rejected(self, backend):
        request = SearchRequest(
            anns_field="vec", metric_type="COSINE", limit=1, offset=0, output_fields=("nope",)
        )
        with pytest.raises(InMemoryBackendError):
            backend.search("c", [np.ones(DIM)], request)

    def test_empty_collection_returns_empty_columns(self, spec, index, request_):
        b = InMemoryBackend()
        b.create_collection(spec, shards_num=1)
        b.create_index("c", index)
        b.load_collection("c")

        assert b.search("c", [np.ones(DIM)], request_) == [{"title": []}]


# ---------------------------------------------------------------------------
# FACTORY
# ---------------------------------------------------------------------------


class TestGetBackendFactory:
    """Test the get_backend factory function."""

    def test_returns_in_memory_by_default(self):
        assert isinstance(get_backend(), InMemoryBackend)

    def test_returns_milvus_when_requested(self):
        assert isinstance(get_backend(use_milvus=True), MilvusBackend)
