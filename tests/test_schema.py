"""
Unit Tests for Collection Layout

Tests the schema definer, index parameters and search parameters.
All pure functions - no backend involved.
"""

import pytest

from vector_datastore.core.protocols import FieldType
from vector_datastore.datastore.schema import (
    DEFAULT_SHARD_NUMBER,
    EMBEDDING_DIM,
    define_index,
    define_schema,
    define_search_request,
)


# ---------------------------------------------------------------------------
# SCHEMA DEFINER
# ---------------------------------------------------------------------------


class TestDefineSchema:
    """Test the five-field collection layout."""

    def test_schema_carries_collection_name(self):
        assert define_schema("articles").name == "articles"

    def test_exactly_five_fields_in_order(self):
        schema = define_schema("c")
        assert schema.field_names == ["id", "title", "content", "category", "embedding"]

    def test_id_is_sole_primary_key_without_auto_id(self):
        schema = define_schema("c")
        primaries = [f for f in schema.fields if f.is_primary]

        assert [f.name for f in primaries] == ["id"]
        assert primaries[0].auto_id is False
        assert schema.auto_id is False

    @pytest.mark.parametrize(
        "name,max_length",
        [("id", 255), ("title", 255), ("content", 3000), ("category", 100)],
    )
    def test_varchar_bounds(self, name, max_length):
        field = define_schema("c").get_field(name)

        assert field.dtype is FieldType.VARCHAR
        assert field.max_length == max_length

    def test_embedding_is_4096_float_vector(self):
        field = define_schema("c").get_field("embedding")

        assert field.dtype is FieldType.FLOAT_VECTOR
        assert field.dim == EMBEDDING_DIM == 4096

    def test_pure_function(self):
        """Same name, same schema."""
        assert define_schema("c") == define_schema("c")

    def test_unknown_field_lookup_returns_none(self):
        assert define_schema("c").get_field("score") is None

    def test_default_shard_number(self):
        assert DEFAULT_SHARD_NUMBER == 1


# ---------------------------------------------------------------------------
# INDEX / SEARCH PARAMETERS
# ---------------------------------------------------------------------------


class TestDefineIndex:
    """Test the ANN index definition."""

    def test_ivf_flat_cosine_on_embedding(self):
        index = define_index()

        assert index.field_name == "embedding"
        assert index.index_type == "IVF_FLAT"
        assert index.metric_type == "COSINE"
        assert index.params == {"nlist": 1024}


class TestDefineSearchRequest:
    """Test the search-time parameters."""

    def test_defaults(self):
        request = define_search_request()

        assert request.anns_field == "embedding"
        assert request.metric_type == "COSINE"
        assert request.limit == 3
        assert request.offset == 0
        assert request.params == {"nprobe": 10}
        assert request.consistency_level == "Strong"
        assert request.ignore_growing is False

    def test_id_is_not_an_output_field(self):
        assert define_search_request().output_fields == ("title", "content", "category")

    def test_ignore_growing_override(self):
        assert define_search_request(ignore_growing=True).ignore_growing is True
