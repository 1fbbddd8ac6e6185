"""
Collection layout, index and search parameters.

Single responsibility: describe WHAT a collection looks like.
Nothing here talks to a backend; every function is pure.
"""

from __future__ import annotations

from vector_datastore.core.protocols import (
    CollectionSpec,
    FieldSpec,
    FieldType,
    IndexSpec,
    SearchRequest,
)


# ---------------------------------------------------------------------------
# CONSTANTS
# ---------------------------------------------------------------------------

ID_FIELD = "id"
TITLE_FIELD = "title"
CONTENT_FIELD = "content"
CATEGORY_FIELD = "category"
EMBEDDING_FIELD = "embedding"

ID_MAX_LENGTH = 255
TITLE_MAX_LENGTH = 255
CONTENT_MAX_LENGTH = 3000
CATEGORY_MAX_LENGTH = 100

EMBEDDING_DIM = 4096

DEFAULT_SHARD_NUMBER = 1

INDEX_TYPE = "IVF_FLAT"
METRIC_TYPE = "COSINE"
INDEX_NLIST = 1024

SEARCH_LIMIT = 3
SEARCH_OFFSET = 0
SEARCH_NPROBE = 10
CONSISTENCY_LEVEL = "Strong"

# Search results carry these columns only; the id column is not requested.
OUTPUT_FIELDS = (TITLE_FIELD, CONTENT_FIELD, CATEGORY_FIELD)


# ---------------------------------------------------------------------------
# SCHEMA DEFINER
# ---------------------------------------------------------------------------


def define_schema(collection_name: str) -> CollectionSpec:
    """
    Column layout for a document collection.

    Five fields in fixed order. ``id`` is the sole primary key and callers
    always supply it (auto-id disabled).
    """
    return CollectionSpec(
        name=collection_name,
        description="",
        auto_id=False,
        fields=(
            FieldSpec(
                name=ID_FIELD,
                dtype=FieldType.VARCHAR,
                is_primary=True,
                auto_id=False,
                max_length=ID_MAX_LENGTH,
            ),
            FieldSpec(
                name=TITLE_FIELD,
                dtype=FieldType.VARCHAR,
                max_length=TITLE_MAX_LENGTH,
            ),
            FieldSpec(
                name=CONTENT_FIELD,
                dtype=FieldType.VARCHAR,
                max_length=CONTENT_MAX_LENGTH,
            ),
            FieldSpec(
                name=CATEGORY_FIELD,
                dtype=FieldType.VARCHAR,
                max_length=CATEGORY_MAX_LENGTH,
            ),
            FieldSpec(
                name=EMBEDDING_FIELD,
                dtype=FieldType.FLOAT_VECTOR,
                dim=EMBEDDING_DIM,
            ),
        ),
    )


# ---------------------------------------------------------------------------
# INDEX / SEARCH PARAMETERS
# ---------------------------------------------------------------------------


def define_index() -> IndexSpec:
    """IVF_FLAT over the embedding field, cosine metric, 1024 partitions."""
    return IndexSpec(
        field_name=EMBEDDING_FIELD,
        index_type=INDEX_TYPE,
        metric_type=METRIC_TYPE,
        params={"nlist": INDEX_NLIST},
    )


def define_search_request(ignore_growing: bool = False) -> SearchRequest:
    """Search-time parameters: top 3, offset 0, nprobe 10, strong consistency."""
    return SearchRequest(
        anns_field=EMBEDDING_FIELD,
        metric_type=METRIC_TYPE,
        limit=SEARCH_LIMIT,
        offset=SEARCH_OFFSET,
        output_fields=OUTPUT_FIELDS,
        params={"nprobe": SEARCH_NPROBE},
        consistency_level=CONSISTENCY_LEVEL,
        ignore_growing=ignore_growing,
    )
