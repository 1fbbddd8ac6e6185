"""
Row <-> column transposition.

The domain is document-oriented, the backend wire format is columnar.
These two functions are the only place the shapes are converted.
"""

from __future__ import annotations

from typing import Any, Mapping, Sequence

import numpy as np

from vector_datastore.datastore.document import Document
from vector_datastore.datastore.schema import (
    CATEGORY_FIELD,
    CONTENT_FIELD,
    EMBEDDING_FIELD,
    ID_FIELD,
    TITLE_FIELD,
)


def documents_to_columns(
    documents: Sequence[Document],
    embeddings: Sequence[np.ndarray],
) -> dict[str, list[Any]]:
    """
    Transpose documents and their embeddings into parallel columns.

    Column ``i`` of every field belongs to ``documents[i]``. Keys follow the
    schema field order.

    Raises:
        ValueError: if the two sequences differ in length
    """
    if len(documents) != len(embeddings):
        raise ValueError(
            f"{len(documents)} documents but {len(embeddings)} embeddings"
        )

    columns: dict[str, list[Any]] = {
        ID_FIELD: [],
        TITLE_FIELD: [],
        CONTENT_FIELD: [],
        CATEGORY_FIELD: [],
        EMBEDDING_FIELD: [],
    }
    for doc, embedding in zip(documents, embeddings):
        columns[ID_FIELD].append(doc.id)
        columns[TITLE_FIELD].append(doc.title)
        columns[CONTENT_FIELD].append(doc.content)
        columns[CATEGORY_FIELD].append(doc.category)
        columns[EMBEDDING_FIELD].append(np.asarray(embedding, dtype=np.float32))
    return columns


def columns_to_documents(columns: Mapping[str, Sequence[Any]]) -> list[Document]:
    """
    Decode search result columns back into documents.

    Only title/content/category are read. ``id`` is left empty since the
    search never requests it. Missing columns decode as empty strings.
    """
    titles = list(columns.get(TITLE_FIELD, []))
    contents = list(columns.get(CONTENT_FIELD, []))
    categories = list(columns.get(CATEGORY_FIELD, []))

    n_rows = max(len(titles), len(contents), len(categories))

    def _at(values: list[Any], i: int) -> str:
        return str(values[i]) if i < len(values) and values[i] is not None else ""

    return [
        Document(
            id="",
            title=_at(titles, i),
            content=_at(contents, i),
            category=_at(categories, i),
        )
        for i in range(n_rows)
    ]
