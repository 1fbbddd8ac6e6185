"""
Input payload schemas for document files.

These Pydantic models define the INPUT CONTRACT for `vector-datastore upsert`:
a JSON array of objects with exactly id/title/content/category.

Length bounds (255/255/3000/100) are NOT checked here. Oversize values reach
the backend and are rejected there as an UpsertError.
"""

from __future__ import annotations

import json
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter

from vector_datastore.datastore.document import Document


class DocumentPayload(BaseModel):
    """One document as it appears in an input file."""

    model_config = ConfigDict(extra="forbid")

    id: str = Field(min_length=1, description="Caller-supplied primary key")
    title: str = Field(description="Document title")
    content: str = Field(description="Text that is embedded and searched")
    category: str = Field(description="Free-form category label")

    def to_document(self) -> Document:
        return Document(
            id=self.id,
            title=self.title,
            content=self.content,
            category=self.category,
        )


_payload_list = TypeAdapter(list[DocumentPayload])


def parse_documents(raw: str | bytes) -> list[Document]:
    """
    Parse a JSON array of documents.

    Raises:
        pydantic.ValidationError: malformed JSON or wrong document shape
    """
    return [payload.to_document() for payload in _payload_list.validate_json(raw)]


def load_documents(path: str | Path) -> list[Document]:
    """Read and parse a JSON document file."""
    return parse_documents(Path(path).read_bytes())


def dump_documents(documents: list[Document]) -> str:
    """Serialize documents (e.g. search results) as a JSON array."""
    return json.dumps([doc.to_dict() for doc in documents], indent=2, ensure_ascii=False)
