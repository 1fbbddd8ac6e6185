"""
Document model for the datastore.

Single responsibility: Define the structure of documents
written to and read from collections.
"""

from dataclasses import dataclass


@dataclass
class Document:
    """
    A text document stored in a collection.

    The embedding is derived from ``content`` at write time and never lives
    on this object. Documents returned by search carry an empty ``id``
    because the id column is not requested from the backend.
    """
    id: str
    title: str
    content: str
    category: str

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "id": self.id,
            "title": self.title,
            "content": self.content,
            "category": self.category,
        }
