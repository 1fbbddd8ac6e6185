"""
Encoder Gateway - the only path from text to stored vectors.

Wraps a TextEncoder and turns every failure into an EncodingError with the
cause attached. Vectors of the wrong length are a configuration defect and
raise DimensionMismatchError instead.
"""

from __future__ import annotations

import logging

import numpy as np

from vector_datastore.core.errors import DimensionMismatchError, EncodingError
from vector_datastore.core.protocols import TextEncoder
from vector_datastore.datastore.schema import EMBEDDING_DIM

logger = logging.getLogger(__name__)


class EncoderGateway:
    """Validating wrapper around an injected TextEncoder."""

    def __init__(self, encoder: TextEncoder, dimensions: int = EMBEDDING_DIM):
        if encoder.dimensions != dimensions:
            raise DimensionMismatchError(expected=dimensions, actual=encoder.dimensions)
        self._encoder = encoder
        self._dimensions = dimensions

    @property
    def dimensions(self) -> int:
        return self._dimensions

    def encode(
        self,
        text: str,
        *,
        document_id: str | None = None,
        collection: str | None = None,
    ) -> np.ndarray:
        """
        Encode text into a float32 vector of the schema dimension.

        Args:
            text: Document content or query text
            document_id: Id of the document being encoded (None for queries)
            collection: Target collection, for error context

        Raises:
            EncodingError: the encoder failed or returned a zero/non-finite vector
            DimensionMismatchError: the encoder returned the wrong vector length
        """
        subject = f"document {document_id!r}" if document_id is not None else "query"

        try:
            raw = self._encoder.encode(text)
        except Exception as e:
            raise EncodingError(
                f"failed to encode {subject}: {e}",
                collection=collection,
                document_id=document_id,
            ) from e

        vector = np.asarray(raw, dtype=np.float32).reshape(-1)
        if vector.shape[0] != self._dimensions:
            raise DimensionMismatchError(expected=self._dimensions, actual=vector.shape[0])

        if not np.all(np.isfinite(vector)) or not np.any(vector):
            raise EncodingError(
                f"encoder returned a zero or non-finite vector for {subject}",
                collection=collection,
                document_id=document_id,
            )

        logger.debug(f"Encoded {subject}")
        return vector
