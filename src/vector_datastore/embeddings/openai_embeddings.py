"""
Encoders Module - Single Responsibility: Turn text into vectors.

It has ONE job: convert text to a fixed-length float32 vector.
No collection logic, no document handling.

The collection schema stores 4096-dimensional vectors, so the production
encoder points at an OpenAI-compatible embeddings endpoint serving a
4096-dimensional model (by default a local Ollama server).
"""

import hashlib
import logging
import os

import numpy as np
from openai import OpenAI

from vector_datastore.core.protocols import TextEncoder

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "llama3"
DEFAULT_BASE_URL = "http://localhost:11434/v1"
DEFAULT_DIMENSIONS = 4096


class OpenAIEncoder:
    """
    Encoder backed by the OpenAI embeddings API (or any compatible server).

    Errors from the SDK propagate unchanged; EncoderGateway wraps them.
    """

    def __init__(
        self,
        model: str = DEFAULT_MODEL,
        base_url: str | None = DEFAULT_BASE_URL,
        api_key: str | None = None,
        dimensions: int = DEFAULT_DIMENSIONS,
    ):
        self.model = model
        self._dimensions = dimensions
        self._client = OpenAI(
            api_key=api_key or os.environ.get("OPENAI_API_KEY", "ollama"),
            base_url=base_url,
        )

    @property
    def dimensions(self) -> int:
        return self._dimensions

    def encode(self, text: str) -> np.ndarray:
        """Generate embedding for a single text."""
        response = self._client.embeddings.create(
            input=text,
            model=self.model,
        )
        logger.debug(f"Encoded {len(text)} chars with {self.model}")
        return np.array(response.data[0].embedding, dtype=np.float32)


class MockEncoder:
    """
    Mock encoder for testing without API calls.

    Generates deterministic unit vectors seeded from the text hash, so equal
    texts always map to the same vector (cosine similarity 1.0).
    NOT for production use - only for testing/development.
    """

    def __init__(self, dimensions: int = DEFAULT_DIMENSIONS):
        self._dimensions = dimensions

    @property
    def dimensions(self) -> int:
        return self._dimensions

    def encode(self, text: str) -> np.ndarray:
        """Generate deterministic pseudo-embedding from text hash."""
        seed = int.from_bytes(hashlib.sha256(text.encode()).digest()[:8], "big")
        rng = np.random.default_rng(seed)
        vector = rng.standard_normal(self._dimensions).astype(np.float32)
        return vector / np.linalg.norm(vector)


def get_encoder(
    use_mock: bool = False,
    model: str = DEFAULT_MODEL,
    base_url: str | None = DEFAULT_BASE_URL,
    dimensions: int = DEFAULT_DIMENSIONS,
) -> TextEncoder:
    """
    Factory function to get the appropriate encoder.

    Args:
        use_mock: If True, return MockEncoder (for testing)
        model: Embedding model name for OpenAIEncoder
        base_url: Endpoint for OpenAIEncoder (None = api.openai.com)
        dimensions: Vector length the encoder produces
    """
    if use_mock:
        return MockEncoder(dimensions=dimensions)
    return OpenAIEncoder(model=model, base_url=base_url, dimensions=dimensions)
