"""
Backends module - vector database engines behind the VectorBackend protocol.

- MilvusBackend: Milvus server via pymilvus (production)
- InMemoryBackend: dict + numpy cosine scan (testing/development)
- get_backend(): Factory function
"""

from __future__ import annotations

from vector_datastore.backends.memory_backend import InMemoryBackend, InMemoryBackendError
from vector_datastore.backends.milvus_backend import (
    MilvusBackend,
    MilvusBackendError,
    MilvusConfig,
)
from vector_datastore.core.protocols import VectorBackend


def get_backend(
    use_milvus: bool = False,
    config: MilvusConfig | None = None,
) -> VectorBackend:
    """
    Factory function to get the appropriate backend.

    Args:
        use_milvus: Use a Milvus server (default: False for dev)
        config: Milvus connection settings (defaults if not provided)
    """
    if use_milvus:
        return MilvusBackend(config or MilvusConfig())
    return InMemoryBackend()


__all__ = [
    "InMemoryBackend",
    "InMemoryBackendError",
    "MilvusBackend",
    "MilvusBackendError",
    "MilvusConfig",
    "get_backend",
]
