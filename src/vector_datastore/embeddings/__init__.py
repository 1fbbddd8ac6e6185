"""
Embeddings module - text to vector encoding.

1. Protocol (TextEncoder, in core.protocols) defines the interface
2. Production implementation (OpenAIEncoder)
3. Test double (MockEncoder) for fast testing
4. Factory function (get_encoder)
5. EncoderGateway validates every vector before it reaches the backend
"""

from vector_datastore.embeddings.openai_embeddings import (
    OpenAIEncoder,
    MockEncoder,
    get_encoder,
)
from vector_datastore.embeddings.gateway import EncoderGateway

__all__ = [
    "OpenAIEncoder",
    "MockEncoder",
    "get_encoder",
    "EncoderGateway",
]
