"""
Datastore Configuration

Loads backend and encoder settings from environment variables.
The CLI loads a .env file first (python-dotenv), so either source works.
"""

from __future__ import annotations

import os
from dataclasses import dataclass


def _env_bool(name: str, default: str) -> bool:
    return os.environ.get(name, default).lower() in ("true", "1", "yes")


def _env_float(name: str) -> float | None:
    raw = os.environ.get(name)
    return float(raw) if raw else None


@dataclass
class DatastoreConfig:
    """Configuration for the datastore.

    Environment Variables:
        DATASTORE_BACKEND: "memory" or "milvus" (default: memory)
        MILVUS_URI: Milvus endpoint (default: http://localhost:19530)
        MILVUS_TOKEN: Auth token, "user:password" or API key (optional)
        MILVUS_DB_NAME: Database name (default: default)
        USE_MOCK_ENCODER: Use the hash-based MockEncoder (default: true)
        ENCODER_MODEL: Embedding model name (default: llama3)
        ENCODER_BASE_URL: OpenAI-compatible endpoint (default: local Ollama)
        DATASTORE_SEARCH_IGNORE_GROWING: Skip growing segments in search (default: false)
        DATASTORE_TIMEOUT: Per-call deadline in seconds (default: none)
    """

    backend: str = "memory"
    milvus_uri: str = "http://localhost:19530"
    milvus_token: str | None = None
    milvus_db_name: str = "default"
    use_mock_encoder: bool = True
    encoder_model: str = "llama3"
    encoder_base_url: str | None = "http://localhost:11434/v1"
    search_ignore_growing: bool = False
    timeout: float | None = None

    @property
    def use_milvus(self) -> bool:
        return self.backend.lower() == "milvus"

    @classmethod
    def from_env(cls) -> "DatastoreConfig":
        """Load config from environment variables."""
        return cls(
            backend=os.environ.get("DATASTORE_BACKEND", "memory"),
            milvus_uri=os.environ.get("MILVUS_URI", "http://localhost:19530"),
            milvus_token=os.environ.get("MILVUS_TOKEN") or None,
            milvus_db_name=os.environ.get("MILVUS_DB_NAME", "default"),
            use_mock_encoder=_env_bool("USE_MOCK_ENCODER", "true"),
            encoder_model=os.environ.get("ENCODER_MODEL", "llama3"),
            encoder_base_url=os.environ.get("ENCODER_BASE_URL", "http://localhost:11434/v1") or None,
            search_ignore_growing=_env_bool("DATASTORE_SEARCH_IGNORE_GROWING", "false"),
            timeout=_env_float("DATASTORE_TIMEOUT"),
        )


# Global config singleton
_config: DatastoreConfig | None = None


def get_config() -> DatastoreConfig:
    """Get the global datastore config (lazy-loaded from env)."""
    global _config
    if _config is None:
        _config = DatastoreConfig.from_env()
    return _config


def reset_config() -> None:
    """Reset config (useful for testing)."""
    global _config
    _config = None
