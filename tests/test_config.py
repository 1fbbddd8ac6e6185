"""
Unit Tests for Datastore Configuration

Environment variable handling tested with patch.dict.
"""

from unittest.mock import patch

from vector_datastore.config import DatastoreConfig, get_config, reset_config


class TestDatastoreConfig:
    """Test configuration loading."""

    def setup_method(self):
        reset_config()

    def teardown_method(self):
        reset_config()

    def test_config_defaults(self):
        with patch.dict("os.environ", {}, clear=True):
            config = DatastoreConfig.from_env()

        assert config.backend == "memory"
        assert config.use_milvus is False
        assert config.milvus_uri == "http://localhost:19530"
        assert config.milvus_token is None
        assert config.milvus_db_name == "default"
        assert config.use_mock_encoder is True
        assert config.search_ignore_growing is False
        assert config.timeout is None

    def test_config_from_env(self):
        env = {
            "DATASTORE_BACKEND": "Milvus",
            "MILVUS_URI": "http://milvus:19530",
            "MILVUS_TOKEN": "root:Milvus",
            "MILVUS_DB_NAME": "docs",
            "USE_MOCK_ENCODER": "false",
            "ENCODER_MODEL": "nomic-large",
            "ENCODER_BASE_URL": "",
            "DATASTORE_SEARCH_IGNORE_GROWING": "1",
            "DATASTORE_TIMEOUT": "2.5",
        }
        with patch.dict("os.environ", env, clear=True):
            config = DatastoreConfig.from_env()

        assert config.use_milvus is True
        assert config.milvus_uri == "http://milvus:19530"
        assert config.milvus_token == "root:Milvus"
        assert config.milvus_db_name == "docs"
        assert config.use_mock_encoder is False
        assert config.encoder_model == "nomic-large"
        assert config.encoder_base_url is None
        assert config.search_ignore_growing is True
        assert config.timeout == 2.5

    def test_get_config_is_cached(self):
        with patch.dict("os.environ", {"DATASTORE_BACKEND": "milvus"}):
            first = get_config()
        with patch.dict("os.environ", {"DATASTORE_BACKEND": "memory"}):
            second = get_config()

        assert first is second
        assert second.backend == "milvus"

    def test_reset_config_reloads(self):
        with patch.dict("os.environ", {"DATASTORE_BACKEND": "milvus"}):
            get_config()
        reset_config()
        with patch.dict("os.environ", {"DATASTORE_BACKEND": "memory"}):
            assert get_config().backend == "memory"
