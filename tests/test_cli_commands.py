"""
Unit Tests for CLI Commands

Tests the CLI entry points against an in-memory repository.

PATTERNS:
---------
1. Environment pinned with patch.dict (memory backend, mock encoder, no tracing)
2. One shared repository patched in so state survives across commands
3. Verify exit codes and stdout/stderr
"""

import json
from unittest.mock import patch

import pytest

from vector_datastore import DatastoreRepository
from vector_datastore.backends import InMemoryBackend
from vector_datastore.cli import build_parser, main
from vector_datastore.cli import commands
from vector_datastore.config import reset_config
from vector_datastore.embeddings import MockEncoder
from vector_datastore.observability import reset_config as reset_tracing_config
from vector_datastore.observability.tracer import NoOpTracer

ENV = {
    "DATASTORE_BACKEND": "memory",
    "USE_MOCK_ENCODER": "true",
    "TRACING_ENABLED": "false",
}


@pytest.fixture(autouse=True)
def env():
    with patch.dict("os.environ", ENV), patch.object(commands, "_load_env"):
        reset_config()
        reset_tracing_config()
        yield
    reset_config()
    reset_tracing_config()


@pytest.fixture
def repo():
    return DatastoreRepository(InMemoryBackend(), MockEncoder(), tracer=NoOpTracer())


@pytest.fixture
def shared_repo(repo):
    """Patch the factory so every main() call sees the same repository."""
    with patch.object(commands, "get_repository", return_value=repo):
        yield repo


@pytest.fixture
def docs_file(tmp_path):
    path = tmp_path / "docs.json"
    path.write_text(json.dumps([
        {"id": "1", "title": "IVF", "content": "inverted file index", "category": "index"},
        {"id": "2", "title": "HNSW", "content": "graph index", "category": "index"},
    ]))
    return path


# ---------------------------------------------------------------------------
# PARSER
# ---------------------------------------------------------------------------


class TestParser:
    """Argument parsing."""

    def test_search_args(self):
        args = build_parser().parse_args(["--timeout", "2", "search", "c", "what is ivf"])

        assert args.command == "search"
        assert args.collection == "c"
        assert args.query == "what is ivf"
        assert args.timeout == 2.0

    def test_command_required(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args([])


# ---------------------------------------------------------------------------
# MAIN DISPATCH
# ---------------------------------------------------------------------------


class TestMain:
    """Exit codes and output."""

    def test_list_empty(self, capsys):
        assert main(["list"]) == 0

        captured = capsys.readouterr()
        assert captured.out == ""
        assert "(no collections)" in captured.err

    def test_create_upsert_search(self, shared_repo, docs_file, capsys):
        assert main(["create", "c"]) == 0
        assert main(["upsert", "c", str(docs_file)]) == 0
        capsys.readouterr()

        assert main(["search", "c", "graph index"]) == 0

        results = json.loads(capsys.readouterr().out)
        assert results[0] == {"id": "", "title": "HNSW", "content": "graph index", "category": "index"}
        assert len(results) == 2

    def test_list_sorted(self, shared_repo, capsys):
        main(["create", "b"])
        main(["create", "a"])
        capsys.readouterr()

        assert main(["list"]) == 0
        assert capsys.readouterr().out.split() == ["a", "b"]

    def test_delete(self, shared_repo, capsys):
        main(["create", "c"])

        assert main(["delete", "c"]) == 0
        assert shared_repo.list() == []

    def test_invalid_file_exit_code(self, shared_repo, tmp_path, capsys):
        bad = tmp_path / "bad.json"
        bad.write_text('[{"id": "1", "title": "t"}]')
        main(["create", "c"])

        assert main(["upsert", "c", str(bad)]) == 2
        assert "cannot read" in capsys.readouterr().err

    def test_missing_file_exit_code(self, shared_repo, tmp_path):
        assert main(["upsert", "c", str(tmp_path / "nope.json")]) == 2

    def test_datastore_error_exit_code(self, shared_repo, capsys):
        assert main(["search", "missing", "q"]) == 1

        err = capsys.readouterr().err
        assert "Error:" in err
        assert "missing" in err

    def test_timeout_defaults_from_config(self, shared_repo):
        with patch.dict("os.environ", {"DATASTORE_TIMEOUT": "4"}):
            reset_config()
            with patch.object(shared_repo, "list", return_value=[]) as mock_list:
                main(["list"])

        mock_list.assert_called_once_with(timeout=4.0)
