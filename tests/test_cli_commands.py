"""
Unit Tests for CLI Commands

Tests the CLI entry points with mock embeddings (no model downloads,
no API calls). Dispatch tests patch the subcommand handlers.

STAFF ENGINEER PATTERNS:
------------------------
1. Mock the expensive handlers for dispatch tests
2. Run real commands end to end with USE_MOCK_EMBEDDINGS
3. Verify exit codes
4. Test error handling
"""

import json
from unittest.mock import patch

import pytest

from embedding_lab.cli import commands
from embedding_lab.core import EmbeddingFailureError


@pytest.fixture
def mock_env(monkeypatch):
    """Mock embeddings, tracing off."""
    monkeypatch.setenv("USE_MOCK_EMBEDDINGS", "true")
    monkeypatch.delenv("PHOENIX_ENABLED", raising=False)
    monkeypatch.setenv("TRAIN_SEED", "42")


# ---------------------------------------------------------------------------
# LOAD_ENV TESTS
# ---------------------------------------------------------------------------


class TestLoadEnv:
    """Test environment loading."""

    def test_load_env_does_not_raise(self):
        """Should not raise when no .env file exists."""
        commands._load_env()


# ---------------------------------------------------------------------------
# MAIN CLI DISPATCH TESTS
# ---------------------------------------------------------------------------


class TestMainCliDispatch:
    """Test main CLI dispatches to correct handlers."""

    @pytest.mark.parametrize(
        "command,handler",
        [
            ("search", "run_search_cli"),
            ("train", "run_train_cli"),
            ("predict", "run_predict_cli"),
            ("eval", "run_eval_cli"),
            ("documents", "run_documents_cli"),
        ],
    )
    def test_main_dispatches(self, mock_env, command, handler):
        with patch.object(commands, handler) as mock_handler:
            mock_handler.return_value = 0
            with patch("sys.argv", ["embedding-lab", command]):
                result = commands.main()

        mock_handler.assert_called_once()
        assert result == 0

    def test_remaining_args_reinjected(self, mock_env):
        """Subcommand sees only its own arguments."""
        seen = {}

        def capture():
            import sys

            seen["argv"] = list(sys.argv[1:])
            return 0

        with patch.object(commands, "run_train_cli", side_effect=capture):
            with patch("sys.argv", ["embedding-lab", "train", "bert", "--test-split", "0.3"]):
                commands.main()

        assert seen["argv"] == ["bert", "--test-split", "0.3"]

    def test_unknown_command_exits(self, mock_env):
        with patch("sys.argv", ["embedding-lab", "serve"]):
            with pytest.raises(SystemExit):
                commands.main()


# ---------------------------------------------------------------------------
# ERROR HANDLING TESTS
# ---------------------------------------------------------------------------


class TestMainErrorHandling:
    """Test exit codes for failures."""

    def test_keyboard_interrupt_returns_130(self, mock_env):
        with patch.object(commands, "run_search_cli", side_effect=KeyboardInterrupt):
            with patch("sys.argv", ["embedding-lab", "search"]):
                assert commands.main() == 130

    def test_engine_error_returns_1(self, mock_env, capsys):
        error = EmbeddingFailureError("bert", "connection refused")
        with patch.object(commands, "run_train_cli", side_effect=error):
            with patch("sys.argv", ["embedding-lab", "train"]):
                assert commands.main() == 1

        assert "connection refused" in capsys.readouterr().err

    def test_invalid_split_returns_1(self, mock_env, capsys):
        with patch("sys.argv", ["embedding-lab", "train", "bert", "--test-split", "1.5"]):
            assert commands.main() == 1
        assert "Error:" in capsys.readouterr().err

    def test_blank_query_returns_1(self, mock_env):
        with patch("sys.argv", ["embedding-lab", "search", "   "]):
            assert commands.main() == 1


# ---------------------------------------------------------------------------
# END-TO-END WITH MOCK EMBEDDINGS
# ---------------------------------------------------------------------------


class TestCommandsWithMockEmbeddings:
    """Run real commands against mock providers."""

    def test_documents(self, mock_env, capsys):
        with patch("sys.argv", ["embedding-lab", "documents"]):
            assert commands.main() == 0

        listing = json.loads(capsys.readouterr().out)
        assert listing["totalDocuments"] == 16
        assert listing["availableMethods"] == ["cosine", "euclidean", "mmr", "hybrid"]
        assert listing["categories"] == list(listing["documentsByCategory"])
        assert set(listing["documentsByCategory"]["GST"][0]) == {"id", "title", "section"}

    def test_search(self, mock_env, capsys):
        with patch("sys.argv", ["embedding-lab", "search", "GST on textiles", "--methods", "mmr", "cosine"]):
            assert commands.main() == 0

        data = json.loads(capsys.readouterr().out)
        assert data["query"] == "GST on textiles"
        assert data["totalDocuments"] == 16
        assert list(data["results"]) == ["mmr", "cosine"]
        assert len(data["results"]["mmr"]["results"]) == 5

    def test_train(self, mock_env, capsys):
        with patch("sys.argv", ["embedding-lab", "train", "word2vec-glove"]):
            assert commands.main() == 0

        data = json.loads(capsys.readouterr().out)
        assert data["trainingSize"] == 24
        assert data["testSize"] == 6
        assert data["embeddingDimensions"] == 300

    def test_predict_trains_first(self, mock_env, capsys):
        argv = ["embedding-lab", "predict", "Stocks rallied", "--models", "bert", "word2vec-glove"]
        with patch("sys.argv", argv):
            assert commands.main() == 0

        data = json.loads(capsys.readouterr().out)
        assert data["trainedModels"] == 2
        assert data["consensus"]["totalModels"] == 2
