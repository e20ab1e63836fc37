"""Tests for configuration helpers and the JSON log formatter."""

import json
import logging
import sys

import pytest

from agentflow.config import (
    DEFAULT_DB_PATH,
    PROJECT_ROOT,
    env_flag,
    get_cors_origins,
    get_step_delay_scale,
    resolve_db_path,
)
from agentflow.logging_config import JSONFormatter, setup_logging


class TestResolveDbPath:
    """Tests for DATABASE_URL resolution."""

    def test_default(self):
        """Test that an empty value falls back to the data directory."""
        assert resolve_db_path(None) == DEFAULT_DB_PATH

    def test_memory(self):
        """Test that :memory: is passed through."""
        assert resolve_db_path(":memory:") == ":memory:"

    def test_relative_is_anchored_at_project_root(self):
        """Test that relative paths resolve against the project root."""
        assert resolve_db_path("03_data/x.db") == PROJECT_ROOT / "03_data/x.db"


class TestEnvReaders:
    """Tests for environment readers."""

    def test_env_flag(self, monkeypatch):
        """Test truthy and falsy spellings plus the default."""
        monkeypatch.delenv("SEED_DEMO_DATA", raising=False)
        assert env_flag("SEED_DEMO_DATA", True) is True

        monkeypatch.setenv("SEED_DEMO_DATA", "yes")
        assert env_flag("SEED_DEMO_DATA", False) is True

        monkeypatch.setenv("SEED_DEMO_DATA", "0")
        assert env_flag("SEED_DEMO_DATA", True) is False

    def test_step_delay_scale(self, monkeypatch):
        """Test parsing and validation of STEP_DELAY_SCALE."""
        monkeypatch.setenv("STEP_DELAY_SCALE", "0.5")
        assert get_step_delay_scale() == 0.5

        monkeypatch.setenv("STEP_DELAY_SCALE", "fast")
        with pytest.raises(ValueError):
            get_step_delay_scale()

        monkeypatch.setenv("STEP_DELAY_SCALE", "-1")
        with pytest.raises(ValueError):
            get_step_delay_scale()

    def test_cors_origins(self, monkeypatch):
        """Test comma separated origins with blanks dropped."""
        monkeypatch.setenv("CORS_ORIGINS", "http://a.test, ,http://b.test")
        assert get_cors_origins() == ["http://a.test", "http://b.test"]

        monkeypatch.delenv("CORS_ORIGINS")
        assert "http://localhost:5173" in get_cors_origins()


class TestJSONFormatter:
    """Tests for the JSON log formatter."""

    def _record(self, **extra) -> logging.LogRecord:
        record = logging.LogRecord(
            name="agentflow.test",
            level=logging.INFO,
            pathname=__file__,
            lineno=10,
            msg="Query %s",
            args=("received",),
            exc_info=None,
        )
        for key, value in extra.items():
            setattr(record, key, value)
        return record

    def test_basic_fields(self):
        """Test that the message is rendered with its metadata."""
        data = json.loads(JSONFormatter().format(self._record()))

        assert data["message"] == "Query received"
        assert data["level"] == "INFO"
        assert data["logger"] == "agentflow.test"
        assert "context" not in data

    def test_context_extra(self):
        """Test that extra context is included and non-JSON values are stringified."""
        record = self._record(context={"session_id": "s1", "path": PROJECT_ROOT})
        data = json.loads(JSONFormatter().format(record))

        assert data["context"]["session_id"] == "s1"
        assert data["context"]["path"] == str(PROJECT_ROOT)

    def test_exception(self):
        """Test that exception info is rendered."""
        try:
            raise RuntimeError("boom")
        except RuntimeError:
            record = self._record()
            record.exc_info = sys.exc_info()

        data = json.loads(JSONFormatter().format(record))
        assert "RuntimeError: boom" in data["exception"]


class TestSetupLogging:
    """Tests for setup_logging()."""

    def test_rejects_unknown_console_format(self, tmp_path):
        """Test that an unknown LOG_FORMAT is refused."""
        with pytest.raises(ValueError):
            setup_logging(log_file=str(tmp_path / "app.log"), console_format="xml")
