"""Tests for configuration loading."""

import logging

from restaurant_api import config as config_module
from restaurant_api.config import Config, get_config, setup_logging


class TestConfig:
    """Tests for the Config settings model."""

    def test_defaults(self, monkeypatch):
        """Test default values when no environment is set."""
        for var in ("DATABASE_PATH", "SERVER_HOST", "SERVER_PORT", "LOG_LEVEL"):
            monkeypatch.delenv(var, raising=False)

        cfg = Config(_env_file=None)

        assert cfg.database_path == "./nocodb/restaurants.db"
        assert cfg.server_host == "0.0.0.0"
        assert cfg.server_port == 8081
        assert cfg.log_level == "INFO"
        assert cfg.is_in_memory() is False

    def test_environment_overrides(self, monkeypatch):
        """Test that environment variables override defaults."""
        monkeypatch.setenv("DATABASE_PATH", ":memory:")
        monkeypatch.setenv("SERVER_PORT", "9000")

        cfg = Config(_env_file=None)

        assert cfg.database_path == ":memory:"
        assert cfg.server_port == 9000
        assert cfg.is_in_memory() is True

    def test_get_config_is_cached(self, monkeypatch):
        """Test that get_config returns one shared instance."""
        monkeypatch.setattr(config_module, "config", None)

        assert get_config() is get_config()

    def test_setup_logging_level(self, monkeypatch):
        """Test that setup_logging applies the configured level."""
        calls = []
        monkeypatch.setattr(logging, "basicConfig", lambda **kw: calls.append(kw))

        setup_logging(Config(_env_file=None, log_level="debug"))

        assert calls[0]["level"] == logging.DEBUG

    def test_setup_logging_unknown_level_falls_back(self, monkeypatch):
        """Test that an unknown level name falls back to INFO."""
        calls = []
        monkeypatch.setattr(logging, "basicConfig", lambda **kw: calls.append(kw))

        setup_logging(Config(_env_file=None, log_level="chatty"))

        assert calls[0]["level"] == logging.INFO

    def test_setup_logging_quiets_form_parser(self, monkeypatch):
        """Test that python-multipart debug output is suppressed."""
        monkeypatch.setattr(logging, "basicConfig", lambda **kw: None)
        form_logger = logging.getLogger("python_multipart")
        monkeypatch.setattr(form_logger, "level", logging.NOTSET)

        setup_logging(Config(_env_file=None, log_level="debug"))

        assert form_logger.level == logging.WARNING
