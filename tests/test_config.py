"""Tests for config.py and logging_config.py."""

import logging
from pathlib import Path

import pytest

from hookwright.config import DEFAULT_POLL_INTERVAL, Config
from hookwright.exceptions import ConfigurationError
from hookwright.logging_config import setup_logging


class TestConfigFromEnv:
    def test_defaults(self):
        config = Config.from_env({})
        assert config.debug is False
        assert config.log_dir is None
        assert config.plugins_file == Path("plugins.yaml")
        assert config.poll_interval == DEFAULT_POLL_INTERVAL

    def test_values(self, tmp_path):
        config = Config.from_env(
            {
                "HOOKWRIGHT_DEBUG": "true",
                "HOOKWRIGHT_LOG_DIR": str(tmp_path),
                "HOOKWRIGHT_PLUGINS": "conf/plugins.yaml",
                "HOOKWRIGHT_POLL_INTERVAL": "2.5",
            }
        )
        assert config.debug is True
        assert config.log_dir == tmp_path
        assert config.plugins_file == Path("conf/plugins.yaml")
        assert config.poll_interval == 2.5

    @pytest.mark.parametrize("value,expected", [("1", True), ("YES", True), ("on", True), ("false", False), ("", False)])
    def test_bool_parsing(self, value, expected):
        assert Config.from_env({"HOOKWRIGHT_DEBUG": value}).debug is expected

    def test_invalid_interval(self):
        with pytest.raises(ConfigurationError, match="HOOKWRIGHT_POLL_INTERVAL='fast' is invalid"):
            Config.from_env({"HOOKWRIGHT_POLL_INTERVAL": "fast"})

    def test_non_positive_interval(self):
        with pytest.raises(ConfigurationError, match="positive"):
            Config.from_env({"HOOKWRIGHT_POLL_INTERVAL": "0"})

    def test_reads_os_environ(self, monkeypatch):
        monkeypatch.setenv("HOOKWRIGHT_PLUGINS", "from_env.yaml")
        assert Config.from_env(dotenv=False).plugins_file == Path("from_env.yaml")

    def test_frozen(self):
        with pytest.raises(Exception):
            Config().debug = True


class TestSetupLogging:
    @pytest.fixture(autouse=True)
    def _restore_logging(self):
        root = logging.getLogger()
        handlers, level = root.handlers[:], root.level
        trace_level = logging.getLogger("hookwright.trace").level
        yield
        for handler in root.handlers:
            if handler not in handlers:
                handler.close()
        root.handlers[:] = handlers
        root.setLevel(level)
        logging.getLogger("hookwright.trace").setLevel(trace_level)

    def test_debug_level(self):
        setup_logging(Config(debug=True))
        assert logging.getLogger().level == logging.DEBUG

    def test_info_level_silences_trace(self):
        logger = setup_logging(Config())
        assert logger.name == "hookwright"
        assert logging.getLogger().level == logging.INFO
        assert logging.getLogger("hookwright.trace").level == logging.INFO

    def test_file_handler(self, tmp_path):
        log_dir = tmp_path / "logs"
        setup_logging(Config(log_dir=log_dir))
        assert list(log_dir.glob("hookwright_*.log"))
        assert any(isinstance(h, logging.FileHandler) for h in logging.getLogger().handlers)
