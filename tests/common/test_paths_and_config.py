"""
Tests for data-directory resolution, store configuration, and logging setup.
"""

import logging
from pathlib import Path

import pytest

from quiz_toolkit.common.logging_utils import LOG_FORMAT, configure_logging, verbosity_to_level
from quiz_toolkit.common.paths import HOME_ENV_VAR, get_app_data_dir
from quiz_toolkit.config import DEFAULT_PREFIX, PREFIX_ENV_VAR, StoreConfig


class TestGetAppDataDir:
    """Tests for get_app_data_dir()."""

    def test_env_override_wins(self, monkeypatch, tmp_path):
        monkeypatch.setenv(HOME_ENV_VAR, str(tmp_path / "quiz"))

        assert get_app_data_dir() == tmp_path / "quiz"

    def test_without_override_returns_a_path(self, monkeypatch):
        monkeypatch.delenv(HOME_ENV_VAR, raising=False)

        assert isinstance(get_app_data_dir(), Path)


class TestStoreConfig:
    """Tests for StoreConfig."""

    def test_defaults(self, tmp_path):
        config = StoreConfig(data_dir=tmp_path)

        assert config.prefix == DEFAULT_PREFIX
        assert config.session_file == tmp_path / "sessions.json"

    @pytest.mark.parametrize("prefix", ["", "examgen:v1"])
    def test_init_when_prefix_invalid_then_raises(self, tmp_path, prefix):
        with pytest.raises(ValueError, match="prefix"):
            StoreConfig(data_dir=tmp_path, prefix=prefix)

    def test_init_when_file_name_empty_then_raises(self, tmp_path):
        with pytest.raises(ValueError):
            StoreConfig(data_dir=tmp_path, file_name="")

    def test_from_env_uses_explicit_dir_and_env_prefix(self, monkeypatch, tmp_path):
        monkeypatch.setenv(PREFIX_ENV_VAR, "custom:v3:")

        config = StoreConfig.from_env(tmp_path)

        assert config.data_dir == tmp_path
        assert config.prefix == "custom:v3:"

    def test_from_env_without_dir_uses_app_data_dir(self, monkeypatch, tmp_path):
        monkeypatch.setenv(HOME_ENV_VAR, str(tmp_path))
        monkeypatch.delenv(PREFIX_ENV_VAR, raising=False)

        assert StoreConfig.from_env().session_file == tmp_path / "sessions.json"


class TestLogging:
    """Tests for logging helpers."""

    def test_verbosity_to_level(self):
        assert verbosity_to_level(0) == logging.INFO
        assert verbosity_to_level(2) == logging.DEBUG

    def test_configure_logging_sets_root_level_and_format(self):
        root = logging.getLogger()
        saved_handlers, saved_level = root.handlers[:], root.level
        try:
            configure_logging(logging.DEBUG)

            assert root.level == logging.DEBUG
            assert root.handlers[0].formatter._fmt == LOG_FORMAT
            assert logging.getLogger("urllib3").level == logging.WARNING
        finally:
            root.handlers[:] = saved_handlers
            root.setLevel(saved_level)
