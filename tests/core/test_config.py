"""Tests for daybook.core.config."""

import os

import pytest
import yaml

from daybook.core.config import Config
from daybook.core.exceptions import ConfigurationError


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    """Drop stray DAYBOOK_ env vars between tests."""
    for key in list(os.environ):
        if key.startswith("DAYBOOK_"):
            monkeypatch.delenv(key)


class TestConfig:
    def test_defaults(self):
        config = Config()
        assert config.get("paths.data_dir").endswith(".daybook-data")
        assert config.get("autosave.debounce_ms") == 500
        assert config.get("autosave.timestamp_policy") == "refresh"
        assert config.get("logging.level") == "WARNING"

    def test_custom_data_dir(self, tmp_dir):
        config = Config(data_dir=tmp_dir)
        assert config.get_data_dir() == tmp_dir
        assert config.get_entries_dir() == os.path.join(tmp_dir, "entries")
        assert config.get_log_dir() == os.path.join(tmp_dir, "logs")

    def test_yaml_config_file(self, tmp_config_file, tmp_dir):
        config = Config(config_file=tmp_config_file, data_dir=tmp_dir)
        assert config.get("autosave.debounce_ms") == 250
        assert config.get_entries_dir() == os.path.join(tmp_dir, "data", "entries")
        # Untouched defaults survive the merge
        assert config.get("logging.level") == "WARNING"

    def test_data_dir_from_file_moves_derived_dirs(self, tmp_dir):
        mine = os.path.join(tmp_dir, "mine")
        config_path = os.path.join(tmp_dir, "config.yaml")
        with open(config_path, "w") as f:
            yaml.dump({"paths": {"data_dir": mine}}, f)

        config = Config(config_file=config_path)
        assert config.get_data_dir() == mine
        assert config.get_entries_dir() == os.path.join(mine, "entries")
        assert config.get_log_dir() == os.path.join(mine, "logs")

    def test_data_dir_from_env_moves_derived_dirs(self, tmp_dir, monkeypatch):
        monkeypatch.setenv("DAYBOOK_PATHS__DATA_DIR", tmp_dir)
        config = Config()
        assert config.get_entries_dir() == os.path.join(tmp_dir, "entries")
        assert config.get_log_dir() == os.path.join(tmp_dir, "logs")

    def test_explicit_entries_dir_wins(self, tmp_dir, monkeypatch):
        monkeypatch.setenv("DAYBOOK_PATHS__ENTRIES_DIR", os.path.join(tmp_dir, "journal"))
        config = Config(data_dir=tmp_dir)
        assert config.get_entries_dir() == os.path.join(tmp_dir, "journal")
        assert config.get_log_dir() == os.path.join(tmp_dir, "logs")

    def test_set_data_dir_after_load(self, tmp_config_file, tmp_dir):
        config = Config(config_file=tmp_config_file)
        config.set("paths.data_dir", os.path.join(tmp_dir, "other"))
        assert config.get_log_dir() == os.path.join(tmp_dir, "other", "logs")

    def test_json_config_file(self, tmp_dir):
        path = os.path.join(tmp_dir, "config.json")
        with open(path, "w") as f:
            f.write('{"autosave": {"debounce_ms": 100}}')
        assert Config(config_file=path, data_dir=tmp_dir).get("autosave.debounce_ms") == 100

    def test_env_overrides_file(self, tmp_config_file, tmp_dir, monkeypatch):
        monkeypatch.setenv("DAYBOOK_AUTOSAVE__DEBOUNCE_MS", "900")
        config = Config(config_file=tmp_config_file, data_dir=tmp_dir)
        assert config.get("autosave.debounce_ms") == "900"

    def test_custom_env_prefix(self, monkeypatch, tmp_dir):
        monkeypatch.setenv("MYJOURNAL_LOGGING__LEVEL", "DEBUG")
        config = Config(env_prefix="MYJOURNAL_", data_dir=tmp_dir)
        assert config.get("logging.level") == "DEBUG"

    def test_unparseable_file_raises(self, tmp_dir):
        path = os.path.join(tmp_dir, "config.yaml")
        with open(path, "w") as f:
            f.write("autosave: [unclosed")
        with pytest.raises(ConfigurationError, match="Cannot parse"):
            Config(config_file=path, data_dir=tmp_dir)

    def test_non_mapping_file_raises(self, tmp_dir):
        path = os.path.join(tmp_dir, "config.yaml")
        with open(path, "w") as f:
            yaml.dump(["a", "b"], f)
        with pytest.raises(ConfigurationError, match="mapping"):
            Config(config_file=path, data_dir=tmp_dir)

    def test_get_missing_key(self, tmp_dir):
        config = Config(data_dir=tmp_dir)
        assert config.get("nonexistent.key") is None
        assert config.get("nonexistent.key", "fallback") == "fallback"

    def test_set(self, tmp_dir):
        config = Config(data_dir=tmp_dir)
        config.set("autosave.debounce_ms", 42)
        assert config.get("autosave.debounce_ms") == 42

    def test_ensure_directories(self, tmp_dir):
        config = Config(data_dir=tmp_dir)
        config.ensure_directories()
        assert os.path.isdir(os.path.join(tmp_dir, "entries"))
        assert os.path.isdir(os.path.join(tmp_dir, "logs"))

    def test_extra_defaults(self, tmp_dir):
        config = Config(data_dir=tmp_dir, defaults={"autosave": {"debounce_ms": 10}})
        assert config.get("autosave.debounce_ms") == 10
        assert config.get("autosave.timestamp_policy") == "refresh"

