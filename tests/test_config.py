"""Tests for logsidian.config: models, YAML loader and logging setup."""

import json
import logging
import os
from unittest.mock import patch

import pytest
import yaml
from pydantic import ValidationError

from logsidian.config import configure_logging
from logsidian.config.log import JsonFormatter
from logsidian.config.loader import DEFAULT_CONFIG_TEMPLATE, _expand_env_vars, load_config
from logsidian.config.models import (
    AssetConfig,
    CalloutConfig,
    LogsidianConfig,
    OutputConfig,
)


# ── LogsidianConfig defaults ────────────────────────────────────────


class TestLogsidianConfigDefaults:
    def test_default_log_level(self, sample_config):
        assert sample_config.log_level == "info"

    def test_default_log_format(self, sample_config):
        assert sample_config.log_format == "text"

    def test_default_index_path(self, sample_config):
        assert sample_config.index.path == "ids.json"

    def test_default_ignore(self, sample_config):
        assert "logseq" in sample_config.index.ignore

    def test_default_asset_directory(self, sample_config):
        assert sample_config.assets.directory == "assets"

    def test_default_callouts(self, sample_config):
        assert sample_config.callouts.tags == {".border": "definition", "definition": "definition"}

    def test_invalid_log_level_rejected(self):
        with pytest.raises(ValidationError):
            LogsidianConfig(log_level="verbose")

    def test_template_matches_defaults(self):
        assert LogsidianConfig(**yaml.safe_load(DEFAULT_CONFIG_TEMPLATE)) == LogsidianConfig()


# ── Individual config model validations ─────────────────────────────


class TestAssetConfig:
    def test_slashes_stripped(self):
        assert AssetConfig(directory="/media/").directory == "media"

    def test_nested_directory(self):
        assert AssetConfig(directory="files/img").directory == "files/img"

    @pytest.mark.parametrize("value", ["", "/", "../outside", "a/../../b"])
    def test_escaping_directory_rejected(self, value):
        with pytest.raises(ValidationError):
            AssetConfig(directory=value)


class TestCalloutConfig:
    def test_tags_normalized(self):
        cfg = CalloutConfig(tags={"#Warning": "warning", " tip ": "tip"})
        assert cfg.tags == {"warning": "warning", "tip": "tip"}

    def test_order_preserved(self):
        cfg = CalloutConfig(tags={"b": "x", "a": "y"})
        assert list(cfg.tags) == ["b", "a"]

    def test_empty_kind_rejected(self):
        with pytest.raises(ValidationError):
            CalloutConfig(tags={"warning": " "})

    def test_empty_tag_rejected(self):
        with pytest.raises(ValidationError):
            CalloutConfig(tags={"#": "note"})


class TestOutputConfig:
    def test_defaults(self):
        cfg = OutputConfig()
        assert cfg.block_anchors is True
        assert cfg.frontmatter is True
        assert cfg.drop_block_properties == ["collapsed"]


# ── _expand_env_vars ────────────────────────────────────────────────


class TestExpandEnvVars:
    def test_expands_string_variable(self):
        with patch.dict(os.environ, {"MY_VAULT": "/data/vault"}):
            assert _expand_env_vars("${MY_VAULT}/ids.json") == "/data/vault/ids.json"

    def test_missing_var_becomes_empty(self):
        env = {k: v for k, v in os.environ.items() if k != "LOGSIDIAN_UNSET"}
        with patch.dict(os.environ, env, clear=True):
            assert _expand_env_vars("x${LOGSIDIAN_UNSET}y") == "xy"

    def test_expands_nested_structures(self):
        with patch.dict(os.environ, {"A": "alpha", "B": "beta"}):
            result = _expand_env_vars({"index": {"path": "${A}", "ignore": ["${B}", 3]}})
        assert result == {"index": {"path": "alpha", "ignore": ["beta", 3]}}

    def test_non_string_passthrough(self):
        assert _expand_env_vars(42) == 42
        assert _expand_env_vars(True) is True


# ── load_config ─────────────────────────────────────────────────────


@pytest.fixture
def isolated(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr("pathlib.Path.home", lambda: tmp_path / "fakehome")
    return tmp_path


class TestLoadConfig:
    def test_returns_defaults_when_no_file_exists(self, isolated):
        assert load_config() == LogsidianConfig()

    def test_loads_project_file(self, isolated):
        (isolated / "logsidian.yaml").write_text("index:\n  path: graph-ids.json\n")
        assert load_config().index.path == "graph-ids.json"

    def test_loads_user_file(self, isolated):
        user_dir = isolated / "fakehome" / ".logsidian"
        user_dir.mkdir(parents=True)
        (user_dir / "config.yaml").write_text("log_level: debug\n")
        assert load_config().log_level == "debug"

    def test_project_file_beats_user_file(self, isolated):
        user_dir = isolated / "fakehome" / ".logsidian"
        user_dir.mkdir(parents=True)
        (user_dir / "config.yaml").write_text("log_level: debug\n")
        (isolated / "logsidian.yaml").write_text("log_level: error\n")
        assert load_config().log_level == "error"

    def test_cli_path_takes_priority(self, isolated):
        (isolated / "logsidian.yaml").write_text("log_level: error\n")
        explicit = isolated / "other.yaml"
        explicit.write_text("log_level: warn\n")
        assert load_config(str(explicit)).log_level == "warn"

    def test_missing_cli_path(self, isolated):
        with pytest.raises(ValueError, match="not found"):
            load_config(str(isolated / "nope.yaml"))

    def test_empty_file_falls_through(self, isolated):
        (isolated / "logsidian.yaml").write_text("")
        assert load_config() == LogsidianConfig()

    def test_raises_on_invalid_yaml(self, isolated):
        (isolated / "logsidian.yaml").write_text("index: [unclosed\n")
        with pytest.raises(ValueError, match="Invalid YAML"):
            load_config()

    def test_raises_on_non_mapping(self, isolated):
        (isolated / "logsidian.yaml").write_text("- a\n- b\n")
        with pytest.raises(ValueError, match="expected a mapping"):
            load_config()

    def test_raises_on_invalid_config_values(self, isolated):
        (isolated / "logsidian.yaml").write_text("assets:\n  directory: ../escape\n")
        with pytest.raises(ValueError, match="Invalid config"):
            load_config()

    def test_env_vars_expanded(self, isolated, monkeypatch):
        monkeypatch.setenv("GRAPH_INDEX", "/tmp/graph-ids.json")
        (isolated / "logsidian.yaml").write_text('index:\n  path: "${GRAPH_INDEX}"\n')
        assert load_config().index.path == "/tmp/graph-ids.json"


# ── logging ─────────────────────────────────────────────────────────


@pytest.fixture(autouse=True)
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


class TestLogging:
    def test_json_formatter(self):
        record = logging.LogRecord(
            "logsidian.x", logging.WARNING, __file__, 1, "hello %s", ("w",), None
        )
        payload = json.loads(JsonFormatter().format(record))
        assert payload["level"] == "warning"
        assert payload["logger"] == "logsidian.x"
        assert payload["message"] == "hello w"

    def test_configure_sets_level(self):
        configure_logging("error", "json")
        root = logging.getLogger()
        assert root.level == logging.ERROR
        assert isinstance(root.handlers[0].formatter, JsonFormatter)

    def test_configure_replaces_handlers(self):
        configure_logging("debug")
        configure_logging("debug")
        assert len(logging.getLogger().handlers) == 1
