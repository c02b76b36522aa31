"""
Tests for ConfigManager: persisted settings and the FilterConfig they produce.
"""
import json
from unittest.mock import patch

from disasexpl.parsing import FilterConfig, IndentMode
from disasexpl.utils.config import ConfigManager, DEFAULT_CONFIG


def _manager(config_dir):
    with patch.object(ConfigManager, "__init__", lambda self: None):
        mgr = ConfigManager()
    mgr.config_dir = config_dir
    mgr.config_file = config_dir / "config.json"
    mgr.config = mgr.load_config()
    return mgr


class TestConfigDefaults:
    """Test that default configuration values are correct."""

    def test_filters_on_by_default(self):
        assert DEFAULT_CONFIG["trim"] is True
        assert DEFAULT_CONFIG["directives"] is True
        assert DEFAULT_CONFIG["labels"] is True

    def test_comment_stripping_off_by_default(self):
        assert DEFAULT_CONFIG["comment_only"] is False

    def test_no_associations(self):
        assert DEFAULT_CONFIG["associations"] == {}


class TestConfigManagerLoadSave:
    """Test config loading and saving."""

    def test_creates_config_dir(self, tmp_path):
        config_dir = tmp_path / ".disasexpl"
        _manager(config_dir)
        assert config_dir.exists()

    def test_load_returns_defaults_when_no_file(self, tmp_path):
        mgr = _manager(tmp_path / ".disasexpl")
        assert mgr.config == DEFAULT_CONFIG

    def test_load_merges_user_config(self, tmp_path):
        config_dir = tmp_path / ".disasexpl"
        config_dir.mkdir()
        (config_dir / "config.json").write_text(json.dumps({"trim": False}))
        mgr = _manager(config_dir)
        assert mgr.get("trim") is False
        assert mgr.get("labels") is True

    def test_corrupt_file_falls_back_to_defaults(self, tmp_path, capsys):
        config_dir = tmp_path / ".disasexpl"
        config_dir.mkdir()
        (config_dir / "config.json").write_text("{not json")
        mgr = _manager(config_dir)
        assert mgr.config == DEFAULT_CONFIG
        assert "Warning" in capsys.readouterr().out

    def test_set_persists(self, tmp_path):
        config_dir = tmp_path / ".disasexpl"
        mgr = _manager(config_dir)
        mgr.set("hide_functions", "^_")
        saved = json.loads((config_dir / "config.json").read_text())
        assert saved["hide_functions"] == "^_"

    def test_get_default(self, tmp_path):
        mgr = _manager(tmp_path / ".disasexpl")
        assert mgr.get("nope", 42) == 42

    def test_defaults_not_mutated(self, tmp_path):
        mgr = _manager(tmp_path / ".disasexpl")
        mgr.set("trim", False)
        assert DEFAULT_CONFIG["trim"] is True


class TestFilterConfig:
    """Settings -> parser configuration."""

    def test_defaults(self, tmp_path):
        assert _manager(tmp_path / ".disasexpl").filter_config() == FilterConfig()

    def test_settings_applied(self, tmp_path):
        config_dir = tmp_path / ".disasexpl"
        config_dir.mkdir()
        (config_dir / "config.json").write_text(json.dumps({
            "comment_only": True,
            "indent_mode": "delete",
            "hide_functions": "^__",
        }))
        fc = _manager(config_dir).filter_config()
        assert fc.comment_only_stripped is True
        assert fc.indent_mode == IndentMode.DELETE
        assert fc.hide_function_pattern == "^__"

    def test_overrides_win(self, tmp_path):
        fc = _manager(tmp_path / ".disasexpl").filter_config(trim=False, binary=True)
        assert fc.trim is False
        assert fc.binary is True

    def test_none_overrides_ignored(self, tmp_path):
        fc = _manager(tmp_path / ".disasexpl").filter_config(trim=None, directives_stripped=None)
        assert fc.trim is True
        assert fc.directives_stripped is True
