"""Tests for core/plugin_config.py — plugins.yaml and options loading."""

import logging

import pytest
import yaml

from hookwright.core.plugin_config import load_plugin_options, load_plugin_registry


@pytest.fixture()
def tmp_yaml(tmp_path):
    """Helper to write YAML content to a temp file and return the path."""

    def _write(content, filename="plugins.yaml"):
        p = tmp_path / filename
        p.write_text(yaml.dump(content), encoding="utf-8")
        return p

    return _write


class TestLoadPluginOptions:
    def test_loads_valid_yaml(self, tmp_yaml):
        path = tmp_yaml({"key": "value", "nested": {"a": 1}}, "options.yaml")
        assert load_plugin_options(path) == {"key": "value", "nested": {"a": 1}}

    def test_missing_file_raises(self, tmp_path):
        with pytest.raises(FileNotFoundError, match="does not exist"):
            load_plugin_options(tmp_path / "nonexistent.yaml")

    def test_empty_file_returns_empty_dict(self, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("", encoding="utf-8")
        assert load_plugin_options(path) == {}

    def test_accepts_string_path(self, tmp_yaml):
        path = tmp_yaml({"x": 1}, "options.yaml")
        assert load_plugin_options(str(path)) == {"x": 1}

    def test_non_dict_content_raises(self, tmp_yaml):
        path = tmp_yaml([1, 2, 3], "options.yaml")
        with pytest.raises(TypeError, match="options document must be a YAML mapping"):
            load_plugin_options(path)


class TestLoadPluginRegistry:
    def test_valid_registry_keeps_order(self, tmp_yaml):
        path = tmp_yaml(
            [
                {"module": "plugins.b", "name": "beta"},
                {"module": "plugins.a", "name": "alpha", "enabled": True},
            ]
        )
        result = load_plugin_registry(path)
        assert [e["name"] for e in result] == ["beta", "alpha"]

    def test_defaults_filled(self, tmp_yaml):
        [entry] = load_plugin_registry(tmp_yaml([{"module": "m", "name": "n"}]))
        assert entry["options"] == {}
        assert entry["depends_on"] == []

    def test_missing_file_returns_empty(self, tmp_path):
        assert load_plugin_registry(tmp_path / "missing.yaml") == []

    def test_empty_file_returns_empty(self, tmp_path):
        path = tmp_path / "plugins.yaml"
        path.write_text("", encoding="utf-8")
        assert load_plugin_registry(path) == []

    def test_root_not_list(self, tmp_yaml, caplog):
        path = tmp_yaml({"module": "m", "name": "n"})
        with caplog.at_level(logging.WARNING):
            assert load_plugin_registry(path) == []
        assert "expected a list of plugins" in caplog.text

    def test_skips_non_dict_entry(self, tmp_yaml, caplog):
        path = tmp_yaml(["just a string", {"module": "m", "name": "n"}])
        with caplog.at_level(logging.WARNING):
            result = load_plugin_registry(path)
        assert [e["name"] for e in result] == ["n"]
        assert "Skipping plugin #1" in caplog.text
        assert "expected a mapping, got str" in caplog.text

    def test_skips_missing_required_fields(self, tmp_yaml, caplog):
        path = tmp_yaml([{"name": "no_module"}, {"module": "no.name"}, {"module": "m", "name": "ok"}])
        with caplog.at_level(logging.WARNING):
            result = load_plugin_registry(path)
        assert [e["name"] for e in result] == ["ok"]
        assert "no module given" in caplog.text
        assert "no name given" in caplog.text

    def test_skips_disabled(self, tmp_yaml):
        path = tmp_yaml([{"module": "m", "name": "off", "enabled": False}])
        assert load_plugin_registry(path) == []

    def test_skips_malformed_options(self, tmp_yaml, caplog):
        path = tmp_yaml(
            [
                {"module": "m", "name": "bad_options", "options": [1]},
                {"module": "m", "name": "bad_depends", "depends_on": "x"},
            ]
        )
        with caplog.at_level(logging.WARNING):
            assert load_plugin_registry(path) == []
        assert "options must be a mapping" in caplog.text
        assert "depends_on must be a list" in caplog.text

    def test_config_file_merged_under_inline_options(self, tmp_yaml):
        tmp_yaml({"a": 1, "b": 1}, "audit.yaml")
        path = tmp_yaml([{"module": "m", "name": "audit", "config": "audit.yaml", "options": {"b": 2}}])
        [entry] = load_plugin_registry(path)
        assert entry["options"] == {"a": 1, "b": 2}

    def test_missing_config_file_raises(self, tmp_yaml):
        path = tmp_yaml([{"module": "m", "name": "audit", "config": "nope.yaml"}])
        with pytest.raises(FileNotFoundError):
            load_plugin_registry(path)
