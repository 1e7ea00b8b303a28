"""Tests for configuration loading."""

import pytest

from classloom.core.config import ConfigError, GraphConfig, load_config
from classloom.core.graph_builder import Visibility


class TestDefaults:
    def test_defaults_without_file(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        monkeypatch.delenv("CLASSLOOM_CONFIG", raising=False)
        config = load_config()
        assert config == GraphConfig()
        assert config.min_visibility is Visibility.PUBLIC
        assert config.system_namespaces == ["System", "Microsoft"]
        assert config.use_symbols is True


class TestYamlFile:
    def test_section_and_overrides(self, tmp_path):
        path = tmp_path / "classloom.yaml"
        path.write_text(
            "classloom:\n"
            "  namespaces: [Shop.Models]\n"
            "  min_visibility: protected\n"
            "  exclude_system_types: true\n"
            "  exclude: '*.Designer.cs'\n"
        )
        config = load_config(str(path), min_visibility="internal", type_names=None)
        assert config.namespaces == ["Shop.Models"]
        assert config.min_visibility is Visibility.INTERNAL
        assert config.exclude_system_types is True
        assert config.exclude == ["*.Designer.cs"]
        assert config.type_names == []

    def test_bare_mapping(self, tmp_path):
        path = tmp_path / "settings.yml"
        path.write_text("ignore_dependencies: true\n")
        assert load_config(str(path)).ignore_dependencies is True

    def test_env_var(self, tmp_path, monkeypatch):
        path = tmp_path / "env.yaml"
        path.write_text("type_names: [Order]\n")
        monkeypatch.setenv("CLASSLOOM_CONFIG", str(path))
        assert load_config().type_names == ["Order"]

    def test_cwd_default_file(self, tmp_path, monkeypatch):
        (tmp_path / "classloom.yaml").write_text("use_symbols: false\n")
        monkeypatch.chdir(tmp_path)
        monkeypatch.delenv("CLASSLOOM_CONFIG", raising=False)
        assert load_config().use_symbols is False


class TestInvalid:
    def test_unknown_key(self, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text("colour: blue\n")
        with pytest.raises(ConfigError, match="colour"):
            load_config(str(path))

    def test_bad_visibility(self):
        with pytest.raises(ConfigError):
            GraphConfig.from_dict({"min_visibility": "friends"})

    def test_bad_bool(self):
        with pytest.raises(ConfigError):
            GraphConfig.from_dict({"use_symbols": "yes please"})

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigError):
            load_config(str(tmp_path / "nope.yaml"))

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "broken.yaml"
        path.write_text("namespaces: [unclosed\n")
        with pytest.raises(ConfigError):
            load_config(str(path))
