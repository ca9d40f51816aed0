"""
Unit tests for resolver settings loading and merging.
"""

from pathlib import Path

import pytest

from anchorpack.config import ResolverSettings
from anchorpack.core.exceptions import ConfigError


class TestResolverSettingsLoad:

    def test_missing_file_returns_defaults(self, tmp_path):
        settings = ResolverSettings.load(tmp_path / "anchorpack.toml")

        assert settings == ResolverSettings()
        assert settings.archive_suffix == "-dir"
        assert settings.archive_extension == ".jar"
        assert settings.temp_prefix == "dependency-resolver"

    def test_load_resolver_table(self, tmp_path):
        path = tmp_path / "anchorpack.toml"
        path.write_text("""
[resolver]
anchors = ["com.example.Root"]
exclusions = ["geode-core"]
graph = "build/graph.json"
archive_directories = true
max_workers = 4
""")

        settings = ResolverSettings.load(path)

        assert settings.anchors == ["com.example.Root"]
        assert settings.exclusions == ["geode-core"]
        assert settings.graph == tmp_path.resolve() / "build" / "graph.json"
        assert settings.archive_directories is True
        assert settings.max_workers == 4

    def test_load_pyproject_tool_table(self, tmp_path):
        path = tmp_path / "pyproject.toml"
        path.write_text("""
[project]
name = "demo"

[tool.anchorpack]
anchors = ["a.A"]
archive_extension = ".zip"
""")

        settings = ResolverSettings.load(path)

        assert settings.anchors == ["a.A"]
        assert settings.archive_extension == ".zip"

    def test_pyproject_without_tool_table(self, tmp_path):
        path = tmp_path / "pyproject.toml"
        path.write_text('[project]\nname = "demo"\n')

        assert ResolverSettings.load(path) == ResolverSettings()

    def test_absolute_graph_path_kept(self, tmp_path):
        graph = tmp_path / "elsewhere" / "graph.yaml"
        path = tmp_path / "anchorpack.toml"
        path.write_text(f'[resolver]\ngraph = "{graph.as_posix()}"\n')

        assert ResolverSettings.load(path).graph == graph

    def test_malformed_toml(self, tmp_path):
        path = tmp_path / "anchorpack.toml"
        path.write_text("[resolver\nanchors = ")

        with pytest.raises(ConfigError, match="Failed to parse"):
            ResolverSettings.load(path)

    def test_non_boolean_flag_rejected(self, tmp_path):
        path = tmp_path / "anchorpack.toml"
        path.write_text('[resolver]\narchive_directories = "false"\n')

        with pytest.raises(ConfigError, match="archive_directories' must be true or false"):
            ResolverSettings.load(path)

    def test_unknown_key_rejected(self, tmp_path):
        path = tmp_path / "anchorpack.toml"
        path.write_text('[resolver]\nanchor = ["typo"]\n')

        with pytest.raises(ConfigError, match="Unknown settings: anchor"):
            ResolverSettings.load(path)

    def test_bad_value_type_rejected(self, tmp_path):
        path = tmp_path / "anchorpack.toml"
        path.write_text('[resolver]\nmax_workers = "many"\n')

        with pytest.raises(ConfigError):
            ResolverSettings.load(path)


class TestResolverSettingsDiscover:

    def test_anchorpack_toml_wins(self, tmp_path):
        (tmp_path / "anchorpack.toml").write_text('[resolver]\nanchors = ["from.Anchorpack"]\n')
        (tmp_path / "pyproject.toml").write_text('[tool.anchorpack]\nanchors = ["from.Pyproject"]\n')

        assert ResolverSettings.discover(tmp_path).anchors == ["from.Anchorpack"]

    def test_falls_back_to_pyproject(self, tmp_path):
        (tmp_path / "pyproject.toml").write_text('[tool.anchorpack]\nanchors = ["from.Pyproject"]\n')

        assert ResolverSettings.discover(tmp_path).anchors == ["from.Pyproject"]

    def test_nothing_found(self, tmp_path):
        assert ResolverSettings.discover(tmp_path) == ResolverSettings()


class TestResolverSettingsMerge:

    def test_none_values_ignored(self):
        base = ResolverSettings(archive_directories=True, graph=Path("/g.json"))
        merged = base.merge(archive_directories=None, graph=None)
        assert merged == base

    def test_lists_extend_without_duplicates(self):
        base = ResolverSettings(anchors=["a.A"], exclusions=["x"])

        merged = base.merge(anchors=["b.B", "a.A"], exclusions=["x", "y"])

        assert merged.anchors == ["a.A", "b.B"]
        assert merged.exclusions == ["x", "y"]
        assert base.anchors == ["a.A"]

    def test_scalars_replaced(self):
        merged = ResolverSettings().merge(archive_directories=True, graph=Path("/g.json"))
        assert merged.archive_directories is True
        assert merged.graph == Path("/g.json")

    def test_create_archiver_uses_settings(self):
        settings = ResolverSettings(archive_suffix="-classes", archive_extension=".zip", max_workers=3)

        archiver = settings.create_archiver()

        assert archiver.suffix == "-classes"
        assert archiver.extension == ".zip"
        assert archiver.max_workers == 3
        assert archiver.cleanup_on_exit is True
