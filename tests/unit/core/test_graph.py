"""
Unit tests for the rustworkx-backed DependencyGraph and mapping sources.
"""

import pytest

from anchorpack.core.exceptions import GraphUnavailableError
from anchorpack.core.graph import ClassGraphSource, DependencyGraph, MappingGraphSource
from anchorpack.core.types import ArtifactLocation


@pytest.fixture
def source():
    return MappingGraphSource(
        dependencies={
            "app.Main": ["app.Service", "lib.Util", "ghost.Missing"],
            "app.Service": ["lib.Util", "lib.Util"],
            "lib.Util": [],
        },
        locations={
            "app.Main": "/app/classes",
            "app.Service": "/app/classes/",
            "lib.Util": "file:/lib/util.jar",
            "jdk.Object": "jrt:/java.base",
        },
    )


class TestMappingGraphSource:

    def test_known_classes_cover_both_mappings(self, source):
        assert source.all_known_classes() == {
            "app.Main", "app.Service", "lib.Util", "ghost.Missing", "jdk.Object"
        }

    def test_location_lookup(self, source):
        assert source.location_of("lib.Util") == ArtifactLocation.of("/lib/util.jar")
        assert source.location_of("ghost.Missing") is None

    def test_dependencies_returned_as_copy(self, source):
        deps = source.direct_dependencies_of("app.Main")
        deps.clear()
        assert source.direct_dependencies_of("app.Main") == {"app.Service", "lib.Util", "ghost.Missing"}

    def test_satisfies_protocol(self, source):
        assert isinstance(source, ClassGraphSource)


class TestDependencyGraph:

    def test_classes_without_location_are_kept(self, source):
        graph = DependencyGraph.from_source(source)

        assert graph.has_class("ghost.Missing")
        assert graph.location("ghost.Missing") is None
        assert graph.has_class("jdk.Object")
        assert graph.class_count == 5

    def test_edges_to_unlocated_classes_kept(self, source):
        graph = DependencyGraph.from_source(source)
        assert graph.direct_dependencies("app.Main") == {"app.Service", "lib.Util", "ghost.Missing"}

    def test_duplicate_edges_collapse(self, source):
        graph = DependencyGraph.from_source(source)
        # Main->Service, Main->Util, Main->Missing, Service->Util
        assert graph.dependency_count == 4

    def test_unknown_class_has_no_dependencies(self, source):
        graph = DependencyGraph.from_source(source)
        assert graph.direct_dependencies("nope.Nothing") == set()
        assert graph.location("nope.Nothing") is None

    def test_location_universe_is_deduplicated(self, source):
        graph = DependencyGraph.from_source(source)
        assert graph.locations() == {
            ArtifactLocation.of("/app/classes"),
            ArtifactLocation.of("/lib/util.jar"),
            ArtifactLocation.of("jrt:/java.base"),
        }

    def test_self_dependency_is_kept(self):
        graph = DependencyGraph()
        graph.add_class("a.Self", "/lib/a.jar")
        graph.add_dependency("a.Self", "a.Self")
        assert graph.direct_dependencies("a.Self") == {"a.Self"}

    def test_dependency_on_undeclared_class_adds_unlocated_node(self):
        graph = DependencyGraph()
        graph.add_class("a.A", "/lib/a.jar")
        graph.add_dependency("a.A", "b.Undeclared")

        assert graph.has_class("b.Undeclared")
        assert graph.location("b.Undeclared") is None
        assert graph.locations() == {ArtifactLocation.of("/lib/a.jar")}

    def test_add_class_without_location_keeps_existing(self):
        graph = DependencyGraph()
        graph.add_class("a.A", "/lib/a.jar")
        graph.add_class("a.A")
        assert graph.location("a.A") == ArtifactLocation.of("/lib/a.jar")

    def test_add_class_updates_location(self):
        graph = DependencyGraph()
        graph.add_class("a.A", "/lib/old.jar")
        graph.add_class("a.A", "/lib/new.jar")
        assert graph.class_count == 1
        assert graph.location("a.A") == ArtifactLocation.of("/lib/new.jar")

    def test_graph_is_itself_a_source(self, source):
        graph = DependencyGraph.from_source(source)
        copy = DependencyGraph.from_source(graph)

        assert isinstance(graph, ClassGraphSource)
        assert copy.to_dict() == graph.to_dict()

    def test_stats(self, source):
        stats = DependencyGraph.from_source(source).get_stats()

        assert stats["total_classes"] == 5
        assert stats["total_dependencies"] == 4
        assert stats["total_locations"] == 3
        assert stats["unlocated_classes"] == 1
        assert stats["locations_by_scheme"] == {"file": 3, "jrt": 1}
        assert stats["orphans"] == 1
        assert stats["backend"] == "rustworkx"

    def test_source_failure_wrapped(self):
        class BrokenSource:
            def all_known_classes(self):
                raise RuntimeError("scanner crashed")

            def location_of(self, cls):
                return None

            def direct_dependencies_of(self, cls):
                return set()

        with pytest.raises(GraphUnavailableError, match="scanner crashed") as exc_info:
            DependencyGraph.from_source(BrokenSource(), name="bytecode-scan")

        assert exc_info.value.source == "bytecode-scan"
        assert isinstance(exc_info.value.__cause__, RuntimeError)
