"""
Class dependency graph backed by rustworkx.

The graph is a per-resolution snapshot of an external locator capability
(anything implementing ``ClassGraphSource``). It manages:
- The bimap between class names and rustworkx integer indices.
- The class -> artifact location mapping.
- Direct dependency lookups used by the resolver's traversal.

Every class the source knows becomes a node, located or not. Traversal follows
the dependencies of an unlocated class but records no artifact for it, and
``locations()`` only ever holds real locations.
"""

import logging
from collections import Counter
from pathlib import Path
from typing import (
    Any,
    Dict,
    Iterable,
    Iterator,
    Mapping,
    Optional,
    Protocol,
    Set,
    Union,
    runtime_checkable,
)

import rustworkx as rx

from .exceptions import GraphUnavailableError
from .types import ArtifactLocation, ClassRef

logger = logging.getLogger(__name__)

LocationLike = Union[str, Path, ArtifactLocation]


@runtime_checkable
class ClassGraphSource(Protocol):
    """
    The artifact locator capability.

    Implementations answer three questions about the scanned class universe
    without the resolver knowing how the answers were computed (bytecode
    scanning, a build tool report, a snapshot file...).
    """

    def direct_dependencies_of(self, cls: ClassRef) -> Set[ClassRef]:
        ...

    def location_of(self, cls: ClassRef) -> Optional[ArtifactLocation]:
        ...

    def all_known_classes(self) -> Set[ClassRef]:
        ...


class MappingGraphSource:
    """
    In-memory locator over plain mappings.

    Example:
        ```python
        source = MappingGraphSource(
            dependencies={"com.example.Root": ["com.example.A"]},
            locations={"com.example.A": "/lib/a.jar"},
        )
        ```
    """

    def __init__(
        self,
        dependencies: Optional[Mapping[str, Iterable[str]]] = None,
        locations: Optional[Mapping[str, LocationLike]] = None,
    ):
        self._dependencies: Dict[ClassRef, Set[ClassRef]] = {
            ClassRef(cls): {ClassRef(dep) for dep in deps}
            for cls, deps in (dependencies or {}).items()
        }
        self._locations: Dict[ClassRef, ArtifactLocation] = {
            ClassRef(cls): ArtifactLocation.of(loc)
            for cls, loc in (locations or {}).items()
        }

    def direct_dependencies_of(self, cls: ClassRef) -> Set[ClassRef]:
        return set(self._dependencies.get(cls, set()))

    def location_of(self, cls: ClassRef) -> Optional[ArtifactLocation]:
        return self._locations.get(cls)

    def all_known_classes(self) -> Set[ClassRef]:
        known = set(self._dependencies) | set(self._locations)
        for deps in self._dependencies.values():
            known.update(deps)
        return known


class DependencyGraph:
    """
    Snapshot of class-level dependencies using rustworkx.

    Features:
    - O(1) class lookup via name-to-index bimap
    - Duplicate dependency edges collapse into one
    - Satisfies ``ClassGraphSource`` itself, so snapshots can be re-wrapped
    """

    def __init__(self):
        self._graph = rx.PyDiGraph(multigraph=False)
        self._id_to_idx: Dict[ClassRef, int] = {}
        self._idx_to_id: Dict[int, ClassRef] = {}
        self._locations: Dict[ClassRef, ArtifactLocation] = {}

    @classmethod
    def from_source(cls, source: ClassGraphSource, name: str | None = None) -> "DependencyGraph":
        """
        Build a graph by querying every class the source knows about.

        Args:
            source: The locator capability.
            name: Label used in error messages; defaults to the source's type.

        Returns:
            A fully populated DependencyGraph.

        Raises:
            GraphUnavailableError: If the source fails while being queried.
        """
        label = name or type(source).__name__
        graph = cls()

        try:
            known = source.all_known_classes()
            for class_name in known:
                location = source.location_of(class_name)
                if location is None:
                    logger.debug(f"No artifact location for {class_name}; traversed but not recorded")
                graph.add_class(class_name, location)

            for class_name in list(graph.classes()):
                for dependency in source.direct_dependencies_of(class_name):
                    graph.add_dependency(class_name, dependency)
        except GraphUnavailableError:
            raise
        except Exception as e:
            raise GraphUnavailableError(label, str(e)) from e

        logger.debug(
            f"Built dependency graph from {label}: "
            f"{graph.class_count} classes, {graph.dependency_count} dependencies"
        )
        return graph

    def add_class(self, class_name: str, location: Optional[LocationLike] = None) -> None:
        """Add a class, or update its location when one is given."""
        ref = self._ensure_node(class_name)
        if location is not None:
            self._locations[ref] = ArtifactLocation.of(location)

    def add_dependency(self, source: str, target: str) -> None:
        """Add a directed ``source depends on target`` edge; missing endpoints become unlocated classes."""
        source_idx = self._id_to_idx[self._ensure_node(source)]
        target_idx = self._id_to_idx[self._ensure_node(target)]
        self._graph.add_edge(source_idx, target_idx, None)

    def _ensure_node(self, class_name: str) -> ClassRef:
        ref = ClassRef(class_name)
        if ref not in self._id_to_idx:
            idx = self._graph.add_node(ref)
            self._id_to_idx[ref] = idx
            self._idx_to_id[idx] = ref
        return ref

    def has_class(self, class_name: str) -> bool:
        return class_name in self._id_to_idx

    def direct_dependencies(self, class_name: str) -> Set[ClassRef]:
        """Classes the given class references directly; empty if unknown."""
        idx = self._id_to_idx.get(ClassRef(class_name))
        if idx is None:
            return set()
        return {self._idx_to_id[i] for i in self._graph.successor_indices(idx)}

    def location(self, class_name: str) -> Optional[ArtifactLocation]:
        return self._locations.get(ClassRef(class_name))

    def classes(self) -> Iterator[ClassRef]:
        return iter(self._id_to_idx)

    def locations(self) -> Set[ArtifactLocation]:
        """The full location universe: every artifact backing a located class."""
        return set(self._locations.values())

    # ClassGraphSource protocol

    def direct_dependencies_of(self, cls: ClassRef) -> Set[ClassRef]:
        return self.direct_dependencies(cls)

    def location_of(self, cls: ClassRef) -> Optional[ArtifactLocation]:
        return self.location(cls)

    def all_known_classes(self) -> Set[ClassRef]:
        return set(self._id_to_idx)

    @property
    def class_count(self) -> int:
        return self._graph.num_nodes()

    @property
    def dependency_count(self) -> int:
        return self._graph.num_edges()

    def get_stats(self) -> Dict[str, Any]:
        schemes = Counter(loc.scheme for loc in self._locations.values())
        orphans = len([
            n for n in self._graph.node_indices()
            if self._graph.in_degree(n) == 0 and self._graph.out_degree(n) == 0
        ])
        return {
            "total_classes": self.class_count,
            "total_dependencies": self.dependency_count,
            "total_locations": len(self.locations()),
            "unlocated_classes": self.class_count - len(self._locations),
            "locations_by_scheme": dict(schemes),
            "orphans": orphans,
            "backend": "rustworkx",
        }

    def to_dict(self) -> Dict[str, Any]:
        return {
            "classes": {
                name: {
                    "location": str(self._locations[name]) if name in self._locations else None,
                    "dependencies": sorted(self.direct_dependencies(name)),
                }
                for name in sorted(self._id_to_idx)
            },
        }
