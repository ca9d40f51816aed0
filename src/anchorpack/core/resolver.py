"""
Class Dependency Resolver.

Resolves where the classes reachable from a set of root ("anchor") classes
reside, as a set of artifact locations (archives or directories).

Resolution Strategy:
    1. Seed a frontier with the *direct dependencies* of each known root.
       The roots themselves are not seeded; a root's own artifact is only
       included when some visited class depends on it.
    2. Breadth-first closure: record each unvisited class's location (if it
       has one) and queue its direct dependencies. A visited set owned by
       the call guarantees termination on cycles.
    3. Drop locations containing any exclusion substring.
    4. Drop locations not backed by the local filesystem.
    5. Optionally replace directory locations with freshly built archives.

With no roots at all, steps 1-2 are replaced by "every location the graph
knows about".
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Set, Tuple, Union

from .archiver import DirectoryArchiver
from .graph import ClassGraphSource, DependencyGraph
from .types import ArtifactLocation, ClassRef, ResolutionRequest, ResolutionResult

logger = logging.getLogger(__name__)

ClassLike = Union[str, type]


@dataclass
class ClosureResult:
    """
    Result of the traversal stage alone.

    Attributes:
        locations: Distinct locations of every visited class.
        visited: Classes processed by the traversal.
        skipped_roots: Roots the graph does not know about.
    """

    locations: Set[ArtifactLocation] = field(default_factory=set)
    visited: Set[ClassRef] = field(default_factory=set)
    skipped_roots: List[ClassRef] = field(default_factory=list)


def resolve_closure(roots: Iterable[str], graph: DependencyGraph) -> ClosureResult:
    """
    Compute the locations reachable from the direct dependencies of ``roots``.

    Args:
        roots: Root class names. Unknown roots are skipped.
        graph: The dependency graph snapshot for this call.

    Returns:
        ClosureResult with the accumulated locations and visited classes.
    """
    result = ClosureResult()
    frontier: Set[ClassRef] = set()

    for root in roots:
        if not graph.has_class(root):
            logger.debug(f"Root class {root} not present in dependency graph; skipping")
            result.skipped_roots.append(ClassRef(root))
            continue
        frontier.update(graph.direct_dependencies(root))

    seen = result.visited
    while frontier:
        next_frontier: Set[ClassRef] = set()
        for class_name in frontier:
            if class_name in seen:
                continue
            location = graph.location(class_name)
            if location is not None:
                result.locations.add(location)
            seen.add(class_name)
            next_frontier.update(graph.direct_dependencies(class_name))
        frontier = next_frontier

    return result


def filter_locations(
    locations: Iterable[ArtifactLocation],
    exclusions: Iterable[str] = (),
) -> Tuple[Set[ArtifactLocation], Set[ArtifactLocation]]:
    """
    Apply substring exclusions and the local-filesystem filter.

    Exclusions are literal, case-sensitive substrings. A local location is
    excluded when a pattern occurs in its normalized URI (``file:///lib/a.jar``),
    its ``file:/lib/a.jar`` spelling or its plain path. Empty strings are
    ignored.

    Returns:
        (kept, excluded) where ``excluded`` holds only the locations removed
        by an exclusion pattern, not those dropped for their scheme.
    """
    patterns = [e for e in exclusions if e]
    kept: Set[ArtifactLocation] = set()
    excluded: Set[ArtifactLocation] = set()

    for location in locations:
        forms = location.match_forms()
        if any(pattern in form for pattern in patterns for form in forms):
            excluded.add(location)
            continue
        if not location.is_local:
            logger.debug(f"Dropping non-local location {location}")
            continue
        kept.add(location)

    return kept, excluded


def resolve(
    roots: Iterable[str],
    exclusions: Iterable[str],
    graph: DependencyGraph,
) -> Set[ArtifactLocation]:
    """
    Resolve the filtered set of artifact locations backing ``roots``.

    Args:
        roots: Root class names; empty means every class in the graph.
        exclusions: Literal substrings; matching locations are removed.
        graph: The dependency graph snapshot for this call.

    Returns:
        Deduplicated set of local artifact locations. May be empty.
    """
    return _resolve(list(roots), list(exclusions), graph)[0]


def _resolve(
    roots: List[str],
    exclusions: List[str],
    graph: DependencyGraph,
) -> Tuple[Set[ArtifactLocation], Set[ArtifactLocation], ClosureResult]:
    if roots:
        closure = resolve_closure(roots, graph)
    else:
        closure = ClosureResult(
            locations=graph.locations(),
            visited=graph.all_known_classes(),
        )

    kept, excluded = filter_locations(closure.locations, exclusions)
    if closure.locations and not kept and excluded:
        logger.warning(
            f"All {len(closure.locations)} resolved locations were excluded by {exclusions}"
        )
    return kept, excluded, closure


class ClassDependencyResolver:
    """
    Fluent front end for resolving where class dependencies reside.

    Each ``process()``/``run()`` call snapshots the source into a fresh
    DependencyGraph, so separate calls share no mutable state.

    Example:
        ```python
        locations = (
            ClassDependencyResolver(source)
            .with_classes("com.example.Root")
            .excluding("geode-core")
            .process(create_archive_from_dir=True)
        )
        ```
    """

    def __init__(
        self,
        source: ClassGraphSource,
        archiver: Optional[DirectoryArchiver] = None,
        source_name: Optional[str] = None,
    ):
        self.source = source
        self.source_name = source_name
        self.archiver = archiver or DirectoryArchiver()
        self.class_names: List[str] = []
        self.exclusions: List[str] = []

    def with_classes(self, *classes: Union[ClassLike, Iterable[ClassLike]]) -> "ClassDependencyResolver":
        """
        Add root classes.

        Accepts class names, Python classes (their qualified name is used),
        or iterables of either.
        """
        for item in classes:
            if isinstance(item, (str, type)):
                self.class_names.append(_class_name(item))
            else:
                self.class_names.extend(_class_name(c) for c in item)
        return self

    def excluding(self, *exclusions: str) -> "ClassDependencyResolver":
        """Add literal substrings; matching locations are dropped from results."""
        self.exclusions.extend(exclusions)
        return self

    def request(self, create_archive_from_dir: bool = False) -> ResolutionRequest:
        return ResolutionRequest(
            roots=list(self.class_names),
            exclusions=list(self.exclusions),
            archive_directories=create_archive_from_dir,
        )

    def process(self, create_archive_from_dir: bool = False) -> Set[ArtifactLocation]:
        """
        Resolve the configured classes.

        Args:
            create_archive_from_dir: If True, every directory location is
                replaced by a temporary archive holding that directory's
                files at paths relative to the directory.

        Returns:
            Set of artifact locations.

        Raises:
            GraphUnavailableError: If the graph source fails.
            ArchiveIOError: If a directory cannot be archived.
        """
        return self.run(self.request(create_archive_from_dir)).locations

    def run(self, request: ResolutionRequest) -> ResolutionResult:
        """Execute a request and return the locations with diagnostics."""
        graph = DependencyGraph.from_source(self.source, name=self.source_name)
        locations, excluded, closure = _resolve(request.roots, request.exclusions, graph)

        archives: List[ArtifactLocation] = []
        if request.archive_directories:
            before = set(locations)
            locations = self.archiver.archive(locations)
            archives = sorted(locations - before, key=str)

        logger.info(
            f"Resolved {len(locations)} artifact locations from "
            f"{len(request.roots) or 'all'} root classes ({len(closure.visited)} classes visited)"
        )
        return ResolutionResult(
            locations=locations,
            archives_created=archives,
            excluded=excluded,
            skipped_roots=list(closure.skipped_roots),
            visited_classes=len(closure.visited),
        )


def _class_name(item: ClassLike) -> str:
    if isinstance(item, type):
        return f"{item.__module__}.{item.__qualname__}"
    return item
