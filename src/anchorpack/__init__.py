"""
anchorpack - Ship the artifacts your classes depend on.

anchorpack resolves which archives and class directories a set of anchor
classes transitively depends on, filters that set, and packs class
directories into archives so everything can be deployed as single files.

Key Components:
- core.graph: Locator capability and dependency graph snapshots
- core.resolver: Transitive closure, exclusions, local-only filtering
- core.archiver: Directory to archive conversion
- deployment: Hand-off of resolved archives to a deploy operation

Usage:
    from anchorpack import ClassDependencyResolver, load_snapshot

    source = load_snapshot("class-graph.json")
    locations = (
        ClassDependencyResolver(source)
        .with_classes("com.example.Root")
        .process(create_archive_from_dir=True)
    )
"""

__version__ = "0.1.0"

from .core.exceptions import AnchorpackError, ArchiveIOError, GraphUnavailableError
from .core.graph import ClassGraphSource, DependencyGraph, MappingGraphSource
from .core.resolver import ClassDependencyResolver, resolve
from .core.archiver import DirectoryArchiver, archive_directories
from .core.snapshot import load_snapshot
from .core.types import ArtifactLocation, ClassRef, ResolutionRequest, ResolutionResult

__all__ = [
    "__version__",
    "AnchorpackError",
    "ArchiveIOError",
    "GraphUnavailableError",
    "ClassGraphSource",
    "DependencyGraph",
    "MappingGraphSource",
    "ClassDependencyResolver",
    "resolve",
    "DirectoryArchiver",
    "archive_directories",
    "load_snapshot",
    "ArtifactLocation",
    "ClassRef",
    "ResolutionRequest",
    "ResolutionResult",
]
