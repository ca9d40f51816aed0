"""
Core modules for anchorpack.

This package contains the fundamental building blocks:
- types: Data structures (ClassRef, ArtifactLocation, ...)
- graph: Locator capability and per-call dependency graph
- resolver: Transitive closure and filtering
- archiver: Directory to archive conversion
- snapshot: JSON/YAML graph snapshots
"""

from .archiver import DirectoryArchiver, archive_directories
from .exceptions import AnchorpackError, ArchiveIOError, ConfigError, GraphUnavailableError
from .graph import ClassGraphSource, DependencyGraph, MappingGraphSource
from .resolver import (
    ClassDependencyResolver, ClosureResult, filter_locations, resolve, resolve_closure
)
from .snapshot import GraphSnapshot, dump_snapshot, load_snapshot
from .types import ArtifactLocation, ClassRef, ResolutionRequest, ResolutionResult

__all__ = [
    # Types
    "ArtifactLocation", "ClassRef", "ResolutionRequest", "ResolutionResult",
    # Errors
    "AnchorpackError", "ArchiveIOError", "ConfigError", "GraphUnavailableError",
    # Graph
    "ClassGraphSource", "DependencyGraph", "MappingGraphSource",
    "GraphSnapshot", "dump_snapshot", "load_snapshot",
    # Resolution
    "ClassDependencyResolver", "ClosureResult", "filter_locations",
    "resolve", "resolve_closure",
    "DirectoryArchiver", "archive_directories",
]
