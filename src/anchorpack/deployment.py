"""
Deployment hand-off.

Turns a resolution into a named, ordered collection of archives and passes
their absolute paths to a deploy operation. How that operation reaches a
server is its own business; anchorpack only calls ``deploy(paths)`` once.
"""

import logging
from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Protocol

from .core.archiver import DirectoryArchiver
from .core.graph import ClassGraphSource
from .core.resolver import ClassDependencyResolver, ClassLike
from .core.types import ArtifactLocation

logger = logging.getLogger(__name__)


class DeployOperations(Protocol):
    """Anything that accepts an ordered list of local archive paths."""

    def deploy(self, paths: List[str]) -> None:
        ...


@dataclass
class DeploymentCollection:
    """
    Archives to deploy under one name.

    Attributes:
        name: Usually the class that requested the deployment.
        archives: Archive locations, in deployment order.
    """

    name: str
    archives: List[ArtifactLocation] = field(default_factory=list)

    def __post_init__(self):
        if not self.name:
            raise ValueError("DeploymentCollection requires a name")

    def paths(self) -> List[str]:
        """Absolute local paths of the archives, in order."""
        return [archive.as_posix_path() for archive in self.archives]

    def is_empty(self) -> bool:
        return not self.archives

    def deploy_to(self, operations: DeployOperations) -> None:
        """Hand every archive path to ``operations`` in a single call."""
        paths = self.paths()
        logger.info(f"Deploying {len(paths)} archives for {self.name}")
        operations.deploy(paths)


def collect_deployment(
    name: str,
    anchors: Iterable[ClassLike],
    source: ClassGraphSource,
    exclusions: Iterable[str] = (),
    archive: bool = True,
    archiver: Optional[DirectoryArchiver] = None,
) -> DeploymentCollection:
    """
    Resolve ``anchors`` and package the result for deployment.

    Args:
        name: Collection name.
        anchors: Root classes whose dependencies get deployed.
        source: Locator capability.
        exclusions: Literal substrings removing matching locations.
        archive: Convert directory locations into archives (default True,
            since deploy operations expect single files).
        archiver: Archiver to use; defaults to a standard ``DirectoryArchiver``.

    Returns:
        DeploymentCollection with archives sorted by path.
    """
    resolver = (
        ClassDependencyResolver(source, archiver=archiver)
        .with_classes(anchors)
        .excluding(*exclusions)
    )
    locations = resolver.process(create_archive_from_dir=archive)
    return DeploymentCollection(
        name=name,
        archives=sorted(locations, key=lambda loc: loc.as_posix_path()),
    )
