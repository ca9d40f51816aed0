"""
Graph snapshots.

A snapshot is a serialized locator capability: the class -> location and
class -> direct dependencies mappings produced by an external scanner, stored
as JSON or YAML so anchorpack can resolve against it without scanning
anything itself.

Format:
    version: 1
    classes:
      com.example.Root:
        location: classes          # relative to the snapshot file
        dependencies: [com.example.A]
      com.example.A:
        location: file:/lib/a.jar
"""

import json
import logging
from pathlib import Path
from typing import Dict, List, Optional, Union

import yaml
from pydantic import BaseModel, Field, ValidationError

from .exceptions import GraphUnavailableError
from .graph import ClassGraphSource, MappingGraphSource

logger = logging.getLogger(__name__)

SNAPSHOT_VERSION = 1
YAML_SUFFIXES = {".yaml", ".yml"}


class ClassEntry(BaseModel):
    """One class of a snapshot."""
    location: Optional[str] = None
    dependencies: List[str] = Field(default_factory=list)


class GraphSnapshot(BaseModel):
    """Validated snapshot document."""
    version: int = SNAPSHOT_VERSION
    classes: Dict[str, ClassEntry] = Field(default_factory=dict)

    def to_source(self, base_dir: Optional[Path] = None) -> MappingGraphSource:
        """
        Build a locator over this snapshot.

        Relative location paths are resolved against ``base_dir``.
        """
        locations = {}
        for name, entry in self.classes.items():
            if entry.location:
                locations[name] = _absolutize(entry.location, base_dir)
        return MappingGraphSource(
            dependencies={name: entry.dependencies for name, entry in self.classes.items()},
            locations=locations,
        )

    @classmethod
    def from_source(cls, source: ClassGraphSource) -> "GraphSnapshot":
        classes = {}
        for name in sorted(source.all_known_classes()):
            location = source.location_of(name)
            classes[name] = ClassEntry(
                location=str(location) if location is not None else None,
                dependencies=sorted(source.direct_dependencies_of(name)),
            )
        return cls(classes=classes)


def _absolutize(location: str, base_dir: Optional[Path]) -> str:
    if base_dir is None or ":" in location or Path(location).is_absolute():
        return location
    return str(base_dir / location)


def load_snapshot(path: Union[str, Path]) -> MappingGraphSource:
    """
    Load a snapshot file into a locator.

    Args:
        path: ``.json``, ``.yaml`` or ``.yml`` file.

    Returns:
        MappingGraphSource over the snapshot's classes.

    Raises:
        GraphUnavailableError: If the file is missing, unparsable, or does
            not match the snapshot schema.
    """
    path = Path(path)
    if not path.exists():
        raise GraphUnavailableError(str(path), "snapshot file not found")

    try:
        text = path.read_text()
        if path.suffix.lower() in YAML_SUFFIXES:
            data = yaml.safe_load(text) or {}
        else:
            data = json.loads(text)
    except (OSError, ValueError, yaml.YAMLError) as e:
        raise GraphUnavailableError(str(path), f"cannot parse snapshot: {e}") from e

    try:
        snapshot = GraphSnapshot.model_validate(data)
    except ValidationError as e:
        raise GraphUnavailableError(str(path), f"invalid snapshot: {e}") from e

    if snapshot.version != SNAPSHOT_VERSION:
        raise GraphUnavailableError(
            str(path), f"unsupported snapshot version {snapshot.version} (expected {SNAPSHOT_VERSION})"
        )

    logger.debug(f"Loaded snapshot {path} with {len(snapshot.classes)} classes")
    return snapshot.to_source(base_dir=path.parent.resolve())


def dump_snapshot(source: ClassGraphSource, path: Union[str, Path]) -> Path:
    """Write ``source`` as a snapshot file; the format follows the suffix."""
    path = Path(path)
    data = GraphSnapshot.from_source(source).model_dump(mode="json")

    if path.suffix.lower() in YAML_SUFFIXES:
        path.write_text(yaml.safe_dump(data, sort_keys=True))
    else:
        path.write_text(json.dumps(data, indent=2, sort_keys=True))
    return path

