"""
Resolver settings.

Settings come from an ``anchorpack.toml`` file (``[resolver]`` table) or from
the ``[tool.anchorpack]`` table of a ``pyproject.toml``. Command line options
are layered on top with ``ResolverSettings.merge``.

Example ``anchorpack.toml``:

    [resolver]
    anchors = ["com.example.Root"]
    exclusions = ["geode-core"]
    graph = "build/class-graph.json"
    archive_directories = true
"""

from __future__ import annotations

import dataclasses
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

from .core.archiver import (
    DEFAULT_ARCHIVE_EXTENSION,
    DEFAULT_ARCHIVE_SUFFIX,
    DEFAULT_TEMP_PREFIX,
    DirectoryArchiver,
)
from .core.exceptions import ConfigError

SETTINGS_FILENAME = "anchorpack.toml"
PYPROJECT_FILENAME = "pyproject.toml"


@dataclass
class ResolverSettings:
    """
    Configuration for a resolution run.

    Attributes:
        anchors: Root class names.
        exclusions: Literal substrings removing matching locations.
        graph: Path to a graph snapshot file.
        archive_directories: Replace directory locations with archives.
        archive_suffix: Appended to a directory name to name its archive.
        archive_extension: Extension of generated archives.
        temp_prefix: Prefix of the per-run temporary directory.
        max_workers: Directories archived concurrently.
    """

    anchors: List[str] = field(default_factory=list)
    exclusions: List[str] = field(default_factory=list)
    graph: Optional[Path] = None
    archive_directories: bool = False
    archive_suffix: str = DEFAULT_ARCHIVE_SUFFIX
    archive_extension: str = DEFAULT_ARCHIVE_EXTENSION
    temp_prefix: str = DEFAULT_TEMP_PREFIX
    max_workers: int = 1

    @classmethod
    def from_dict(cls, data: Dict[str, Any], base_dir: Optional[Path] = None) -> "ResolverSettings":
        """Parse from a TOML table. A relative ``graph`` path is resolved against ``base_dir``."""
        known = {f.name for f in dataclasses.fields(cls)}
        unknown = set(data) - known
        if unknown:
            raise ValueError(f"Unknown settings: {', '.join(sorted(unknown))}")

        graph = data.get("graph")
        if graph is not None:
            graph = Path(graph)
            if base_dir is not None and not graph.is_absolute():
                graph = base_dir / graph

        return cls(
            anchors=list(data.get("anchors", [])),
            exclusions=list(data.get("exclusions", [])),
            graph=graph,
            archive_directories=_expect_bool(data, "archive_directories"),
            archive_suffix=data.get("archive_suffix", DEFAULT_ARCHIVE_SUFFIX),
            archive_extension=data.get("archive_extension", DEFAULT_ARCHIVE_EXTENSION),
            temp_prefix=data.get("temp_prefix", DEFAULT_TEMP_PREFIX),
            max_workers=int(data.get("max_workers", 1)),
        )

    @classmethod
    def load(cls, path: Path) -> "ResolverSettings":
        """
        Load settings from ``anchorpack.toml`` or ``pyproject.toml``.

        Args:
            path: Path to the settings file.

        Returns:
            ResolverSettings: Parsed settings. Defaults if the file does not exist.

        Raises:
            ConfigError: If the file is malformed.
        """
        if not path.exists():
            return cls()

        try:
            with open(path, "rb") as f:
                data = tomllib.load(f)
        except (OSError, tomllib.TOMLDecodeError) as e:
            raise ConfigError(path, str(e)) from e

        if path.name == PYPROJECT_FILENAME:
            section = data.get("tool", {}).get("anchorpack", {})
        else:
            section = data.get("resolver", {})

        try:
            return cls.from_dict(section, base_dir=path.parent.resolve())
        except (TypeError, ValueError) as e:
            raise ConfigError(path, str(e)) from e

    @classmethod
    def discover(cls, directory: Path) -> "ResolverSettings":
        """Load the first of ``anchorpack.toml`` / ``pyproject.toml`` found in ``directory``."""
        for filename in (SETTINGS_FILENAME, PYPROJECT_FILENAME):
            candidate = directory / filename
            if candidate.exists():
                return cls.load(candidate)
        return cls()

    def merge(self, **overrides: Any) -> "ResolverSettings":
        """
        Return a copy with overrides applied.

        ``None`` values are ignored; list values extend the existing lists.
        """
        changes: Dict[str, Any] = {}
        for key, value in overrides.items():
            if value is None:
                continue
            current = getattr(self, key)
            if isinstance(current, list):
                changes[key] = current + [v for v in value if v not in current]
            else:
                changes[key] = value
        return dataclasses.replace(self, **changes)

    def create_archiver(self) -> DirectoryArchiver:
        return DirectoryArchiver(
            suffix=self.archive_suffix,
            extension=self.archive_extension,
            temp_prefix=self.temp_prefix,
            max_workers=self.max_workers,
        )


def _expect_bool(data: Dict[str, Any], key: str, default: bool = False) -> bool:
    value = data.get(key, default)
    if not isinstance(value, bool):
        raise ValueError(f"Setting '{key}' must be true or false, got {value!r}")
    return value
