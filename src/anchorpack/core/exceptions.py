"""
Exception hierarchy for anchorpack.

Unknown root classes are deliberately absent from this module: they are
skipped during resolution rather than reported as failures.
"""

from pathlib import Path
from typing import Union


class AnchorpackError(Exception):
    """Base class for all anchorpack errors."""


class GraphUnavailableError(AnchorpackError):
    """
    Raised when the class dependency graph cannot be built or queried.

    Attributes:
        source: Description of the graph source (snapshot path, backend name).
        message: Human-readable error message.
    """

    def __init__(self, source: str, message: str):
        self.source = source
        self.message = message
        super().__init__(f"Dependency graph '{source}' unavailable: {message}")


class ArchiveIOError(AnchorpackError):
    """
    Raised when a directory cannot be packed into an archive.

    Attributes:
        path: The directory or archive path involved.
        message: Human-readable error message.
    """

    def __init__(self, path: Union[str, Path], message: str):
        self.path = str(path)
        self.message = message
        super().__init__(f"Archive error for {self.path}: {message}")


class ConfigError(AnchorpackError):
    """Raised when a settings file exists but cannot be parsed."""

    def __init__(self, path: Union[str, Path], message: str):
        self.path = str(path)
        self.message = message
        super().__init__(f"Failed to parse {self.path}: {message}")
