"""
Core type definitions for anchorpack.

Classes are identified by their fully-qualified name; the places that define
them (packaged archives, class directories, or virtual/remote locations) are
identified by a normalized URI so that the same artifact reached through
different spellings collapses into one set member.
"""

import os
from pathlib import Path
from typing import Any, List, NewType, Set
from urllib.parse import unquote, urlparse

from pydantic import BaseModel, ConfigDict, Field, field_validator

ClassRef = NewType("ClassRef", str)

FILE_SCHEME = "file"


def normalize_location(value: str) -> str:
    """
    Normalize a URI or bare filesystem path into canonical URI form.

    - Bare paths become absolute ``file`` URIs.
    - Local ``file`` URIs get an absolute, collapsed path with no trailing slash.
    - Any other scheme is kept verbatim apart from lower-casing the scheme.

    Examples:
        "/lib/a.jar"          -> "file:///lib/a.jar"
        "file:/classes/b/"    -> "file:///classes/b"
        "JRT:/java.base"      -> "jrt:/java.base"
    """
    value = value.strip()
    parsed = urlparse(value)
    scheme = parsed.scheme.lower()

    # No scheme, or a Windows drive letter parsed as one
    if len(scheme) <= 1:
        return Path(os.path.abspath(value)).as_uri()

    if scheme != FILE_SCHEME:
        return scheme + value[len(parsed.scheme):]

    if parsed.netloc not in ("", "localhost"):
        return f"{FILE_SCHEME}://{parsed.netloc}{parsed.path}"

    return Path(os.path.abspath(unquote(parsed.path) or "/")).as_uri()


class ArtifactLocation(BaseModel):
    """
    The archive or directory that defines a class.

    Equality and hashing are by normalized URI, so ``/lib/a.jar``,
    ``file:/lib/a.jar`` and ``file:///lib/a.jar`` are the same location.
    """
    uri: str

    model_config = ConfigDict(frozen=True)

    @field_validator("uri", mode="before")
    @classmethod
    def _normalize(cls, value: Any) -> str:
        if isinstance(value, Path):
            value = str(value)
        if not isinstance(value, str) or not value.strip():
            raise ValueError("artifact location must be a non-empty string")
        return normalize_location(value)

    @classmethod
    def of(cls, value: "str | Path | ArtifactLocation") -> "ArtifactLocation":
        """Coerce a URI string, path or existing location into a location."""
        if isinstance(value, ArtifactLocation):
            return value
        return cls(uri=value)

    @property
    def scheme(self) -> str:
        return urlparse(self.uri).scheme

    @property
    def is_local(self) -> bool:
        """True when the location is backed by the local filesystem."""
        return self.scheme.lower() == FILE_SCHEME

    @property
    def path(self) -> Path:
        """
        Filesystem path of a local location.

        Raises:
            ValueError: If the location is not file-scheme.
        """
        if not self.is_local:
            raise ValueError(f"Not a local location: {self.uri}")
        parsed = urlparse(self.uri)
        if parsed.netloc not in ("", "localhost"):
            return Path(f"//{parsed.netloc}{unquote(parsed.path)}")
        return Path(unquote(parsed.path))

    @property
    def name(self) -> str:
        """Final path component, e.g. ``a.jar`` or ``classes``."""
        return Path(unquote(urlparse(self.uri).path)).name

    def is_directory(self) -> bool:
        """Check (at call time) whether this is a local directory."""
        return self.is_local and self.path.is_dir()

    def as_posix_path(self) -> str:
        """Absolute path string, as handed to deploy operations."""
        return self.path.as_posix()

    def match_forms(self) -> List[str]:
        """
        Spellings exclusion patterns are matched against.

        Local locations also match as a plain path and in the single-slash
        ``file:/lib/a.jar`` form, alongside the normalized URI.
        """
        forms = [self.uri]
        if self.is_local:
            forms.append(self.as_posix_path())
            parsed = urlparse(self.uri)
            if parsed.netloc in ("", "localhost"):
                forms.append(f"{FILE_SCHEME}:{parsed.path}")
        return forms

    def __str__(self) -> str:
        return self.uri

    def __repr__(self) -> str:
        return f"ArtifactLocation({self.uri!r})"


class ResolutionRequest(BaseModel):
    """
    Input to a resolution run.

    An empty ``roots`` list means "every class visible to the graph".
    """
    roots: List[str] = Field(default_factory=list)
    exclusions: List[str] = Field(default_factory=list)
    archive_directories: bool = False


class ResolutionResult(BaseModel):
    """
    Output of a resolution run.

    Only ``locations`` is the contractual result; the remaining fields are
    diagnostics for reporting.
    """
    locations: Set[ArtifactLocation] = Field(default_factory=set)
    archives_created: List[ArtifactLocation] = Field(default_factory=list)
    excluded: Set[ArtifactLocation] = Field(default_factory=set)
    skipped_roots: List[str] = Field(default_factory=list)
    visited_classes: int = 0

    def sorted_locations(self) -> List[ArtifactLocation]:
        return sorted(self.locations, key=str)

    def paths(self) -> List[str]:
        """Sorted absolute path strings of the resolved locations."""
        return sorted(loc.as_posix_path() for loc in self.locations)
