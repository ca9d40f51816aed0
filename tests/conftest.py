"""
Shared fixtures for anchorpack tests.
"""

from pathlib import Path

import pytest

from anchorpack.core.archiver import DirectoryArchiver
from anchorpack.core.graph import MappingGraphSource


@pytest.fixture
def archiver(tmp_path: Path) -> DirectoryArchiver:
    """Archiver writing under tmp_path, without atexit registration."""
    root = tmp_path / "archives"
    root.mkdir()
    return DirectoryArchiver(temp_root=root, cleanup_on_exit=False)


@pytest.fixture
def classes_dir(tmp_path: Path) -> Path:
    """A class directory holding a.txt and sub/b.txt."""
    directory = tmp_path / "classes" / "b"
    (directory / "sub").mkdir(parents=True)
    (directory / "a.txt").write_bytes(b"alpha\n")
    (directory / "sub" / "b.txt").write_bytes(b"\x00\x01beta")
    return directory


@pytest.fixture
def chain_source(tmp_path: Path, classes_dir: Path) -> MappingGraphSource:
    """
    Root -> A -> B, with A in a jar and B in a class directory.

    Root itself has no location; it is only known through its dependencies.
    """
    lib = tmp_path / "lib"
    lib.mkdir()
    (lib / "a.jar").write_bytes(b"PK")
    return MappingGraphSource(
        dependencies={
            "com.example.Root": ["com.example.A"],
            "com.example.A": ["com.example.B"],
            "com.example.B": [],
        },
        locations={
            "com.example.A": lib / "a.jar",
            "com.example.B": classes_dir,
        },
    )
