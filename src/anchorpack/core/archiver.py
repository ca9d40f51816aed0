"""
Directory Archiver.

Packs directory-backed artifact locations into single-file archives so a
resolution result can be shipped as a set of deployable units.

For each directory a new archive named ``<dirname><suffix><extension>``
(``classes`` -> ``classes-dir.jar``) is written into a temporary directory
created once per run. Every regular file under the directory becomes an entry
whose name is its path relative to the directory root. The archive location
replaces the directory location in the returned set.
"""

from __future__ import annotations

import atexit
import logging
import os
import shutil
import tempfile
import zipfile
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterable, Iterator, List, Optional, Set, Tuple

from .exceptions import ArchiveIOError
from .types import ArtifactLocation

logger = logging.getLogger(__name__)

DEFAULT_ARCHIVE_SUFFIX = "-dir"
DEFAULT_ARCHIVE_EXTENSION = ".jar"
DEFAULT_TEMP_PREFIX = "dependency-resolver"

# Temporary directories removed by the single exit handler
_TEMP_DIRS: Set[Path] = set()
_cleanup_registered = False


@dataclass(frozen=True)
class ArchiveJob:
    """A directory and the archive path it will be written to."""

    source: ArtifactLocation
    target: Path


def iter_directory_files(root: Path) -> Iterator[Tuple[Path, str]]:
    """
    Yield ``(file_path, entry_name)`` for every regular file under ``root``.

    Entry names use ``/`` separators and are relative to ``root``. Directories
    are walked in sorted order so archives come out reproducible.

    Raises:
        OSError: If any part of the tree cannot be listed.
    """

    def _raise(error: OSError) -> None:
        raise error

    for dirpath, dirnames, filenames in os.walk(root, onerror=_raise):
        dirnames.sort()
        for filename in sorted(filenames):
            file_path = Path(dirpath) / filename
            if not file_path.is_file():
                continue
            yield file_path, file_path.relative_to(root).as_posix()


def write_archive(directory: Path, target: Path) -> Path:
    """
    Write every regular file under ``directory`` into a new zip at ``target``.

    A partially written archive is removed before the error is raised.

    Raises:
        ArchiveIOError: If the directory cannot be walked or the archive written.
    """
    try:
        with zipfile.ZipFile(target, "w", zipfile.ZIP_DEFLATED) as archive:
            for file_path, entry_name in iter_directory_files(directory):
                archive.write(file_path, entry_name)
    except (OSError, zipfile.BadZipFile, ValueError) as e:
        target.unlink(missing_ok=True)
        raise ArchiveIOError(directory, str(e)) from e

    return target


class DirectoryArchiver:
    """
    Converts directory locations into temporary archives.

    Attributes:
        suffix: Appended to the directory name (default ``-dir``).
        extension: Archive file extension (default ``.jar``).
        temp_prefix: Prefix of the per-run temporary directory.
        cleanup_on_exit: Register best-effort removal of the temporary
            directory at interpreter exit.
        max_workers: Directories archived concurrently; 1 means sequential.
        temp_root: Parent of the temporary directory; the system default
            when None.
    """

    def __init__(
        self,
        suffix: str = DEFAULT_ARCHIVE_SUFFIX,
        extension: str = DEFAULT_ARCHIVE_EXTENSION,
        temp_prefix: str = DEFAULT_TEMP_PREFIX,
        cleanup_on_exit: bool = True,
        max_workers: int = 1,
        temp_root: Optional[Path] = None,
    ):
        self.suffix = suffix
        self.extension = extension
        self.temp_prefix = temp_prefix
        self.cleanup_on_exit = cleanup_on_exit
        self.max_workers = max(1, max_workers)
        self.temp_root = temp_root

    def archive(self, locations: Iterable[ArtifactLocation]) -> Set[ArtifactLocation]:
        """
        Replace every directory location with a newly built archive.

        Args:
            locations: Resolved artifact locations.

        Returns:
            The non-directory locations plus one archive per directory.
            When there are no directories the input members are returned
            as-is and nothing is written to disk.

        Raises:
            ArchiveIOError: If the temporary directory or an archive cannot
                be created.
        """
        members = set(locations)
        directories = sorted((loc for loc in members if loc.is_directory()), key=str)
        if not directories:
            return members

        temp_dir = self._create_temp_dir()
        jobs = self.plan(directories, temp_dir)

        if self.max_workers > 1 and len(jobs) > 1:
            with ThreadPoolExecutor(max_workers=self.max_workers) as pool:
                archives = list(pool.map(self._run_job, jobs))
        else:
            archives = [self._run_job(job) for job in jobs]

        result = members - set(directories)
        result.update(archives)
        return result

    def plan(self, directories: List[ArtifactLocation], temp_dir: Path) -> List[ArchiveJob]:
        """
        Assign each directory a distinct archive path inside ``temp_dir``.

        Directories sharing a final path component get ``-2``, ``-3``, ...
        so no archive overwrites another.
        """
        used: Dict[str, int] = {}
        jobs = []
        for directory in directories:
            stem = f"{directory.path.name or 'root'}{self.suffix}"
            count = used.get(stem, 0) + 1
            used[stem] = count
            filename = f"{stem}{self.extension}" if count == 1 else f"{stem}-{count}{self.extension}"
            jobs.append(ArchiveJob(source=directory, target=temp_dir / filename))
        return jobs

    def _run_job(self, job: ArchiveJob) -> ArtifactLocation:
        write_archive(job.source.path, job.target)
        logger.info(f"Archived {job.source.path} -> {job.target}")
        return ArtifactLocation.of(job.target)

    def _create_temp_dir(self) -> Path:
        try:
            temp_dir = Path(tempfile.mkdtemp(prefix=self.temp_prefix, dir=self.temp_root))
        except OSError as e:
            raise ArchiveIOError(self.temp_root or tempfile.gettempdir(), f"cannot create temporary directory: {e}") from e

        if self.cleanup_on_exit:
            _register_cleanup(temp_dir)
        return temp_dir


def _register_cleanup(temp_dir: Path) -> None:
    global _cleanup_registered
    _TEMP_DIRS.add(temp_dir)
    if not _cleanup_registered:
        atexit.register(_remove_temp_dirs)
        _cleanup_registered = True


def _remove_temp_dirs() -> None:
    """Best-effort removal of every temporary directory registered so far."""
    while _TEMP_DIRS:
        shutil.rmtree(_TEMP_DIRS.pop(), ignore_errors=True)


def archive_directories(locations: Iterable[ArtifactLocation]) -> Set[ArtifactLocation]:
    """Convenience wrapper using a default ``DirectoryArchiver``."""
    return DirectoryArchiver().archive(locations)
