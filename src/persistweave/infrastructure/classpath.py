"""Classpath walking: directories and jar/zip archives.

Yields ClassRef handles for .class entries under the package filter.
Per-root failures surface as OSError; callers decide whether to skip.
"""

from __future__ import annotations

import logging
import os
import zipfile
import zlib
from pathlib import Path
from typing import TYPE_CHECKING

from persistweave.domain.model.class_ref import ClassRef

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable, Iterator

    from persistweave.domain.model.package_filter import PackageFilter

logger = logging.getLogger(__name__)

CLASS_SUFFIX = ".class"

# Entries that are never persistence classes
_SPECIAL_CLASSES = frozenset({"module-info.class", "package-info.class"})
_METADATA_DIR = "META-INF/"


def resolve_roots(entries: Iterable[Path]) -> tuple[Path, ...]:
    """Keep existing, readable classpath entries, absolute, in first-seen order.

    Unreadable entries are dropped silently (best-effort classpath).
    """
    roots: list[Path] = []
    for entry in entries:
        if entry is None:
            continue
        path = Path(entry).absolute()
        if path in roots:
            continue
        if not path.exists() or not os.access(path, os.R_OK):
            logger.debug("Ignoring unreadable classpath entry %s", path)
            continue
        roots.append(path)
    return tuple(roots)


def class_name_for_entry(entry: str) -> str | None:
    """Convert "com/example/Order.class" to "com.example.Order".

    Returns:
        Class name, or None for non-class and metadata entries
    """
    if not entry.endswith(CLASS_SUFFIX) or entry.startswith(_METADATA_DIR):
        return None
    if entry.rsplit("/", 1)[-1] in _SPECIAL_CLASSES:
        return None
    stem = entry[: -len(CLASS_SUFFIX)]
    if not stem or "" in stem.split("/"):
        return None
    return stem.replace("/", ".")


def iter_classes(root: Path, package_filter: PackageFilter) -> Iterator[ClassRef]:
    """Iterate classes under a classpath root accepted by the filter.

    Args:
        root: Directory or jar/zip archive
        package_filter: Restricts which classes are yielded

    Yields:
        ClassRef per accepted entry; archive handles valid during iteration only

    Raises:
        OSError: Root cannot be opened or read
    """
    if root.is_dir():
        yield from _iter_directory(root, package_filter)
    else:
        yield from _iter_archive(root, package_filter)


def _iter_directory(root: Path, package_filter: PackageFilter) -> Iterator[ClassRef]:
    """Walk directory, pruning subtrees outside the filter.

    Each physical directory is visited once, so symlinks back to an
    ancestor do not recurse.
    """
    root_stat = root.stat()
    visited = {(root_stat.st_dev, root_stat.st_ino)}
    pending = [root]
    while pending:
        directory = pending.pop()
        try:
            children = sorted(directory.iterdir())
        except OSError as e:
            if directory == root:
                raise
            logger.debug("Skipping unreadable directory %s: %s", directory, e)
            continue

        for child in children:
            relative = child.relative_to(root).as_posix()
            if child.is_dir():
                if relative != "META-INF" and package_filter.accepts_path(relative):
                    _push_unvisited(child, root, visited, pending)
                continue

            name = class_name_for_entry(relative)
            if name is None or not package_filter.accepts(name):
                continue
            yield ClassRef(name=name, root=root, entry=relative, opener=child.read_bytes)


def _push_unvisited(
    directory: Path,
    root: Path,
    visited: set[tuple[int, int]],
    pending: list[Path],
) -> None:
    """Queue directory unless it was already seen.

    Symlinks resolving inside root are aliases of directories the walk
    reaches by their real path, and are skipped.
    """
    try:
        if directory.is_symlink() and directory.resolve().is_relative_to(root.resolve()):
            logger.debug("Skipping symlink %s into the scanned tree", directory)
            return
        info = directory.stat()
    except (OSError, RuntimeError) as e:
        logger.debug("Skipping unreadable directory %s: %s", directory, e)
        return
    key = (info.st_dev, info.st_ino)
    if key in visited:
        logger.debug("Skipping already visited directory %s", directory)
        return
    visited.add(key)
    pending.append(directory)


def _iter_archive(root: Path, package_filter: PackageFilter) -> Iterator[ClassRef]:
    """Iterate archive entries; zip errors are reported as OSError."""
    try:
        archive = zipfile.ZipFile(root)
    except zipfile.BadZipFile as e:
        raise OSError(f"not a readable archive: {root}: {e}") from e

    with archive:
        for info in archive.infolist():
            if info.is_dir():
                continue
            name = class_name_for_entry(info.filename)
            if name is None or not package_filter.accepts(name):
                continue
            yield ClassRef(
                name=name,
                root=root,
                entry=info.filename,
                opener=_archive_opener(archive, info),
            )


def _archive_opener(archive: zipfile.ZipFile, info: zipfile.ZipInfo) -> Callable[[], bytes]:
    """Bind archive entry reader; corrupt entries raise OSError."""

    def _open() -> bytes:
        try:
            return archive.read(info)
        except (zipfile.BadZipFile, zlib.error, ValueError) as e:
            raise OSError(f"corrupt archive entry {info.filename}: {e}") from e

    return _open
