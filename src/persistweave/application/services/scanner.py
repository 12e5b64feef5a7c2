"""Scanner service: find persistence-marked classes on a classpath.

Best effort: unreadable roots and corrupt class files are skipped.
FAIL-FIRST: ScanError only when no root could be scanned at all.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from persistweave.domain.exceptions import ClassFormatError, ScanError
from persistweave.domain.model.discovered_class import DiscoveredClass
from persistweave.domain.model.package_filter import PackageFilter
from persistweave.infrastructure.adapters.cached_reader import CachedClassFileReader
from persistweave.infrastructure.classpath import iter_classes

if TYPE_CHECKING:
    from collections.abc import Sequence
    from pathlib import Path

    from persistweave.domain.model.class_ref import ClassRef
    from persistweave.domain.model.enums import MarkerKind
    from persistweave.domain.ports.class_metadata import ClassMetadataReaderPort

logger = logging.getLogger(__name__)


def scan(
    roots: Sequence[Path],
    package_filter: PackageFilter | None = None,
    reader: ClassMetadataReaderPort | None = None,
) -> frozenset[DiscoveredClass]:
    """Find classes carrying any persistence marker annotation.

    Args:
        roots: Classpath roots (directories or archives), in classpath order.
        package_filter: Restricts scanned classes. None = unrestricted.
        reader: Marker probe. None = cached class file reader.

    Returns:
        One DiscoveredClass per class name, kinds merged across roots.

    Raises:
        ScanError: No root could be scanned.
    """
    package_filter = package_filter if package_filter is not None else PackageFilter()
    reader = reader if reader is not None else CachedClassFileReader()

    found: dict[str, set[MarkerKind]] = {}
    scanned = 0

    for root in roots:
        try:
            root_found = _scan_root(root, package_filter, reader)
        except OSError as e:
            logger.debug("Skipping unreadable classpath root %s: %s", root, e)
            continue

        scanned += 1
        for name, kinds in root_found.items():
            found.setdefault(name, set()).update(kinds)

    if scanned == 0:
        raise ScanError(roots=roots)

    return frozenset(
        DiscoveredClass(name=name, kinds=frozenset(kinds)) for name, kinds in found.items()
    )


def _scan_root(
    root: Path,
    package_filter: PackageFilter,
    reader: ClassMetadataReaderPort,
) -> dict[str, frozenset[MarkerKind]]:
    """Probe every accepted class in one root.

    Raises:
        OSError: Root cannot be opened or walked
    """
    result: dict[str, frozenset[MarkerKind]] = {}
    for class_ref in iter_classes(root, package_filter):
        kinds = _probe(class_ref, reader)
        if kinds:
            result[class_ref.name] = kinds
    return result


def _probe(class_ref: ClassRef, reader: ClassMetadataReaderPort) -> frozenset[MarkerKind]:
    """Marker kinds on class; empty when the class file is unusable."""
    try:
        return reader.markers(class_ref)
    except (ClassFormatError, OSError) as e:
        logger.debug("Skipping class %s: %s", class_ref.origin, e)
        return frozenset()
