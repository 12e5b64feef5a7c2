"""Cached class metadata reader adapter.

Decorator pattern: wraps ClassFileReader with content-hash based caching.
"""

from __future__ import annotations

import hashlib
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from persistweave.domain.ports.class_metadata import ClassMetadataReaderPort
from persistweave.infrastructure.adapters.classfile_reader import ClassFileInfo, ClassFileReader

if TYPE_CHECKING:
    from persistweave.domain.model.class_ref import ClassRef
    from persistweave.domain.model.enums import MarkerKind


@dataclass
class CachedClassFileReader(ClassMetadataReaderPort):
    """Reader with content-hash based caching.

    markers() reads each class once per call; the cache serves repeated
    has_marker() probes and classes seen again on a later scan. Uses
    SHA-256 of class file content for cache invalidation.

    Cache is in-memory only - no persistence between runs.
    Not thread-safe.

    Attributes:
        _inner: Wrapped reader implementation
        _cache: (root, entry) -> (content_hash, ClassFileInfo) mapping
    """

    _inner: ClassFileReader = field(default_factory=ClassFileReader)
    _cache: dict[tuple[str, str], tuple[str, ClassFileInfo]] = field(default_factory=dict)

    def __post_init__(self) -> None:
        """Validate invariants. FAIL-FIRST."""
        if self._inner is None:
            raise TypeError("_inner reader must not be None")

    def read_info(self, class_ref: ClassRef) -> ClassFileInfo:
        """Parse with cache lookup.

        Cache hit: return cached info if content hash matches.
        Cache miss: parse with inner reader, cache result.

        Raises:
            ClassFormatError: If class file cannot be parsed
            OSError: If class file cannot be read
        """
        data = class_ref.read_bytes()
        content_hash = hashlib.sha256(data).hexdigest()
        key = (str(class_ref.root), class_ref.entry)

        cached = self._cache.get(key)
        if cached is not None and cached[0] == content_hash:
            return cached[1]

        info = self._inner.parse(class_ref, data)
        self._cache[key] = (content_hash, info)
        return info

    def has_marker(self, class_ref: ClassRef, kind: MarkerKind) -> bool:
        """Check class annotations against the kind's descriptors."""
        return self.read_info(class_ref).has_marker(kind)

    def markers(self, class_ref: ClassRef) -> frozenset[MarkerKind]:
        """All marker kinds, from a single read and hash of the class file."""
        return self.read_info(class_ref).marker_kinds

    @property
    def size(self) -> int:
        """Number of cached classes."""
        return len(self._cache)
