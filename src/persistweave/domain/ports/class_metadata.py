"""Class metadata reader port (interface)."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

from persistweave.domain.model.enums import MarkerKind

if TYPE_CHECKING:
    from persistweave.domain.model.class_ref import ClassRef


class ClassMetadataReaderPort(ABC):
    """Port for probing compiled classes for marker annotations.

    Infrastructure layer must provide implementation.
    """

    @abstractmethod
    def has_marker(self, class_ref: ClassRef, kind: MarkerKind) -> bool:
        """Check if class carries marker annotation of the given kind.

        Args:
            class_ref: Class to probe
            kind: Marker category

        Returns:
            True if any annotation of that kind is present on the class

        Raises:
            ClassFormatError: If class file cannot be parsed
            OSError: If class file cannot be read
        """
        ...

    def markers(self, class_ref: ClassRef) -> frozenset[MarkerKind]:
        """All marker kinds carried by class (each kind probed independently)."""
        return frozenset(kind for kind in MarkerKind if self.has_marker(class_ref, kind))
