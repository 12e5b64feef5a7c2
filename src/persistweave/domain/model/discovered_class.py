"""Discovered class value object."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable

    from persistweave.domain.model.enums import MarkerKind


@dataclass(frozen=True, slots=True)
class DiscoveredClass:
    """Class carrying at least one persistence marker.

    Attributes:
        name: Fully qualified class name (com.example.Order, Outer$Inner for nested)
        kinds: Marker kinds found on the class (non-empty)
    """

    name: str
    kinds: frozenset[MarkerKind]

    def __post_init__(self) -> None:
        """Validate invariants. FAIL-FIRST."""
        if not self.name:
            raise ValueError("class name must not be empty")
        if "/" in self.name:
            raise ValueError(f"class name must be dotted, got {self.name!r}")
        if not self.kinds:
            raise ValueError(f"class {self.name!r} must carry at least one marker kind")


def class_names(discovered: Iterable[DiscoveredClass]) -> frozenset[str]:
    """Names of discovered classes."""
    return frozenset(cls.name for cls in discovered)
