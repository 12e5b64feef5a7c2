"""Reconciliation result value object."""

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class ReconciliationResult:
    """Outcome of merging discovered classes into a descriptor.

    Additive only: stale declared classes are never computed or removed.

    Attributes:
        to_add: Discovered names that were not declared (now added)
        undeclared: Sorted names reported as a warning, empty for new descriptors
    """

    to_add: frozenset[str]
    undeclared: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        """Validate invariants. FAIL-FIRST."""
        if list(self.undeclared) != sorted(self.undeclared):
            raise ValueError("undeclared must be sorted")
        unknown = set(self.undeclared) - self.to_add
        if unknown:
            raise ValueError(f"undeclared names not in to_add: {sorted(unknown)}")

    @property
    def has_warning(self) -> bool:
        """True when undeclared classes were found in an existing descriptor."""
        return bool(self.undeclared)
