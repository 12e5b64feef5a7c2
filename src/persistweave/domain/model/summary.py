"""Weave run summary."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pathlib import Path

    from persistweave.domain.model.discovered_class import DiscoveredClass
    from persistweave.domain.model.reconciliation import ReconciliationResult


@dataclass(frozen=True, slots=True)
class WeaveSummary:
    """Outcome of one orchestrator run.

    Attributes:
        discovered: Classes found on the classpath
        reconciliation: What was added to the descriptor
        descriptor_path: Where persistence.xml was written
        descriptor_created: True if no descriptor existed before the run
        woven: True if the weaver ran
    """

    discovered: frozenset[DiscoveredClass]
    reconciliation: ReconciliationResult
    descriptor_path: Path
    descriptor_created: bool
    woven: bool

    @property
    def entity_count(self) -> int:
        """Number of discovered classes."""
        return len(self.discovered)
