"""Reporter protocol: what the CLI needs from a summary renderer."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from persistweave.domain.model.summary import WeaveSummary


class ReporterProtocol(Protocol):
    """Renders a WeaveSummary.

    Returns text instead of printing; the caller picks stdout, a file or a log.
    """

    def report(self, summary: WeaveSummary) -> str:
        """Render summary of one run.

        Args:
            summary: Outcome returned by the orchestrator.

        Returns:
            Rendered text, newline terminated.
        """
        ...
