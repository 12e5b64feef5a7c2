"""Application services."""

from persistweave.application.services.orchestrator import run
from persistweave.application.services.reconciler import reconcile
from persistweave.application.services.scanner import scan

__all__ = [
    "reconcile",
    "run",
    "scan",
]
