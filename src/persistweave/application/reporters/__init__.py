"""Reporters for weave run summaries.

Output is str, not print(). Caller decides destination.
"""

from persistweave.application.reporters.console import ConsoleConfig, ConsoleReporter
from persistweave.application.reporters.protocol import ReporterProtocol

__all__ = [
    "ConsoleConfig",
    "ConsoleReporter",
    "ReporterProtocol",
]
