"""Domain exceptions: all public errors of persistweave.

Hexagonal architecture: all exceptions visible to users defined in domain.
Infrastructure/Application use these, not define their own public exceptions.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Sequence
    from pathlib import Path


class PersistWeaveError(Exception):
    """Base for all persistweave error exceptions.

    Allows: except PersistWeaveError to catch all library errors.
    """


class ConfigurationError(PersistWeaveError, ValueError):
    """Bad or contradictory input, detected before scanning begins.

    FAIL-FIRST: raised before any file is written.
    Inherits ValueError for semantic correctness.

    Attributes:
        parameter: Name of the offending input.
        reason: Why the input is invalid.
    """

    def __init__(self, *, parameter: str, reason: str) -> None:
        """Initialize with parameter name and reason."""
        if not parameter:
            raise ValueError("parameter must not be empty")
        if not reason:
            raise ValueError("reason must not be empty")

        self.parameter = parameter
        self.reason = reason
        super().__init__(f"Invalid <{parameter}>: {reason}")


class ScanError(ConfigurationError):
    """No classpath root could be scanned.

    Per-root failures are skipped; this is raised only when none is left.

    Attributes:
        roots: Roots that were supplied (all unusable).
    """

    def __init__(self, *, roots: Sequence[Path]) -> None:
        """Initialize with the unusable roots."""
        self.roots = tuple(roots)
        shown = ", ".join(str(r) for r in self.roots) or "<empty>"
        super().__init__(parameter="classpath", reason=f"no readable classpath roots among: {shown}")


class MalformedDescriptorError(PersistWeaveError, ValueError):
    """Existing persistence.xml cannot be parsed as a persistence descriptor.

    Fatal: never retried.

    Attributes:
        path: Descriptor file, None when parsed from memory.
        reason: Parse failure description.
    """

    def __init__(self, *, path: Path | None, reason: str) -> None:
        """Initialize with file path and error reason."""
        if not reason:
            raise ValueError("reason must not be empty")

        self.path = path
        self.reason = reason
        super().__init__(f"{path or '<memory>'}: {reason}")


class DescriptorWriteError(PersistWeaveError, OSError):
    """Descriptor could not be written (disk full, permission denied, ...).

    Inherits OSError for semantic correctness.

    Attributes:
        path: Target descriptor file.
        reason: Underlying OS error description.
    """

    def __init__(self, *, path: Path, reason: str) -> None:
        """Initialize with target path and reason."""
        self.path = path
        self.reason = reason
        super().__init__(f"Failed to write {path}: {reason}")


class PipelineError(PersistWeaveError, RuntimeError):
    """Failure surfaced from the downstream weaving collaborator.

    Not retried. Original exception preserved via __cause__.

    Attributes:
        reason: Failure description.
        returncode: Weaver process exit status, None if it never ran.
    """

    def __init__(self, *, reason: str, returncode: int | None = None) -> None:
        """Initialize with reason and optional exit status."""
        if not reason:
            raise ValueError("reason must not be empty")

        self.reason = reason
        self.returncode = returncode
        suffix = f" (exit status {returncode})" if returncode is not None else ""
        super().__init__(f"Weaving failed: {reason}{suffix}")


class ClassFormatError(PersistWeaveError, ValueError):
    """Class file is truncated or not a JVM class file.

    Recovered locally by the scanner: the class is skipped.

    Attributes:
        origin: Classpath entry that failed (root!entry for archives).
        reason: Why the class file is invalid.
    """

    def __init__(self, *, origin: str, reason: str) -> None:
        """Initialize with entry origin and reason."""
        self.origin = origin
        self.reason = reason
        super().__init__(f"{origin}: {reason}")
