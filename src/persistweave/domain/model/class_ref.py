"""Classpath class reference value object."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path


@dataclass(frozen=True, slots=True)
class ClassRef:
    """Handle to one .class entry on the classpath.

    Content is read lazily; for archive roots the handle is only valid
    while the classpath walk that produced it is in progress.

    Attributes:
        name: Fully qualified name derived from the entry path
        root: Classpath root containing the entry
        entry: Slash-separated path inside the root (com/example/Order.class)
        opener: Returns the raw class file bytes
    """

    name: str
    root: Path
    entry: str
    opener: Callable[[], bytes] = field(repr=False, compare=False)

    def __post_init__(self) -> None:
        """Validate invariants. FAIL-FIRST."""
        if not self.name:
            raise ValueError("class name must not be empty")
        if not self.entry.endswith(".class"):
            raise ValueError(f"entry must be a .class path, got {self.entry!r}")

    @property
    def origin(self) -> str:
        """Human-readable location (dir/entry or archive!entry)."""
        separator = "/" if self.root.is_dir() else "!"
        return f"{self.root}{separator}{self.entry}"

    def read_bytes(self) -> bytes:
        """Raw class file content.

        Raises:
            OSError: Entry cannot be read
        """
        return self.opener()
