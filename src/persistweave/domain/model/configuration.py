"""Weave run configuration.

Built once at the boundary (CLI or API caller) and validated there.
None = use the documented default.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from persistweave.domain.exceptions import ConfigurationError
from persistweave.domain.model.enums import LogLevel
from persistweave.domain.model.package_filter import PackageFilter

DESCRIPTOR_RELATIVE_PATH = Path("META-INF") / "persistence.xml"


@dataclass(frozen=True, slots=True)
class WeaveConfig:
    """Immutable run configuration with FAIL-FIRST validation.

    Attributes:
        source: Compiled classes directory to weave
        unit_name: Persistence unit name for a newly created descriptor
        target: Output classes directory. None = source (in-place)
        persistence_info: Directory holding META-INF/persistence.xml. None = source
        classpath: Ordered classpath roots to scan. Empty = (source,)
        package_filter: Restricts which classes are scanned
        log_level: Threshold for diagnostics and the weaver
        weave: Run the weaver after the descriptor is saved
    """

    source: Path
    unit_name: str
    target: Path | None = None
    persistence_info: Path | None = None
    classpath: tuple[Path, ...] = ()
    package_filter: PackageFilter = field(default_factory=PackageFilter)
    log_level: LogLevel = LogLevel.WARNING
    weave: bool = True

    def __post_init__(self) -> None:
        """Validate invariants. FAIL-FIRST."""
        if self.source is None:
            raise TypeError("source must not be None")
        if not self.unit_name:
            raise ConfigurationError(parameter="unitName", reason="must not be empty")

    @property
    def target_dir(self) -> Path:
        """Resolved output directory."""
        return self.target if self.target is not None else self.source

    @property
    def persistence_info_dir(self) -> Path:
        """Resolved directory containing META-INF/persistence.xml."""
        return self.persistence_info if self.persistence_info is not None else self.source

    @property
    def descriptor_path(self) -> Path:
        """Location of persistence.xml."""
        return self.persistence_info_dir / DESCRIPTOR_RELATIVE_PATH

    @property
    def classpath_entries(self) -> tuple[Path, ...]:
        """Configured classpath, defaulting to the source directory."""
        return self.classpath or (self.source,)

    def validate_paths(self) -> None:
        """Check filesystem preconditions.

        Kept separate from __post_init__ so configs can be built before
        the build step produces the source directory.

        Raises:
            ConfigurationError: Source directory does not exist
        """
        if not self.source.is_dir():
            raise ConfigurationError(
                parameter="source",
                reason=f"source directory {self.source} does not exist",
            )
