"""Weaver port (interface) for the downstream bytecode transformation."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pathlib import Path

    from persistweave.domain.model.enums import LogLevel


@dataclass(frozen=True, slots=True)
class WeaveRequest:
    """Input handed to the weaver.

    Attributes:
        source: Compiled classes directory
        target: Output directory (same as source for in-place weaving)
        persistence_info: Directory containing META-INF/persistence.xml
        classpath: Resolved classpath roots
        log_level: Weaver log threshold
    """

    source: Path
    target: Path
    persistence_info: Path
    classpath: tuple[Path, ...]
    log_level: LogLevel


class WeaverPort(ABC):
    """Port for the external weaving collaborator.

    Opaque to the core: consumes the descriptor, transforms classes.
    """

    @abstractmethod
    def weave(self, request: WeaveRequest) -> None:
        """Perform weaving.

        Args:
            request: Directories, descriptor location and classpath

        Raises:
            PipelineError: Weaving failed
        """
        ...
