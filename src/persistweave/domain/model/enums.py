"""Domain enumerations."""

from __future__ import annotations

import logging
from enum import Enum

from persistweave.domain.exceptions import ConfigurationError

# Annotation packages recognized for every marker kind
_PERSISTENCE_PACKAGES = ("javax/persistence", "jakarta/persistence")


class MarkerKind(Enum):
    """Persistence marker annotation category.

    Value is the annotation simple name shared by javax and jakarta APIs.
    """

    ENTITY = "Entity"
    MAPPED_SUPERCLASS = "MappedSuperclass"
    EMBEDDABLE = "Embeddable"
    CONVERTER = "Converter"

    @property
    def descriptors(self) -> frozenset[str]:
        """JVM field descriptors of the annotation types (Ljavax/persistence/Entity;)."""
        return frozenset(f"L{package}/{self.value};" for package in _PERSISTENCE_PACKAGES)


class LogLevel(Enum):
    """java.util.logging level vocabulary, most to least severe.

    Passed verbatim to the weaver; mapped to a stdlib logging level locally.
    """

    OFF = logging.CRITICAL + 10
    SEVERE = logging.ERROR
    WARNING = logging.WARNING
    INFO = logging.INFO
    CONFIG = logging.INFO - 5
    FINE = logging.DEBUG
    FINER = logging.DEBUG - 3
    FINEST = logging.DEBUG - 6
    ALL = 1

    @property
    def python_level(self) -> int:
        """Equivalent threshold for the logging module."""
        return self.value

    @classmethod
    def parse(cls, name: str) -> LogLevel:
        """Parse level name, case-insensitive.

        Raises:
            ConfigurationError: Unknown level name.
        """
        try:
            return cls[name.strip().upper()]
        except KeyError as e:
            known = ", ".join(level.name for level in cls)
            raise ConfigurationError(
                parameter="logLevel",
                reason=f"unknown level {name!r}, expected one of {known}",
            ) from e
