"""Domain ports (interfaces)."""

from persistweave.domain.ports.class_metadata import ClassMetadataReaderPort
from persistweave.domain.ports.weaver import WeaveRequest, WeaverPort

__all__ = [
    "ClassMetadataReaderPort",
    "WeaveRequest",
    "WeaverPort",
]
