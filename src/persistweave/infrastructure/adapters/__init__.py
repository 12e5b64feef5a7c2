"""Infrastructure adapters implementing domain ports."""

from persistweave.infrastructure.adapters.cached_reader import CachedClassFileReader
from persistweave.infrastructure.adapters.classfile_reader import (
    ClassFileInfo,
    ClassFileReader,
    parse_class_file,
)
from persistweave.infrastructure.adapters.descriptor_store import XmlDescriptorStore
from persistweave.infrastructure.adapters.static_weaver import (
    STATIC_WEAVE_MAIN,
    EclipseLinkStaticWeaver,
    default_java,
)

__all__ = [
    "STATIC_WEAVE_MAIN",
    "CachedClassFileReader",
    "ClassFileInfo",
    "ClassFileReader",
    "EclipseLinkStaticWeaver",
    "XmlDescriptorStore",
    "default_java",
    "parse_class_file",
]
