"""Domain model entities."""

from persistweave.domain.model.class_ref import ClassRef
from persistweave.domain.model.configuration import DESCRIPTOR_RELATIVE_PATH, WeaveConfig
from persistweave.domain.model.descriptor import Descriptor
from persistweave.domain.model.discovered_class import DiscoveredClass, class_names
from persistweave.domain.model.enums import LogLevel, MarkerKind
from persistweave.domain.model.package_filter import PackageFilter
from persistweave.domain.model.reconciliation import ReconciliationResult
from persistweave.domain.model.summary import WeaveSummary

__all__ = [
    "DESCRIPTOR_RELATIVE_PATH",
    "ClassRef",
    "Descriptor",
    "DiscoveredClass",
    "LogLevel",
    "MarkerKind",
    "PackageFilter",
    "ReconciliationResult",
    "WeaveConfig",
    "WeaveSummary",
    "class_names",
]
