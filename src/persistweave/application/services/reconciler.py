"""Reconciler service: merge discovered classes into a descriptor.

Additive only. A class that is declared but no longer discovered stays
declared: a narrower package filter on a later run must not drop it.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from persistweave.domain.model.discovered_class import class_names
from persistweave.domain.model.reconciliation import ReconciliationResult

if TYPE_CHECKING:
    from collections.abc import Iterable

    from persistweave.domain.model.descriptor import Descriptor
    from persistweave.domain.model.discovered_class import DiscoveredClass

logger = logging.getLogger(__name__)


def reconcile(
    discovered: Iterable[DiscoveredClass],
    descriptor: Descriptor,
) -> ReconciliationResult:
    """Add net-new discovered classes to descriptor (mutates it).

    Undeclared classes are reported as one warning when the descriptor
    was loaded from disk; a freshly created descriptor has nothing to
    be out of date with.

    Args:
        discovered: Classes found on the classpath.
        descriptor: Loaded or newly created descriptor.

    Returns:
        ReconciliationResult with added and undeclared names.
    """
    already_declared = descriptor.declared_names()
    to_add = class_names(discovered) - already_declared

    undeclared: tuple[str, ...] = ()
    if to_add and not descriptor.is_new:
        undeclared = tuple(sorted(to_add))
        logger.warning(
            "The following classes were not defined in %s even though they are "
            "available on the class path: %s",
            descriptor.source,
            ", ".join(undeclared),
        )

    descriptor.add_names(to_add)
    return ReconciliationResult(to_add=to_add, undeclared=undeclared)
