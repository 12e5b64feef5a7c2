"""Orchestrator: scan, load-or-create, reconcile, save, weave.

FAIL-FIRST: configuration is checked before anything is scanned or
written; any component failure aborts the run.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from persistweave.application.services.reconciler import reconcile
from persistweave.application.services.scanner import scan
from persistweave.domain.exceptions import PipelineError
from persistweave.domain.model.summary import WeaveSummary
from persistweave.domain.ports.weaver import WeaveRequest
from persistweave.infrastructure.adapters.descriptor_store import XmlDescriptorStore
from persistweave.infrastructure.adapters.static_weaver import EclipseLinkStaticWeaver
from persistweave.infrastructure.classpath import resolve_roots

if TYPE_CHECKING:
    from pathlib import Path

    from persistweave.domain.model.configuration import WeaveConfig
    from persistweave.domain.ports.class_metadata import ClassMetadataReaderPort
    from persistweave.domain.ports.weaver import WeaverPort

logger = logging.getLogger(__name__)


def run(
    config: WeaveConfig,
    *,
    reader: ClassMetadataReaderPort | None = None,
    store: XmlDescriptorStore | None = None,
    weaver: WeaverPort | None = None,
) -> WeaveSummary:
    """Run one discovery, reconciliation and weaving pass.

    Args:
        config: Validated run configuration.
        reader: Marker probe. None = cached class file reader.
        store: Descriptor IO. None = filesystem XML store.
        weaver: Downstream weaver. None = EclipseLink StaticWeave on PATH.

    Returns:
        WeaveSummary of the run.

    Raises:
        ConfigurationError: Missing source directory.
        ScanError: No readable classpath root.
        MalformedDescriptorError: Existing persistence.xml unparsable.
        DescriptorWriteError: persistence.xml could not be written.
        PipelineError: Weaver failed.
    """
    config.validate_paths()
    store = store if store is not None else XmlDescriptorStore()

    if not config.package_filter.is_unrestricted:
        logger.info(
            "Only entities from base packages '%s' will be included in persistence.xml",
            config.package_filter,
        )

    roots = resolve_roots(config.classpath_entries)
    logger.debug("Scanning class-path: %s", [str(root) for root in roots])

    discovered = scan(roots, config.package_filter, reader)
    logger.info("Entities found: %d", len(discovered))

    descriptor_path = config.descriptor_path
    logger.info("persistence.xml location: %s", descriptor_path)

    created = not store.exists(descriptor_path)
    descriptor = (
        store.create(config.unit_name) if created else store.load(descriptor_path)
    )

    result = reconcile(discovered, descriptor)
    store.save(descriptor, descriptor_path)

    if config.weave:
        _weave(config, roots, weaver)

    return WeaveSummary(
        discovered=discovered,
        reconciliation=result,
        descriptor_path=descriptor_path,
        descriptor_created=created,
        woven=config.weave,
    )


def _weave(
    config: WeaveConfig,
    roots: tuple[Path, ...],
    weaver: WeaverPort | None,
) -> None:
    """Hand off to the weaver; its failures surface as PipelineError."""
    weaver = weaver if weaver is not None else EclipseLinkStaticWeaver()

    logger.info("Source classes dir: %s", config.source)
    logger.info("Target classes dir: %s", config.target_dir)

    request = WeaveRequest(
        source=config.source,
        target=config.target_dir,
        persistence_info=config.persistence_info_dir,
        classpath=roots,
        log_level=config.log_level,
    )
    try:
        weaver.weave(request)
    except PipelineError:
        raise
    except Exception as e:
        raise PipelineError(reason=str(e) or type(e).__name__) from e

    logger.info("Weaving completed")
