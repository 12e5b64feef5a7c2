"""Descriptor store adapter: persistence.xml on the filesystem."""

from __future__ import annotations

import logging
import os
import stat
import tempfile
from pathlib import Path

from persistweave.domain.exceptions import DescriptorWriteError
from persistweave.domain.model.descriptor import Descriptor

logger = logging.getLogger(__name__)


def _file_mode(path: Path) -> int:
    """Permission bits for the written file: kept from an existing file, else umask-based."""
    try:
        return stat.S_IMODE(path.stat().st_mode)
    except FileNotFoundError:
        umask = os.umask(0)
        os.umask(umask)
        return 0o666 & ~umask


class XmlDescriptorStore:
    """Loads, creates and atomically saves persistence descriptors.

    Callers branch on exists() before load(); no locking, the build step
    is assumed to own the descriptor file exclusively.
    """

    def exists(self, path: Path) -> bool:
        """Check if a descriptor file is present."""
        return path.is_file()

    def load(self, path: Path) -> Descriptor:
        """Parse descriptor from disk.

        Raises:
            FileNotFoundError: No file at path
            MalformedDescriptorError: File is not a persistence descriptor
        """
        data = path.read_bytes()
        descriptor = Descriptor.parse(data, source=path)
        logger.debug(
            "Loaded %s: unit %r, %d declared classes",
            path,
            descriptor.unit_name,
            len(descriptor.declared_names()),
        )
        return descriptor

    def create(self, unit_name: str) -> Descriptor:
        """Synthesize an empty descriptor for unit_name."""
        logger.debug("Creating new persistence unit %r", unit_name)
        return Descriptor.empty(unit_name)

    def save(self, descriptor: Descriptor, path: Path) -> None:
        """Write descriptor atomically (temp file + os.replace).

        Parent directories are created; an existing file is overwritten
        and keeps its permission bits.
        A crash never leaves a partially written document at path.

        Raises:
            DescriptorWriteError: Directory creation, write or rename failed
        """
        data = descriptor.serialize()
        temp_path: str | None = None
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            mode = _file_mode(path)
            with tempfile.NamedTemporaryFile(
                mode="wb",
                dir=path.parent,
                prefix=f".{path.name}.",
                suffix=".tmp",
                delete=False,
            ) as f:
                temp_path = f.name
                f.write(data)
                f.flush()
                os.fsync(f.fileno())
            os.chmod(temp_path, mode)
            os.replace(temp_path, path)
        except OSError as e:
            if temp_path is not None and os.path.exists(temp_path):
                os.remove(temp_path)
            raise DescriptorWriteError(path=path, reason=e.strerror or str(e)) from e

        logger.debug("Wrote %s (%d bytes)", path, len(data))
