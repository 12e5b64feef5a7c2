"""EclipseLink static weaver adapter.

Runs org.eclipse.persistence.tools.weaving.jpa.StaticWeave in a JVM
subprocess. The weaver is opaque: its failures become PipelineError.
"""

from __future__ import annotations

import logging
import os
import re
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

from persistweave.domain.exceptions import PipelineError
from persistweave.domain.ports.weaver import WeaveRequest, WeaverPort

if TYPE_CHECKING:
    from collections.abc import Mapping

logger = logging.getLogger(__name__)

STATIC_WEAVE_MAIN = "org.eclipse.persistence.tools.weaving.jpa.StaticWeave"

# Stack frame and elision lines of a Java stack trace
_TRACE_FRAME = re.compile(r"^(at |\.\.\. \d+ more$)")


def default_java(environ: Mapping[str, str] = os.environ) -> str:
    """Java launcher: $JAVA_HOME/bin/java if set, else "java" on PATH."""
    java_home = environ.get("JAVA_HOME")
    if java_home:
        return str(Path(java_home) / "bin" / "java")
    return "java"


def failure_reason(stderr: str) -> str | None:
    """Most specific message line of weaver stderr.

    For a Java stack trace this is the innermost "Caused by:" line, or the
    exception line itself; frame lines are ignored.
    """
    messages = [
        line.strip()
        for line in stderr.splitlines()
        if line.strip() and not _TRACE_FRAME.match(line.strip())
    ]
    return messages[-1] if messages else None


@dataclass(frozen=True, slots=True)
class EclipseLinkStaticWeaver(WeaverPort):
    """Weaver running EclipseLink's StaticWeave command-line tool.

    Attributes:
        java: Java launcher executable
        weaver_classpath: Jars providing EclipseLink (prepended to the
            request classpath for the JVM)
    """

    java: str = "java"
    weaver_classpath: tuple[Path, ...] = ()

    def __post_init__(self) -> None:
        """Validate invariants. FAIL-FIRST."""
        if not self.java:
            raise ValueError("java must not be empty")

    def command(self, request: WeaveRequest) -> list[str]:
        """Build StaticWeave command line for request."""
        user_classpath = os.pathsep.join(str(p) for p in request.classpath)
        jvm_classpath = os.pathsep.join(
            str(p) for p in (*self.weaver_classpath, *request.classpath)
        )
        return [
            self.java,
            "-cp",
            jvm_classpath,
            STATIC_WEAVE_MAIN,
            "-persistenceinfo",
            str(request.persistence_info),
            "-classpath",
            user_classpath,
            "-loglevel",
            request.log_level.name,
            str(request.source),
            str(request.target),
        ]

    def weave(self, request: WeaveRequest) -> None:
        """Run StaticWeave and wait for it.

        Weaver stdout is relayed to the log at INFO, stderr at WARNING.
        On failure the full stderr is logged at DEBUG.

        Raises:
            PipelineError: JVM could not start or exited non-zero
        """
        command = self.command(request)
        logger.debug("Running weaver: %s", subprocess.list2cmdline(command))

        try:
            completed = subprocess.run(command, check=False, capture_output=True, text=True)
        except OSError as e:
            raise PipelineError(reason=f"cannot start {self.java}: {e}") from e

        for line in completed.stdout.splitlines():
            if line.strip():
                logger.info("[weaver] %s", line)

        if completed.returncode != 0:
            logger.debug("Weaver stderr:\n%s", completed.stderr)
            reason = failure_reason(completed.stderr) or f"{STATIC_WEAVE_MAIN} exited abnormally"
            raise PipelineError(reason=reason, returncode=completed.returncode)

        for line in completed.stderr.splitlines():
            if line.strip():
                logger.warning("[weaver] %s", line)
