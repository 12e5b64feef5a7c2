"""Command-line entry point: persistweave SOURCE [options].

Stands in for build-tool parameter injection. Configures logging (rich),
builds a WeaveConfig, runs the orchestrator and maps errors to exit codes.
"""

from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path
from typing import TYPE_CHECKING

from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from persistweave import __version__
from persistweave.application.reporters.console import ConsoleReporter
from persistweave.application.services.orchestrator import run
from persistweave.domain.exceptions import ConfigurationError, PersistWeaveError
from persistweave.domain.model.configuration import WeaveConfig
from persistweave.domain.model.enums import LogLevel
from persistweave.domain.model.package_filter import PackageFilter
from persistweave.infrastructure.adapters.static_weaver import (
    EclipseLinkStaticWeaver,
    default_java,
)

if TYPE_CHECKING:
    from collections.abc import Sequence

    from persistweave.application.reporters.protocol import ReporterProtocol

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_CONFIGURATION = 2


def build_parser() -> argparse.ArgumentParser:
    """Argument parser for the persistweave command."""
    parser = argparse.ArgumentParser(
        prog="persistweave",
        description=(
            "Discover JPA entities, mapped superclasses, embeddables and converters, "
            "merge them into META-INF/persistence.xml and run EclipseLink static weaving."
        ),
    )
    parser.add_argument("source", type=Path, help="Compiled classes directory")
    parser.add_argument("--target", type=Path, help="Output classes directory (default: SOURCE)")
    parser.add_argument(
        "--persistence-info",
        type=Path,
        help="Directory containing META-INF/persistence.xml (default: SOURCE)",
    )
    parser.add_argument(
        "--classpath",
        action="append",
        default=[],
        metavar="PATH",
        help=f"Classpath entry; repeatable or '{os.pathsep}'-separated (default: SOURCE)",
    )
    parser.add_argument("--base-package", help="Only scan this package and its subpackages")
    parser.add_argument(
        "--base-packages",
        nargs="*",
        metavar="PACKAGE",
        help="Only scan these packages (exclusive with --base-package)",
    )
    parser.add_argument(
        "--unit-name",
        help="Persistence unit name for a new persistence.xml (default: current directory name)",
    )
    parser.add_argument(
        "--log-level",
        default=LogLevel.WARNING.name,
        help=f"One of {', '.join(level.name for level in LogLevel)} (default: WARNING)",
    )
    parser.add_argument("--java", help="Java launcher (default: $JAVA_HOME/bin/java or java)")
    parser.add_argument(
        "--weaver-classpath",
        action="append",
        default=[],
        metavar="PATH",
        help="EclipseLink jars for the weaver JVM; repeatable or path-separated",
    )
    parser.add_argument(
        "--no-weave",
        action="store_true",
        help="Only update persistence.xml, do not run the weaver",
    )
    parser.add_argument("--quiet", action="store_true", help="Do not print the summary")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def split_paths(values: Sequence[str]) -> tuple[Path, ...]:
    """Flatten repeatable, os.pathsep-separated path options."""
    paths: list[Path] = []
    for value in values:
        paths.extend(Path(part) for part in value.split(os.pathsep) if part)
    return tuple(paths)


def config_from_args(args: argparse.Namespace) -> WeaveConfig:
    """Build run configuration from parsed arguments.

    Raises:
        ConfigurationError: Contradictory or invalid options
    """
    return WeaveConfig(
        source=args.source,
        unit_name=args.unit_name or Path.cwd().name,
        target=args.target,
        persistence_info=args.persistence_info,
        classpath=split_paths(args.classpath),
        package_filter=PackageFilter.resolve(args.base_package, args.base_packages),
        log_level=LogLevel.parse(args.log_level),
        weave=not args.no_weave,
    )


def configure_logging(level: LogLevel, console: Console | None = None) -> None:
    """Route log records through rich at the configured threshold."""
    handler = RichHandler(
        console=console or Console(stderr=True),
        show_time=False,
        show_path=False,
    )
    logging.basicConfig(
        level=level.python_level,
        format="%(message)s",
        handlers=[handler],
        force=True,
    )


def _print_error(console: Console, error: Exception) -> None:
    console.print(f"[bold red]error:[/bold red] {escape(str(error))}", highlight=False, soft_wrap=True)


def main(argv: Sequence[str] | None = None) -> int:
    """Run persistweave; returns process exit status."""
    args = build_parser().parse_args(argv)
    err_console = Console(stderr=True)

    try:
        config = config_from_args(args)
    except ConfigurationError as e:
        _print_error(err_console, e)
        return EXIT_CONFIGURATION

    configure_logging(config.log_level, err_console)
    weaver = EclipseLinkStaticWeaver(
        java=args.java or default_java(),
        weaver_classpath=split_paths(args.weaver_classpath),
    )

    try:
        summary = run(config, weaver=weaver)
    except ConfigurationError as e:
        _print_error(err_console, e)
        return EXIT_CONFIGURATION
    except (PersistWeaveError, OSError) as e:
        _print_error(err_console, e)
        return EXIT_FAILURE

    if not args.quiet:
        reporter: ReporterProtocol = ConsoleReporter()
        Console().print(
            reporter.report(summary),
            end="",
            markup=False,
            highlight=False,
            soft_wrap=True,
        )
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
