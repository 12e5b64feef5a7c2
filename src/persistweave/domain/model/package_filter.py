"""Package filter value object."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from persistweave.domain.exceptions import ConfigurationError

if TYPE_CHECKING:
    from collections.abc import Sequence


@dataclass(frozen=True, slots=True)
class PackageFilter:
    """Ordered set of package prefixes restricting the scan.

    Empty = unrestricted. A prefix matches its package and all subpackages,
    on package boundaries: "com.example.orders" matches
    "com.example.orders.model.Line" but not "com.example.ordersx.Foo".

    Attributes:
        packages: Dotted package names, unique, in input order
    """

    packages: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        """Validate invariants. FAIL-FIRST."""
        for package in self.packages:
            if not package:
                raise ValueError("package name must not be empty")
            if package.startswith(".") or package.endswith("."):
                raise ValueError(f"package name must not start or end with '.': {package!r}")
        if len(set(self.packages)) != len(self.packages):
            raise ValueError(f"packages must be unique: {self.packages}")

    @classmethod
    def resolve(
        cls,
        base_package: str | None = None,
        base_packages: Sequence[str] | None = None,
    ) -> PackageFilter:
        """Resolve the two mutually exclusive input forms into one filter.

        Args:
            base_package: Single package, or None
            base_packages: Explicit package list, or None

        Returns:
            PackageFilter (empty when neither form given)

        Raises:
            ConfigurationError: Both forms given, list form empty, or blank name
        """
        if base_package is not None and base_packages is not None:
            raise ConfigurationError(
                parameter="basePackage",
                reason="<basePackage> and <basePackages> are mutually exclusive",
            )

        if base_package is not None:
            names: Sequence[str] = (base_package,)
            parameter = "basePackage"
        elif base_packages is not None:
            if not base_packages:
                raise ConfigurationError(
                    parameter="basePackages",
                    reason="no <basePackage> elements specified within <basePackages>",
                )
            names = base_packages
            parameter = "basePackages"
        else:
            return cls()

        packages: list[str] = []
        for name in names:
            package = name.strip().strip(".")
            if not package:
                raise ConfigurationError(parameter=parameter, reason=f"blank package name {name!r}")
            if package not in packages:
                packages.append(package)

        return cls(tuple(packages))

    @property
    def is_unrestricted(self) -> bool:
        """True when every class passes."""
        return not self.packages

    def accepts(self, class_name: str) -> bool:
        """Check if fully-qualified class name falls under any prefix."""
        if not self.packages:
            return True
        return any(
            class_name.startswith(package + ".") for package in self.packages
        )

    def accepts_path(self, internal_dir: str) -> bool:
        """Check if a directory may contain accepted classes.

        Args:
            internal_dir: Slash-separated package directory ("com/example"),
                "" for the classpath root

        Returns:
            True if the directory is an ancestor or descendant of a prefix
        """
        if not self.packages:
            return True
        package = internal_dir.strip("/").replace("/", ".")
        if not package:
            return True
        for prefix in self.packages:
            if package == prefix or package.startswith(prefix + "."):
                return True
            if prefix.startswith(package + "."):
                return True
        return False

    def __str__(self) -> str:
        """Comma-separated prefixes."""
        return ", ".join(self.packages)
