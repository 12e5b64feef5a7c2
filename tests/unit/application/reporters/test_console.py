"""Tests for ConsoleReporter.

Tests:
- ConsoleConfig default values and customization
- ConsoleReporter report() header, class table and undeclared section
"""

from pathlib import Path

from persistweave.application.reporters.console import ConsoleConfig, ConsoleReporter
from persistweave.domain.model.discovered_class import DiscoveredClass
from persistweave.domain.model.enums import MarkerKind
from persistweave.domain.model.reconciliation import ReconciliationResult
from persistweave.domain.model.summary import WeaveSummary


def _summary(*, undeclared: bool = False, created: bool = True, woven: bool = True) -> WeaveSummary:
    discovered = frozenset(
        {
            DiscoveredClass(name="com.example.Order", kinds=frozenset({MarkerKind.ENTITY})),
            DiscoveredClass(name="com.example.OrderConverter", kinds=frozenset({MarkerKind.CONVERTER})),
        },
    )
    to_add = frozenset({"com.example.OrderConverter"})
    return WeaveSummary(
        discovered=discovered,
        reconciliation=ReconciliationResult(
            to_add=to_add,
            undeclared=tuple(sorted(to_add)) if undeclared else (),
        ),
        descriptor_path=Path("classes/META-INF/persistence.xml"),
        descriptor_created=created,
        woven=woven,
    )


class TestConsoleConfig:
    """Tests for ConsoleConfig."""

    def test_default_values(self) -> None:
        """Default values are set correctly."""
        config = ConsoleConfig()
        assert config.show_classes is True
        assert config.force_terminal is False
        assert config.width == 120

    def test_custom_values(self) -> None:
        """Custom values can be set."""
        config = ConsoleConfig(show_classes=False, force_terminal=True, width=80)
        assert config.show_classes is False
        assert config.force_terminal is True
        assert config.width == 80


class TestConsoleReporter:
    """Tests for ConsoleReporter."""

    def test_report_contains_header(self) -> None:
        """report() contains PERSISTENCE SCAN header and counts."""
        output = ConsoleReporter().report(_summary())
        assert "PERSISTENCE SCAN" in output
        assert "Entities found: 2" in output
        assert "Added: 1" in output
        assert "Woven: yes" in output

    def test_report_descriptor_state(self) -> None:
        """report() tells whether the descriptor was created or updated."""
        assert "created" in ConsoleReporter().report(_summary(created=True))
        assert "updated" in ConsoleReporter().report(_summary(created=False, woven=False))
        assert "Woven: no" in ConsoleReporter().report(_summary(woven=False))

    def test_report_class_table(self) -> None:
        """report() lists classes with markers and status."""
        output = ConsoleReporter().report(_summary())
        assert "com.example.Order" in output
        assert "Entity" in output
        assert "Converter" in output
        assert "added" in output
        assert "declared" in output

    def test_report_without_classes(self) -> None:
        """show_classes=False omits the table."""
        output = ConsoleReporter(ConsoleConfig(show_classes=False)).report(_summary())
        assert "Markers" not in output

    def test_report_undeclared_section(self) -> None:
        """Undeclared classes get their own section."""
        output = ConsoleReporter().report(_summary(undeclared=True))
        assert "NOT PREVIOUSLY DECLARED (1)" in output
        assert "  com.example.OrderConverter" in output

    def test_report_no_undeclared_section(self) -> None:
        """No section when nothing was missing."""
        output = ConsoleReporter().report(_summary())
        assert "NOT PREVIOUSLY DECLARED" not in output

    def test_no_ansi_without_terminal(self) -> None:
        """Plain output when force_terminal is False."""
        output = ConsoleReporter().report(_summary())
        assert "\x1b[" not in output
