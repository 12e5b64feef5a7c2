"""Tests for domain/model/descriptor.py."""

from pathlib import Path

import pytest

from persistweave.domain.exceptions import MalformedDescriptorError
from persistweave.domain.model.descriptor import (
    PERSISTENCE_NAMESPACE,
    PERSISTENCE_VERSION,
    Descriptor,
)
from tests.factories import persistence_xml


class TestEmpty:
    """Tests for Descriptor.empty()."""

    def test_stamped_with_unit_name(self) -> None:
        """New descriptor carries the unit name and schema revision."""
        descriptor = Descriptor.empty("shop")

        assert descriptor.unit_name == "shop"
        assert descriptor.version == PERSISTENCE_VERSION
        assert descriptor.namespace == PERSISTENCE_NAMESPACE
        assert descriptor.declared_names() == frozenset()

    def test_is_new(self) -> None:
        """Synthesized descriptors have no source file."""
        descriptor = Descriptor.empty("shop")

        assert descriptor.is_new
        assert descriptor.source is None

    def test_empty_unit_name_raises(self) -> None:
        """Unit name is required."""
        with pytest.raises(ValueError, match="must not be empty"):
            Descriptor.empty("")

    def test_serializes_as_persistence_document(self) -> None:
        """Output is a namespaced persistence document with schema location."""
        data = Descriptor.empty("shop").serialize()

        assert data.startswith(b"<?xml")
        assert f'xmlns="{PERSISTENCE_NAMESPACE}"'.encode() in data
        assert b'version="2.1"' in data
        assert b"xsi:schemaLocation=" in data
        assert b'<persistence-unit name="shop"' in data
        assert b"ns0:" not in data


class TestParse:
    """Tests for Descriptor.parse()."""

    def test_reads_declared_classes(self) -> None:
        """Class entries of the unit are declared names."""
        descriptor = Descriptor.parse(persistence_xml("shop", ["com.a.Order", " com.a.Line "]).encode())

        assert descriptor.unit_name == "shop"
        assert descriptor.declared_names() == frozenset({"com.a.Order", "com.a.Line"})

    def test_unqualified_document(self) -> None:
        """Documents without a namespace are accepted."""
        data = b'<persistence version="1.0"><persistence-unit name="u"><class>a.A</class></persistence-unit></persistence>'

        descriptor = Descriptor.parse(data)

        assert descriptor.namespace == ""
        assert descriptor.declared_names() == frozenset({"a.A"})

    def test_source_recorded(self, tmp_path: Path) -> None:
        """Loaded descriptors remember their file."""
        source = tmp_path / "persistence.xml"

        descriptor = Descriptor.parse(persistence_xml("shop").encode(), source=source)

        assert descriptor.source == source
        assert not descriptor.is_new

    def test_not_xml_raises(self) -> None:
        """Unparsable content is a malformed descriptor."""
        with pytest.raises(MalformedDescriptorError):
            Descriptor.parse(b"<persistence><persistence-unit")

    def test_wrong_root_raises(self) -> None:
        """Root element must be <persistence>."""
        with pytest.raises(MalformedDescriptorError, match="must be <persistence>"):
            Descriptor.parse(b"<project/>")

    def test_missing_unit_raises(self) -> None:
        """A persistence unit is required."""
        with pytest.raises(MalformedDescriptorError, match="no <persistence-unit>"):
            Descriptor.parse(f'<persistence xmlns="{PERSISTENCE_NAMESPACE}"/>'.encode())

    def test_unnamed_unit_raises(self) -> None:
        """Persistence unit must be named."""
        data = f'<persistence xmlns="{PERSISTENCE_NAMESPACE}"><persistence-unit/></persistence>'

        with pytest.raises(MalformedDescriptorError, match="has no name"):
            Descriptor.parse(data.encode())

    def test_error_carries_path(self, tmp_path: Path) -> None:
        """Malformed error names the offending file."""
        source = tmp_path / "persistence.xml"

        with pytest.raises(MalformedDescriptorError) as exc_info:
            Descriptor.parse(b"not xml", source=source)

        assert exc_info.value.path == source


class TestAddNames:
    """Tests for Descriptor.add_names()."""

    def test_returns_only_new_names(self) -> None:
        """Already declared names are not added again."""
        descriptor = Descriptor.parse(persistence_xml("shop", ["com.a.Order"]).encode())

        added = descriptor.add_names({"com.a.Order", "com.a.OrderConverter"})

        assert added == frozenset({"com.a.OrderConverter"})
        assert descriptor.declared_names() == frozenset({"com.a.Order", "com.a.OrderConverter"})

    def test_adding_nothing_is_noop(self) -> None:
        """Empty input adds nothing."""
        descriptor = Descriptor.empty("shop")

        assert descriptor.add_names(set()) == frozenset()
        assert descriptor.declared_names() == frozenset()


class TestSerialize:
    """Tests for Descriptor.serialize()."""

    def test_round_trip(self) -> None:
        """Parsing serialized output yields the same declared set."""
        descriptor = Descriptor.empty("shop")
        descriptor.add_names({"com.b.B", "com.a.A"})

        reloaded = Descriptor.parse(descriptor.serialize())

        assert reloaded.declared_names() == descriptor.declared_names()
        assert reloaded.unit_name == "shop"
        assert reloaded.namespace == PERSISTENCE_NAMESPACE

    def test_lexicographic_order(self) -> None:
        """Class entries are written sorted."""
        descriptor = Descriptor.parse(persistence_xml("shop", ["com.z.Z", "com.a.A"]).encode())
        descriptor.add_names({"com.m.M"})

        data = descriptor.serialize()

        assert data.index(b"com.a.A") < data.index(b"com.m.M") < data.index(b"com.z.Z")

    def test_repeated_saves_identical(self) -> None:
        """Output is diff-stable across repeated serialization."""
        descriptor = Descriptor.empty("shop")
        descriptor.add_names({"com.b.B", "com.a.A"})

        assert descriptor.serialize() == descriptor.serialize()

    def test_duplicates_collapsed(self) -> None:
        """Repeated entries in the input are written once."""
        descriptor = Descriptor.parse(persistence_xml("shop", ["com.a.A", "com.a.A"]).encode())

        data = descriptor.serialize()

        assert data.count(b"<class>com.a.A</class>") == 1

    def test_classes_placed_at_schema_position(self) -> None:
        """<class> goes after provider and before exclude-unlisted-classes/properties."""
        data = f"""<persistence xmlns="{PERSISTENCE_NAMESPACE}" version="2.1">
    <persistence-unit name="shop">
        <provider>org.eclipse.persistence.jpa.PersistenceProvider</provider>
        <exclude-unlisted-classes>true</exclude-unlisted-classes>
        <properties>
            <property name="eclipselink.weaving" value="static"/>
        </properties>
    </persistence-unit>
</persistence>"""
        descriptor = Descriptor.parse(data.encode())
        descriptor.add_names({"com.a.Order"})

        out = descriptor.serialize()

        assert out.index(b"<provider>") < out.index(b"<class>com.a.Order</class>")
        assert out.index(b"<class>com.a.Order</class>") < out.index(b"<exclude-unlisted-classes>")
        assert b'<property name="eclipselink.weaving" value="static"' in out

    def test_comments_and_other_units_preserved(self) -> None:
        """Structure outside the reconciled class list survives."""
        data = f"""<persistence xmlns="{PERSISTENCE_NAMESPACE}" version="2.1">
    <!-- main unit -->
    <persistence-unit name="shop"><class>com.a.A</class></persistence-unit>
    <persistence-unit name="reporting"><class>com.r.Report</class></persistence-unit>
</persistence>"""
        descriptor = Descriptor.parse(data.encode())
        descriptor.add_names({"com.a.B"})

        out = descriptor.serialize()

        assert b"<!-- main unit -->" in out
        assert b'<persistence-unit name="reporting">' in out
        assert b"<class>com.r.Report</class>" in out
        assert descriptor.declared_names() == frozenset({"com.a.A", "com.a.B"})
