"""Persistence descriptor (persistence.xml) document model.

Wraps an ElementTree document behind declared_names/add_names/serialize.
Everything outside the <class> entries of the first persistence unit is
kept as parsed (comments, other units, properties, namespace).
"""

from __future__ import annotations

import xml.etree.ElementTree as ET
from typing import TYPE_CHECKING

from persistweave.domain.exceptions import MalformedDescriptorError

if TYPE_CHECKING:
    from collections.abc import Iterable
    from pathlib import Path

PERSISTENCE_NAMESPACE = "http://xmlns.jcp.org/xml/ns/persistence"
PERSISTENCE_VERSION = "2.1"
SCHEMA_LOCATION = f"{PERSISTENCE_NAMESPACE} {PERSISTENCE_NAMESPACE}/persistence_2_1.xsd"

_XSI_NAMESPACE = "http://www.w3.org/2001/XMLSchema-instance"

# persistence-unit children that the schema places after <class>
_AFTER_CLASS = frozenset(
    {
        "exclude-unlisted-classes",
        "shared-cache-mode",
        "validation-mode",
        "properties",
    },
)


def _split_tag(tag: str) -> tuple[str, str]:
    """Split "{ns}local" into (ns, local); ns is "" when unqualified."""
    if tag.startswith("{"):
        namespace, _, local = tag[1:].partition("}")
        return namespace, local
    return "", tag


class Descriptor:
    """In-memory persistence.xml document.

    Declared class names have set semantics; on serialization they are
    written sorted and de-duplicated, so repeated saves are diff-stable.

    Attributes:
        source: File the document was loaded from, None if synthesized
    """

    __slots__ = ("_root", "_namespace", "_unit", "source")

    def __init__(self, root: ET.Element, *, source: Path | None = None) -> None:
        """Wrap a parsed <persistence> element.

        Raises:
            MalformedDescriptorError: Root is not <persistence>, no unit, or unit has no name
        """
        if not isinstance(root.tag, str):
            raise MalformedDescriptorError(path=source, reason="document has no root element")

        namespace, local = _split_tag(root.tag)
        if local != "persistence":
            raise MalformedDescriptorError(
                path=source,
                reason=f"root element must be <persistence>, got <{local}>",
            )

        unit = root.find(self._qualify(namespace, "persistence-unit"))
        if unit is None:
            raise MalformedDescriptorError(path=source, reason="no <persistence-unit> element")
        if not unit.get("name"):
            raise MalformedDescriptorError(path=source, reason="<persistence-unit> has no name")

        self._root = root
        self._namespace = namespace
        self._unit = unit
        self.source = source

    @classmethod
    def parse(cls, data: bytes, *, source: Path | None = None) -> Descriptor:
        """Parse serialized document.

        Args:
            data: Raw XML bytes
            source: Origin file for diagnostics

        Returns:
            Descriptor wrapping the parsed document

        Raises:
            MalformedDescriptorError: Not well-formed XML or not a persistence document
        """
        parser = ET.XMLParser(target=ET.TreeBuilder(insert_comments=True))
        try:
            root = ET.fromstring(data, parser=parser)
        except ET.ParseError as e:
            raise MalformedDescriptorError(path=source, reason=str(e)) from e
        return cls(root, source=source)

    @classmethod
    def empty(cls, unit_name: str) -> Descriptor:
        """Create minimal valid descriptor with one empty persistence unit.

        Raises:
            ValueError: If unit_name is empty
        """
        if not unit_name:
            raise ValueError("unit_name must not be empty")

        root = ET.Element(
            cls._qualify(PERSISTENCE_NAMESPACE, "persistence"),
            {
                "version": PERSISTENCE_VERSION,
                f"{{{_XSI_NAMESPACE}}}schemaLocation": SCHEMA_LOCATION,
            },
        )
        ET.SubElement(
            root,
            cls._qualify(PERSISTENCE_NAMESPACE, "persistence-unit"),
            {"name": unit_name},
        )
        return cls(root)

    @property
    def unit_name(self) -> str:
        """Name of the persistence unit being reconciled."""
        return self._unit.get("name", "")

    @property
    def version(self) -> str | None:
        """Schema version declared on the root element."""
        return self._root.get("version")

    @property
    def namespace(self) -> str:
        """Document namespace, "" for an unqualified document."""
        return self._namespace

    @property
    def is_new(self) -> bool:
        """True when synthesized rather than loaded from disk."""
        return self.source is None

    def declared_names(self) -> frozenset[str]:
        """Class names listed in the persistence unit."""
        return frozenset(self._declared_in_order())

    def add_names(self, names: Iterable[str]) -> frozenset[str]:
        """Declare classes, skipping already declared ones.

        Args:
            names: Fully qualified class names

        Returns:
            Names that were actually added
        """
        declared = self.declared_names()
        added = frozenset(name for name in names if name and name not in declared)
        if added:
            self._rewrite_classes(declared | added)
        return added

    def serialize(self) -> bytes:
        """Render document as UTF-8 XML with sorted, unique <class> entries."""
        self._rewrite_classes(self.declared_names())
        ET.indent(self._root, space="    ")
        if self._namespace:
            ET.register_namespace("", self._namespace)
        body = ET.tostring(self._root, encoding="UTF-8", xml_declaration=True)
        return body + b"\n"

    def _declared_in_order(self) -> list[str]:
        """Class names in document order, stripped, blanks dropped."""
        names: list[str] = []
        for element in self._unit.findall(self._qualify(self._namespace, "class")):
            name = (element.text or "").strip()
            if name:
                names.append(name)
        return names

    def _rewrite_classes(self, names: frozenset[str]) -> None:
        """Replace all <class> children with sorted entries at schema position."""
        class_tag = self._qualify(self._namespace, "class")
        for element in self._unit.findall(class_tag):
            self._unit.remove(element)

        position = len(self._unit)
        for index, child in enumerate(self._unit):
            if isinstance(child.tag, str) and _split_tag(child.tag)[1] in _AFTER_CLASS:
                position = index
                break

        for offset, name in enumerate(sorted(names)):
            element = ET.Element(class_tag)
            element.text = name
            self._unit.insert(position + offset, element)

    @staticmethod
    def _qualify(namespace: str, local: str) -> str:
        """Build ElementTree tag for local name in namespace."""
        return f"{{{namespace}}}{local}" if namespace else local

    def __repr__(self) -> str:
        """Short form: unit name and declared count."""
        return f"Descriptor(unit={self.unit_name!r}, classes={len(self.declared_names())})"
