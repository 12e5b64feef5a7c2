"""JVM class file reader adapter.

Reads just enough of the class file format to answer marker probes:
constant pool, this_class, and class-level annotation attributes.
Fields, methods and code are skipped without interpretation.
FAIL-FIRST: ClassFormatError on truncated or foreign data.
"""

from __future__ import annotations

import struct
from dataclasses import dataclass
from typing import TYPE_CHECKING

from persistweave.domain.exceptions import ClassFormatError
from persistweave.domain.model.enums import MarkerKind
from persistweave.domain.ports.class_metadata import ClassMetadataReaderPort

if TYPE_CHECKING:
    from collections.abc import Iterator

    from persistweave.domain.model.class_ref import ClassRef

CLASS_MAGIC = 0xCAFEBABE

ACC_MODULE = 0x8000

# Attributes holding class-level annotations (CLASS and RUNTIME retention)
ANNOTATION_ATTRIBUTES = frozenset({"RuntimeVisibleAnnotations", "RuntimeInvisibleAnnotations"})

_CONSTANT_UTF8 = 1
_CONSTANT_CLASS = 7

# Constant pool tag -> payload size; Long and Double take two pool slots
_CONSTANT_SIZES = {
    3: 4,  # Integer
    4: 4,  # Float
    5: 8,  # Long
    6: 8,  # Double
    7: 2,  # Class
    8: 2,  # String
    9: 4,  # Fieldref
    10: 4,  # Methodref
    11: 4,  # InterfaceMethodref
    12: 4,  # NameAndType
    15: 3,  # MethodHandle
    16: 2,  # MethodType
    17: 4,  # Dynamic
    18: 4,  # InvokeDynamic
    19: 2,  # Module
    20: 2,  # Package
}
_WIDE_CONSTANTS = frozenset({5, 6})

_CONST_VALUE_TAGS = frozenset("BCDFIJSZs")


@dataclass(frozen=True, slots=True)
class ClassFileInfo:
    """Class metadata extracted from a class file.

    Attributes:
        name: Fully qualified class name (dotted)
        access_flags: Raw class access flags
        annotations: Field descriptors of class-level annotations (Lpkg/Name;)
    """

    name: str
    access_flags: int
    annotations: frozenset[str]

    @property
    def is_module(self) -> bool:
        """True for module-info classes."""
        return bool(self.access_flags & ACC_MODULE)

    def has_marker(self, kind: MarkerKind) -> bool:
        """Check annotations against the kind's descriptors."""
        return not kind.descriptors.isdisjoint(self.annotations)

    @property
    def marker_kinds(self) -> frozenset[MarkerKind]:
        """Every marker kind present on the class."""
        return frozenset(kind for kind in MarkerKind if self.has_marker(kind))


class _Cursor:
    """Bounds-checked big-endian reader over class file bytes."""

    __slots__ = ("_data", "_origin", "_pos")

    def __init__(self, data: bytes, origin: str) -> None:
        self._data = data
        self._origin = origin
        self._pos = 0

    def _take(self, size: int) -> bytes:
        end = self._pos + size
        if end > len(self._data):
            raise ClassFormatError(origin=self._origin, reason=f"truncated at offset {self._pos}")
        chunk = self._data[self._pos : end]
        self._pos = end
        return chunk

    def u1(self) -> int:
        return self._take(1)[0]

    def u2(self) -> int:
        return struct.unpack(">H", self._take(2))[0]

    def u4(self) -> int:
        return struct.unpack(">I", self._take(4))[0]

    def skip(self, size: int) -> None:
        self._take(size)

    def raw(self, size: int) -> bytes:
        return self._take(size)


@dataclass(frozen=True, slots=True)
class _ConstantPool:
    """Constant pool entries needed for name resolution."""

    utf8: dict[int, str]
    classes: dict[int, int]

    def text(self, index: int, origin: str) -> str:
        try:
            return self.utf8[index]
        except KeyError:
            raise ClassFormatError(origin=origin, reason=f"no Utf8 constant at #{index}") from None

    def class_name(self, index: int, origin: str) -> str:
        try:
            name_index = self.classes[index]
        except KeyError:
            raise ClassFormatError(origin=origin, reason=f"no Class constant at #{index}") from None
        return self.text(name_index, origin).replace("/", ".")


def parse_class_file(data: bytes, origin: str = "<memory>") -> ClassFileInfo:
    """Parse class file bytes.

    Args:
        data: Raw .class content
        origin: Entry location for error messages

    Returns:
        ClassFileInfo with name and class-level annotation descriptors

    Raises:
        ClassFormatError: Bad magic, truncated data or dangling pool reference
    """
    cursor = _Cursor(data, origin)
    if cursor.u4() != CLASS_MAGIC:
        raise ClassFormatError(origin=origin, reason="not a class file (bad magic)")
    cursor.skip(4)  # minor_version, major_version

    pool = _read_constant_pool(cursor, origin)

    access_flags = cursor.u2()
    name = pool.class_name(cursor.u2(), origin)
    cursor.skip(2)  # super_class
    cursor.skip(2 * cursor.u2())  # interfaces

    # fields, then methods: same member_info layout
    for _ in range(2):
        for _ in range(cursor.u2()):
            cursor.skip(6)  # access_flags, name_index, descriptor_index
            _skip_attributes(cursor)

    annotations: set[str] = set()
    for _ in range(cursor.u2()):
        attribute_name = pool.text(cursor.u2(), origin)
        length = cursor.u4()
        if attribute_name in ANNOTATION_ATTRIBUTES:
            body = _Cursor(cursor.raw(length), origin)
            annotations.update(_annotation_types(body, pool, origin))
        else:
            cursor.skip(length)

    return ClassFileInfo(name=name, access_flags=access_flags, annotations=frozenset(annotations))


def _read_constant_pool(cursor: _Cursor, origin: str) -> _ConstantPool:
    """Read constant pool, keeping Utf8 and Class entries."""
    count = cursor.u2()
    utf8: dict[int, str] = {}
    classes: dict[int, int] = {}

    index = 1
    while index < count:
        tag = cursor.u1()
        if tag == _CONSTANT_UTF8:
            # Modified UTF-8; names never contain the encodings that differ
            utf8[index] = cursor.raw(cursor.u2()).decode("utf-8", errors="replace")
        elif tag == _CONSTANT_CLASS:
            classes[index] = cursor.u2()
        elif tag in _CONSTANT_SIZES:
            cursor.skip(_CONSTANT_SIZES[tag])
        else:
            raise ClassFormatError(origin=origin, reason=f"unknown constant tag {tag} at #{index}")
        index += 2 if tag in _WIDE_CONSTANTS else 1

    return _ConstantPool(utf8=utf8, classes=classes)


def _skip_attributes(cursor: _Cursor) -> None:
    """Skip attributes_count + attribute_info[]."""
    for _ in range(cursor.u2()):
        cursor.skip(2)  # attribute_name_index
        cursor.skip(cursor.u4())


def _annotation_types(cursor: _Cursor, pool: _ConstantPool, origin: str) -> Iterator[str]:
    """Yield type descriptors of top-level annotations in attribute body."""
    for _ in range(cursor.u2()):
        yield pool.text(cursor.u2(), origin)
        _skip_element_value_pairs(cursor, origin)


def _skip_element_value_pairs(cursor: _Cursor, origin: str) -> None:
    for _ in range(cursor.u2()):
        cursor.skip(2)  # element_name_index
        _skip_element_value(cursor, origin)


def _skip_element_value(cursor: _Cursor, origin: str) -> None:
    """Skip one element_value (JVMS 4.7.16.1)."""
    tag = chr(cursor.u1())
    if tag in _CONST_VALUE_TAGS or tag == "c":
        cursor.skip(2)
    elif tag == "e":
        cursor.skip(4)  # type_name_index, const_name_index
    elif tag == "@":
        cursor.skip(2)  # nested annotation type
        _skip_element_value_pairs(cursor, origin)
    elif tag == "[":
        for _ in range(cursor.u2()):
            _skip_element_value(cursor, origin)
    else:
        raise ClassFormatError(origin=origin, reason=f"unknown element_value tag {tag!r}")


class ClassFileReader(ClassMetadataReaderPort):
    """Marker probe backed by direct class file parsing.

    Parses on every call; wrap with CachedClassFileReader to parse once.
    """

    def read_info(self, class_ref: ClassRef) -> ClassFileInfo:
        """Parse class and check it is stored under its own name.

        Raises:
            ClassFormatError: Unparsable, module-info, or name/path mismatch
            OSError: Entry cannot be read
        """
        return self.parse(class_ref, class_ref.read_bytes())

    def parse(self, class_ref: ClassRef, data: bytes) -> ClassFileInfo:
        """Parse already-read content of class_ref (see read_info)."""
        info = parse_class_file(data, class_ref.origin)
        if info.is_module:
            raise ClassFormatError(origin=class_ref.origin, reason="module-info is not a class")
        if info.name != class_ref.name:
            raise ClassFormatError(
                origin=class_ref.origin,
                reason=f"declares class {info.name}, expected {class_ref.name}",
            )
        return info

    def has_marker(self, class_ref: ClassRef, kind: MarkerKind) -> bool:
        """Check class annotations against the kind's descriptors."""
        return self.read_info(class_ref).has_marker(kind)

    def markers(self, class_ref: ClassRef) -> frozenset[MarkerKind]:
        """All marker kinds, from a single read of the class file."""
        return self.read_info(class_ref).marker_kinds
