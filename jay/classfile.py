"""
Java class file reader.

Decodes the header, the constant pool and the field table of a class file.
Only major version 61 (Java 17) is accepted.
"""

import logging
from dataclasses import dataclass
from enum import IntFlag
from pathlib import Path
from typing import Optional

from . import constant_pool as cp
from .constant_pool import ConstantPool, ConstantTag, to_internal_index
from .descriptor import parse_field_descriptor
from .errors import (
    InvalidConstantPool,
    InvalidConstantTag,
    InvalidMagicHeader,
    UnresolvedConstant,
    UnsupportedVersion,
)
from .reader import ByteReader

log = logging.getLogger(__name__)


CLASS_MAGIC = 0xCAFEBABE
SUPPORTED_MAJOR_VERSION = 61


class AccessFlags(IntFlag):
    PUBLIC = 0x0001
    PRIVATE = 0x0002
    PROTECTED = 0x0004
    STATIC = 0x0008
    FINAL = 0x0010
    SUPER = 0x0020  # For classes (invokespecial semantics)
    VOLATILE = 0x0040
    TRANSIENT = 0x0080
    INTERFACE = 0x0200
    ABSTRACT = 0x0400
    SYNTHETIC = 0x1000
    ANNOTATION = 0x2000
    ENUM = 0x4000
    MODULE = 0x8000


@dataclass(frozen=True)
class ClassHeader:
    """Version information from the first eight bytes of a class file."""
    major: int
    minor: int


@dataclass(frozen=True)
class Attribute:
    """An attribute whose body was skipped."""
    name: str
    info: bytes


@dataclass(frozen=True)
class Field:
    """Parsed field information."""
    name: str
    descriptor: str
    access_flags: AccessFlags
    attributes: tuple[Attribute, ...] = ()

    @property
    def type_name(self) -> str:
        """The field type in Java syntax, e.g. "java.lang.String[]"."""
        return parse_field_descriptor(self.descriptor).java_name()


@dataclass(frozen=True)
class ClassFile:
    """Parsed class file information."""
    constant_pool: ConstantPool
    name: str
    super_name: Optional[str]  # None only for java/lang/Object
    fields: tuple[Field, ...]
    version: tuple[int, int]
    access_flags: AccessFlags


class ClassFileParser:
    """Reads a class file from an in-memory buffer."""

    def __init__(self, data: bytes):
        self.reader = ByteReader(data)
        self.constant_pool = ConstantPool()

    def _read_index(self) -> int:
        return to_internal_index(self.reader.read_u2())

    def _resolve_utf8(self, index: int, what: str) -> str:
        value = self.constant_pool.get_utf8_at(index)
        if value is None:
            raise InvalidConstantPool(f"Expected UTF8 for {what} at index {index + 1}")
        return value

    def _resolve_class_name(self, index: int, what: str) -> str:
        try:
            return self.constant_pool.get_class_name(index)
        except UnresolvedConstant as e:
            raise InvalidConstantPool(f"Cannot resolve {what} at index {index + 1}: {e}") from e

    def read_header(self) -> ClassHeader:
        magic = self.reader.read_u4()
        if magic != CLASS_MAGIC:
            raise InvalidMagicHeader(f"Invalid class file magic: {hex(magic)}")

        minor = self.reader.read_u2()
        major = self.reader.read_u2()
        if major != SUPPORTED_MAJOR_VERSION:
            raise UnsupportedVersion(
                f"Unsupported class file version {major}.{minor}, "
                f"expected major version {SUPPORTED_MAJOR_VERSION}"
            )
        return ClassHeader(major=major, minor=minor)

    def _read_constant(self, tag: ConstantTag) -> cp.Constant:
        """Read the payload of a single constant pool entry."""
        if tag == ConstantTag.UTF8:
            return cp.Utf8(self.reader.read_utf8())

        elif tag == ConstantTag.INTEGER:
            return cp.Integer(self.reader.read_i4())

        elif tag == ConstantTag.FLOAT:
            return cp.Float(self.reader.read_f4())

        elif tag == ConstantTag.LONG:
            return cp.Long(self.reader.read_i8())

        elif tag == ConstantTag.DOUBLE:
            return cp.Double(self.reader.read_f8())

        elif tag == ConstantTag.CLASS:
            return cp.Class(self._read_index())

        elif tag == ConstantTag.STRING:
            return cp.String(self._read_index())

        elif tag == ConstantTag.FIELDREF:
            class_idx = self._read_index()
            nat_idx = self._read_index()
            return cp.FieldRef(class_idx, nat_idx)

        elif tag == ConstantTag.METHODREF:
            class_idx = self._read_index()
            nat_idx = self._read_index()
            return cp.MethodRef(class_idx, nat_idx)

        elif tag == ConstantTag.INTERFACE_METHODREF:
            class_idx = self._read_index()
            nat_idx = self._read_index()
            return cp.InterfaceMethodRef(class_idx, nat_idx)

        elif tag == ConstantTag.NAME_AND_TYPE:
            name_idx = self._read_index()
            desc_idx = self._read_index()
            return cp.NameAndType(name_idx, desc_idx)

        elif tag == ConstantTag.METHOD_HANDLE:
            kind = self.reader.read_u1()
            ref_idx = self._read_index()
            return cp.MethodHandle(kind, ref_idx)

        elif tag == ConstantTag.METHOD_TYPE:
            return cp.MethodType(self._read_index())

        elif tag == ConstantTag.DYNAMIC:
            bootstrap_idx = self.reader.read_u2()
            nat_idx = self._read_index()
            return cp.Dynamic(bootstrap_idx, nat_idx)

        elif tag == ConstantTag.INVOKE_DYNAMIC:
            bootstrap_idx = self.reader.read_u2()
            nat_idx = self._read_index()
            return cp.InvokeDynamic(bootstrap_idx, nat_idx)

        elif tag == ConstantTag.MODULE:
            return cp.Module(self._read_index())

        elif tag == ConstantTag.PACKAGE:
            return cp.Package(self._read_index())

        raise InvalidConstantTag(f"Unknown constant pool tag: {tag}")

    def read_constant_pool(self) -> ConstantPool:
        """Read the constant pool. The count includes the reserved slot 0."""
        count = self.reader.read_u2()
        log.debug("constant pool count: %d", count)
        slot = 1
        while slot < count:
            offset = self.reader.pos
            raw_tag = self.reader.read_u1()
            try:
                tag = ConstantTag(raw_tag)
            except ValueError as e:
                raise InvalidConstantTag(
                    f"Unknown constant pool tag {raw_tag} at offset {offset}"
                ) from e

            entry = self._read_constant(tag)
            log.debug("#%d = %s", slot, entry)
            self.constant_pool.push(entry)
            slot += 1

            # Long and Double take two slots
            if entry.wide:
                if slot >= count:
                    raise InvalidConstantPool(
                        f"{type(entry).__name__} at #{slot - 1} overruns "
                        f"the constant pool count {count}"
                    )
                self.constant_pool.push(cp.Unusable())
                slot += 1

        invalid = list(self.constant_pool.invalid_entries())
        if invalid:
            log.debug("invalid constant pool entries: %s", [i + 1 for i in invalid])
            raise InvalidConstantPool(
                f"Constant pool has unresolved references at "
                f"{', '.join('#%d' % (i + 1) for i in invalid)}"
            )
        return self.constant_pool

    def read_attributes(self) -> tuple[Attribute, ...]:
        """Read an attribute table, keeping each body as raw bytes."""
        count = self.reader.read_u2()
        attrs = []
        for _ in range(count):
            name = self._resolve_utf8(self._read_index(), "attribute name")
            length = self.reader.read_u4()
            attrs.append(Attribute(name=name, info=self.reader.read_bytes(length)))
        return tuple(attrs)

    def read_field(self) -> Field:
        access = AccessFlags(self.reader.read_u2())
        name = self._resolve_utf8(self._read_index(), "field name")
        descriptor = self._resolve_utf8(self._read_index(), "field descriptor")
        attrs = self.read_attributes()
        log.debug("field %s %s (%d attribute(s))", name, descriptor, len(attrs))

        return Field(
            name=name,
            descriptor=descriptor,
            access_flags=access,
            attributes=attrs,
        )

    def read(self) -> ClassFile:
        """Read the class file up to and including the field table."""
        header = self.read_header()
        pool = self.read_constant_pool()

        access_flags = AccessFlags(self.reader.read_u2())

        this_class = self._resolve_class_name(self._read_index(), "this class")
        super_idx = self.reader.read_u2()
        super_class = None
        if super_idx:
            super_class = self._resolve_class_name(to_internal_index(super_idx), "super class")

        interfaces_count = self.reader.read_u2()
        log.debug("skipping %d interface(s)", interfaces_count)
        self.reader.skip(interfaces_count * 2)

        fields_count = self.reader.read_u2()
        log.debug("fields count: %d", fields_count)
        fields = tuple(self.read_field() for _ in range(fields_count))

        return ClassFile(
            constant_pool=pool,
            name=this_class,
            super_name=super_class,
            fields=fields,
            version=(header.major, header.minor),
            access_flags=access_flags,
        )


def parse(data: bytes) -> ClassFile:
    """Parse a class file held in memory."""
    return ClassFileParser(data).read()


def parse_header(data: bytes) -> ClassHeader:
    """Parse only the magic number and version of a class file."""
    return ClassFileParser(data).read_header()


def read_class_file(path: str | Path) -> ClassFile:
    """Read a single class file."""
    data = Path(path).read_bytes()
    return parse(data)
