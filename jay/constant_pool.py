"""
Constant pool entries and the pool that holds them.

Indices stored in entries are 0-based; the class file stores them 1-based.
Every index read from a class file goes through to_internal_index().
"""

from abc import ABC
from dataclasses import dataclass
from enum import IntEnum
from typing import ClassVar, Iterator, Optional, Type

from .errors import InvalidConstantPool, UnresolvedConstant


class ConstantTag(IntEnum):
    UTF8 = 1
    INTEGER = 3
    FLOAT = 4
    LONG = 5
    DOUBLE = 6
    CLASS = 7
    STRING = 8
    FIELDREF = 9
    METHODREF = 10
    INTERFACE_METHODREF = 11
    NAME_AND_TYPE = 12
    METHOD_HANDLE = 15
    METHOD_TYPE = 16
    DYNAMIC = 17
    INVOKE_DYNAMIC = 18
    MODULE = 19
    PACKAGE = 20


class ReferenceKind(IntEnum):
    """Kinds of CONSTANT_MethodHandle."""
    GET_FIELD = 1
    GET_STATIC = 2
    PUT_FIELD = 3
    PUT_STATIC = 4
    INVOKE_VIRTUAL = 5
    INVOKE_STATIC = 6
    INVOKE_SPECIAL = 7
    NEW_INVOKE_SPECIAL = 8
    INVOKE_INTERFACE = 9


def to_internal_index(wire_index: int) -> int:
    """Convert a 1-based class file index to a 0-based pool index."""
    if wire_index == 0:
        raise InvalidConstantPool("Constant pool index 0 is reserved")
    return wire_index - 1


class Constant(ABC):
    """Base class for all constant pool entries."""
    tag: ClassVar[Optional[ConstantTag]] = None

    # Long and Double occupy two slots in the class file's numbering.
    wide: ClassVar[bool] = False


@dataclass(frozen=True)
class Utf8(Constant):
    tag = ConstantTag.UTF8
    text: str


@dataclass(frozen=True)
class Integer(Constant):
    tag = ConstantTag.INTEGER
    value: int


@dataclass(frozen=True)
class Float(Constant):
    tag = ConstantTag.FLOAT
    value: float


@dataclass(frozen=True)
class Long(Constant):
    tag = ConstantTag.LONG
    wide = True
    value: int


@dataclass(frozen=True)
class Double(Constant):
    tag = ConstantTag.DOUBLE
    wide = True
    value: float


@dataclass(frozen=True)
class Class(Constant):
    tag = ConstantTag.CLASS
    name_index: int


@dataclass(frozen=True)
class String(Constant):
    tag = ConstantTag.STRING
    string_index: int


@dataclass(frozen=True)
class FieldRef(Constant):
    tag = ConstantTag.FIELDREF
    class_index: int
    name_and_type_index: int


@dataclass(frozen=True)
class MethodRef(Constant):
    tag = ConstantTag.METHODREF
    class_index: int
    name_and_type_index: int


@dataclass(frozen=True)
class InterfaceMethodRef(Constant):
    tag = ConstantTag.INTERFACE_METHODREF
    class_index: int
    name_and_type_index: int


@dataclass(frozen=True)
class NameAndType(Constant):
    tag = ConstantTag.NAME_AND_TYPE
    name_index: int
    descriptor_index: int


@dataclass(frozen=True)
class MethodHandle(Constant):
    tag = ConstantTag.METHOD_HANDLE
    reference_kind: int
    reference_index: int


@dataclass(frozen=True)
class MethodType(Constant):
    tag = ConstantTag.METHOD_TYPE
    descriptor_index: int


@dataclass(frozen=True)
class Dynamic(Constant):
    """CONSTANT_Dynamic. The bootstrap index points into BootstrapMethods, not the pool."""
    tag = ConstantTag.DYNAMIC
    bootstrap_method_attr_index: int
    name_and_type_index: int


@dataclass(frozen=True)
class InvokeDynamic(Constant):
    tag = ConstantTag.INVOKE_DYNAMIC
    bootstrap_method_attr_index: int
    name_and_type_index: int


@dataclass(frozen=True)
class Module(Constant):
    tag = ConstantTag.MODULE
    name_index: int


@dataclass(frozen=True)
class Package(Constant):
    tag = ConstantTag.PACKAGE
    name_index: int


@dataclass(frozen=True)
class Unusable(Constant):
    """Placeholder for the slot following a Long or Double."""
    pass


_HANDLE_TARGETS: dict[int, tuple[Type[Constant], ...]] = {
    ReferenceKind.GET_FIELD: (FieldRef,),
    ReferenceKind.GET_STATIC: (FieldRef,),
    ReferenceKind.PUT_FIELD: (FieldRef,),
    ReferenceKind.PUT_STATIC: (FieldRef,),
    ReferenceKind.INVOKE_VIRTUAL: (MethodRef,),
    ReferenceKind.NEW_INVOKE_SPECIAL: (MethodRef,),
    ReferenceKind.INVOKE_STATIC: (MethodRef, InterfaceMethodRef),
    ReferenceKind.INVOKE_SPECIAL: (MethodRef, InterfaceMethodRef),
    ReferenceKind.INVOKE_INTERFACE: (InterfaceMethodRef,),
}


class ConstantPool:
    """An append-only, 0-indexed table of constants."""

    def __init__(self):
        self._entries: list[Constant] = []

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[Constant]:
        return iter(self._entries)

    def __repr__(self) -> str:
        return f"ConstantPool({self._entries!r})"

    def push(self, entry: Constant):
        """Append an entry. References are not checked until validate()."""
        self._entries.append(entry)

    def get(self, index: int) -> Optional[Constant]:
        if 0 <= index < len(self._entries):
            return self._entries[index]
        return None

    def _get_kind(self, index: int, *kinds: Type[Constant]) -> Optional[Constant]:
        entry = self.get(index)
        if isinstance(entry, kinds):
            return entry
        return None

    def get_utf8_at(self, index: int) -> Optional[str]:
        """Text of the Utf8 entry at index, or None."""
        entry = self._get_kind(index, Utf8)
        if entry is None:
            return None
        return entry.text

    def get_class_at(self, index: int) -> Optional[Class]:
        return self._get_kind(index, Class)

    def get_name_and_type(self, index: int) -> Optional[NameAndType]:
        return self._get_kind(index, NameAndType)

    def get_field_ref(self, index: int) -> Optional[FieldRef]:
        return self._get_kind(index, FieldRef)

    def get_method_ref(self, index: int) -> Optional[MethodRef]:
        return self._get_kind(index, MethodRef)

    def get_class_name(self, class_index: int) -> str:
        """
        Resolve a Class entry to its name.

        Raises UnresolvedConstant if class_index is not a Class entry or its
        name_index is not a Utf8 entry. A pool that passed validate() only
        fails here for an index outside the pool or of another kind.
        """
        entry = self.get_class_at(class_index)
        if entry is None:
            raise UnresolvedConstant(
                f"Expected CLASS at index {class_index}, got {self.get(class_index)!r}"
            )
        name = self.get_utf8_at(entry.name_index)
        if name is None:
            raise UnresolvedConstant(
                f"Expected UTF8 at index {entry.name_index} for class at index {class_index}"
            )
        return name

    def _is_valid(self, entry: Constant) -> bool:
        if isinstance(entry, (Utf8, Integer, Float, Long, Double, Unusable)):
            return True
        if isinstance(entry, (Class, Module, Package)):
            return self.get_utf8_at(entry.name_index) is not None
        if isinstance(entry, String):
            return self.get_utf8_at(entry.string_index) is not None
        if isinstance(entry, MethodType):
            return self.get_utf8_at(entry.descriptor_index) is not None
        if isinstance(entry, NameAndType):
            return (self.get_utf8_at(entry.name_index) is not None
                    and self.get_utf8_at(entry.descriptor_index) is not None)
        if isinstance(entry, (FieldRef, MethodRef, InterfaceMethodRef)):
            return (self.get_class_at(entry.class_index) is not None
                    and self.get_name_and_type(entry.name_and_type_index) is not None)
        if isinstance(entry, (Dynamic, InvokeDynamic)):
            return self.get_name_and_type(entry.name_and_type_index) is not None
        if isinstance(entry, MethodHandle):
            targets = _HANDLE_TARGETS.get(entry.reference_kind)
            if targets is None:
                return False
            return self._get_kind(entry.reference_index, *targets) is not None
        raise TypeError(f"Unknown constant pool entry: {entry!r}")

    def invalid_entries(self) -> Iterator[int]:
        """Yield the index of every entry whose references do not resolve."""
        for i, entry in enumerate(self._entries):
            if not self._is_valid(entry):
                yield i

    def validate(self) -> bool:
        """Check that every reference points at an entry of the expected kind."""
        return next(self.invalid_entries(), None) is None
