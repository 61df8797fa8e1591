"""jay - a JVM class file reader."""

from .classfile import (
    AccessFlags,
    ClassFile,
    ClassHeader,
    Field,
    Attribute,
    parse,
    parse_header,
    read_class_file,
)
from .constant_pool import ConstantPool, ConstantTag
from .errors import (
    ClassFileError,
    ParseError,
    InvalidMagicHeader,
    UnsupportedVersion,
    InvalidConstantTag,
    InvalidConstantPool,
    InvalidUtf8Encoding,
    ReadFailure,
    UnresolvedConstant,
    InvalidDescriptor,
)

__version__ = "0.1.0"
__all__ = [
    "AccessFlags",
    "ClassFile",
    "ClassHeader",
    "Field",
    "Attribute",
    "parse",
    "parse_header",
    "read_class_file",
    "ConstantPool",
    "ConstantTag",
    "ClassFileError",
    "ParseError",
    "InvalidMagicHeader",
    "UnsupportedVersion",
    "InvalidConstantTag",
    "InvalidConstantPool",
    "InvalidUtf8Encoding",
    "ReadFailure",
    "UnresolvedConstant",
    "InvalidDescriptor",
]
