"""
Errors raised while reading class files.
"""


class ClassFileError(Exception):
    """Base class for all class file errors."""
    pass


class ParseError(ClassFileError):
    """A class file could not be parsed."""
    pass


class InvalidMagicHeader(ParseError):
    """The first four bytes are not 0xCAFEBABE."""
    pass


class UnsupportedVersion(ParseError):
    """The major version is not supported."""
    pass


class InvalidConstantTag(ParseError):
    """A constant pool tag byte is not a known kind."""
    pass


class InvalidConstantPool(ParseError):
    """A constant pool reference is dangling or points at the wrong kind."""
    pass


class InvalidUtf8Encoding(ParseError):
    """A Utf8 constant holds bytes that are not modified UTF-8."""
    pass


class ReadFailure(ParseError):
    """The input ended before a field could be read."""
    pass


class UnresolvedConstant(ClassFileError, LookupError):
    """A constant pool lookup did not resolve to the expected kind."""
    pass


class InvalidDescriptor(ClassFileError, ValueError):
    """A field descriptor is malformed."""
    pass
