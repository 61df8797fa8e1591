"""Helpers that assemble class file bytes for tests."""

import struct


def u1(value: int) -> bytes:
    return struct.pack(">B", value)


def u2(value: int) -> bytes:
    return struct.pack(">H", value)


def u4(value: int) -> bytes:
    return struct.pack(">I", value)


def header(major: int = 61, minor: int = 0) -> bytes:
    return u4(0xCAFEBABE) + u2(minor) + u2(major)


def utf8(text: str) -> bytes:
    data = text.encode("utf-8")
    return u1(1) + u2(len(data)) + data


def raw_utf8(data: bytes) -> bytes:
    return u1(1) + u2(len(data)) + data


def integer(value: int) -> bytes:
    return u1(3) + struct.pack(">i", value)


def float_(value: float) -> bytes:
    return u1(4) + struct.pack(">f", value)


def long(value: int) -> bytes:
    return u1(5) + struct.pack(">q", value)


def double(value: float) -> bytes:
    return u1(6) + struct.pack(">d", value)


def class_(name_index: int) -> bytes:
    return u1(7) + u2(name_index)


def string(utf8_index: int) -> bytes:
    return u1(8) + u2(utf8_index)


def fieldref(class_index: int, nat_index: int) -> bytes:
    return u1(9) + u2(class_index) + u2(nat_index)


def methodref(class_index: int, nat_index: int) -> bytes:
    return u1(10) + u2(class_index) + u2(nat_index)


def name_and_type(name_index: int, descriptor_index: int) -> bytes:
    return u1(12) + u2(name_index) + u2(descriptor_index)


def attribute(name_index: int, body: bytes) -> bytes:
    return u2(name_index) + u4(len(body)) + body


def field(name_index: int, descriptor_index: int, attributes=(), access: int = 0x0002) -> bytes:
    return (u2(access) + u2(name_index) + u2(descriptor_index)
            + u2(len(attributes)) + b"".join(attributes))


def class_file(pool, this_class: int, super_class: int, fields=(), interfaces=(),
               pool_count: int | None = None, access: int = 0x0021,
               major: int = 61) -> bytes:
    """Assemble a class file up to and including the field table."""
    if pool_count is None:
        pool_count = len(pool) + 1
    return (header(major=major)
            + u2(pool_count) + b"".join(pool)
            + u2(access) + u2(this_class) + u2(super_class)
            + u2(len(interfaces)) + b"".join(u2(i) for i in interfaces)
            + u2(len(fields)) + b"".join(fields))


# What javac 17 emits for "public class Empty {}", up to the field table.
EMPTY_POOL = [
    methodref(2, 3),              # 1
    class_(4),                    # 2
    name_and_type(5, 6),          # 3
    utf8("java/lang/Object"),     # 4
    utf8("<init>"),               # 5
    utf8("()V"),                  # 6
    class_(8),                    # 7
    utf8("Empty"),                # 8
    utf8("Code"),                 # 9
    utf8("LineNumberTable"),      # 10
    utf8("SourceFile"),           # 11
    utf8("Empty.java"),           # 12
]


def empty_class() -> bytes:
    # Methods and class attributes follow the field table; they are not read.
    return class_file(EMPTY_POOL, this_class=7, super_class=2) + u2(0) + u2(0)
