#!/usr/bin/env python3
"""
Command-line interface for jay - a JVM class file reader.
"""

import argparse
import logging
import sys
from pathlib import Path

from . import constant_pool as cp
from .errors import ClassFileError


def _describe_constant(pool: cp.ConstantPool, entry: cp.Constant) -> str:
    """One-line description of a constant pool entry, javap style."""
    if isinstance(entry, cp.Utf8):
        return f"Utf8               {entry.text}"
    if isinstance(entry, (cp.Integer, cp.Float, cp.Long, cp.Double)):
        return f"{type(entry).__name__:<19}{entry.value!r}"
    if isinstance(entry, cp.Class):
        return f"Class              #{entry.name_index + 1}  // {pool.get_utf8_at(entry.name_index)}"
    if isinstance(entry, cp.String):
        return f"String             #{entry.string_index + 1}"
    if isinstance(entry, (cp.FieldRef, cp.MethodRef, cp.InterfaceMethodRef)):
        kind = type(entry).__name__
        return f"{kind:<19}#{entry.class_index + 1}.#{entry.name_and_type_index + 1}"
    if isinstance(entry, cp.NameAndType):
        return f"NameAndType        #{entry.name_index + 1}:#{entry.descriptor_index + 1}"
    if isinstance(entry, cp.MethodHandle):
        return f"MethodHandle       {entry.reference_kind}:#{entry.reference_index + 1}"
    if isinstance(entry, cp.MethodType):
        return f"MethodType         #{entry.descriptor_index + 1}"
    if isinstance(entry, (cp.Dynamic, cp.InvokeDynamic)):
        kind = type(entry).__name__
        return f"{kind:<19}#{entry.bootstrap_method_attr_index}:#{entry.name_and_type_index + 1}"
    if isinstance(entry, (cp.Module, cp.Package)):
        return f"{type(entry).__name__:<19}#{entry.name_index + 1}"
    if isinstance(entry, cp.Unusable):
        return "(unusable)"
    raise TypeError(f"Unknown constant pool entry: {entry!r}")


_FIELD_MODIFIERS = ("PUBLIC", "PRIVATE", "PROTECTED", "STATIC", "FINAL", "VOLATILE", "TRANSIENT")


def _format_flags(flags) -> str:
    """Hex value followed by the names of the set flags."""
    from .classfile import AccessFlags

    names = [flag.name for flag in AccessFlags if flag in flags]
    if not names:
        return f"0x{int(flags):04x}"
    return f"0x{int(flags):04x} ({', '.join(names)})"


def _format_version(version: tuple[int, int]) -> str:
    major, minor = version
    return f"{major}.{minor}"


def header_command(args):
    """Print the class file version of each file."""
    from .classfile import parse_header

    for class_file in args.files:
        path = Path(class_file)
        if not path.exists():
            print(f"Error: File not found: {class_file}", file=sys.stderr)
            sys.exit(1)

        try:
            header = parse_header(path.read_bytes())
        except ClassFileError as e:
            print(f"Error reading {class_file}: {e}", file=sys.stderr)
            sys.exit(1)

        print(f"{class_file}: {_format_version((header.major, header.minor))}")


def dump_command(args):
    """Print the name, super class and fields of each class file."""
    from .classfile import AccessFlags, read_class_file

    for class_file in args.files:
        path = Path(class_file)
        if not path.exists():
            print(f"Error: File not found: {class_file}", file=sys.stderr)
            sys.exit(1)

        try:
            info = read_class_file(path)
        except ClassFileError as e:
            print(f"Error reading {class_file}: {e}", file=sys.stderr)
            sys.exit(1)

        print(f"class {info.name}")
        print(f"  super: {info.super_name or '-'}")
        print(f"  version: {_format_version(info.version)}")
        print(f"  access flags: {_format_flags(info.access_flags)}")

        if args.pool:
            print("  constant pool:")
            for i, entry in enumerate(info.constant_pool):
                print(f"    #{i + 1} = {_describe_constant(info.constant_pool, entry)}")

        print(f"  fields: {len(info.fields)}")
        for field_info in info.fields:
            try:
                type_name = field_info.type_name
            except ClassFileError:
                type_name = field_info.descriptor
            modifiers = [name.lower() for name in _FIELD_MODIFIERS
                         if field_info.access_flags & AccessFlags[name]]
            print(f"    {' '.join(modifiers + [type_name, field_info.name])};")


def main(argv=None):
    """Main entry point for jay CLI."""
    parser = argparse.ArgumentParser(
        prog="jay",
        description="Read JVM class files",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Log parser decisions to stderr",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    header_parser = subparsers.add_parser(
        "header",
        help="Print the class file version",
    )
    header_parser.add_argument(
        "files",
        nargs="+",
        help="Class files to read",
    )
    header_parser.set_defaults(func=header_command)

    dump_parser = subparsers.add_parser(
        "dump",
        help="Print the class name, super class and fields",
    )
    dump_parser.add_argument(
        "files",
        nargs="+",
        help="Class files to read",
    )
    dump_parser.add_argument(
        "--pool",
        action="store_true",
        help="Also print the constant pool",
    )
    dump_parser.set_defaults(func=dump_command)

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(name)s: %(message)s",
    )

    if args.command is None:
        parser.print_help()
        sys.exit(1)

    args.func(args)


if __name__ == "__main__":
    main()
