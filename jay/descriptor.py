"""
Field descriptor parser using Lark.

Turns descriptors such as "[Ljava/lang/String;" into small type objects
that know their Java source spelling.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path

from lark import Lark, Transformer, v_args
from lark.exceptions import LarkError

from .errors import InvalidDescriptor


GRAMMAR_FILE = Path(__file__).parent / "descriptor.lark"

MAX_ARRAY_DIMENSIONS = 255

BASE_TYPE_NAMES = {
    "B": "byte", "C": "char", "D": "double", "F": "float",
    "I": "int", "J": "long", "S": "short", "Z": "boolean",
}


class FieldType(ABC):
    """Base class for parsed field types."""

    @abstractmethod
    def descriptor(self) -> str:
        """Return the JVM descriptor."""
        pass

    @abstractmethod
    def java_name(self) -> str:
        """Return the type as written in Java source."""
        pass


@dataclass(frozen=True)
class BaseType(FieldType):
    """Primitive type (B, C, D, F, I, J, S, Z)."""
    code: str

    def descriptor(self) -> str:
        return self.code

    def java_name(self) -> str:
        return BASE_TYPE_NAMES[self.code]


@dataclass(frozen=True)
class ObjectType(FieldType):
    """Class or interface type (L<internal name>;)."""
    class_name: str  # e.g., "java/lang/String"

    def descriptor(self) -> str:
        return f"L{self.class_name};"

    def java_name(self) -> str:
        return self.class_name.replace("/", ".")


@dataclass(frozen=True)
class ArrayType(FieldType):
    """Array type ([<component>)."""
    component: FieldType

    @property
    def dimensions(self) -> int:
        if isinstance(self.component, ArrayType):
            return self.component.dimensions + 1
        return 1

    def descriptor(self) -> str:
        return "[" + self.component.descriptor()

    def java_name(self) -> str:
        return self.component.java_name() + "[]"


@v_args(inline=True)
class DescriptorTransformer(Transformer):
    """Transforms the Lark parse tree into FieldType objects."""

    def start(self, field_type):
        return field_type

    def base_type(self, token):
        return BaseType(str(token))

    def object_type(self, token):
        return ObjectType(str(token)[1:-1])

    def array_type(self, component):
        return ArrayType(component)


class DescriptorParser:
    """Parser for JVM field descriptors."""

    def __init__(self):
        with open(GRAMMAR_FILE, "r") as f:
            grammar = f.read()

        self._parser = Lark(grammar, parser="earley")
        self._transformer = DescriptorTransformer()

    def parse(self, descriptor: str) -> FieldType:
        dimensions = len(descriptor) - len(descriptor.lstrip("["))
        if dimensions > MAX_ARRAY_DIMENSIONS:
            raise InvalidDescriptor(
                f"Field descriptor {descriptor!r} has more than {MAX_ARRAY_DIMENSIONS} dimensions"
            )
        try:
            tree = self._parser.parse(descriptor)
        except LarkError as e:
            raise InvalidDescriptor(f"Invalid field descriptor {descriptor!r}") from e
        return self._transformer.transform(tree)


@lru_cache(maxsize=None)
def _default_parser() -> DescriptorParser:
    return DescriptorParser()


def parse_field_descriptor(descriptor: str) -> FieldType:
    """Parse a field descriptor, raising InvalidDescriptor if it is malformed."""
    return _default_parser().parse(descriptor)
