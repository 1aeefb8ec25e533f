"""
AST (Abstract Syntax Tree) node definitions for WebIDL definition trees.

These nodes represent the structure handed over by the external WebIDL
parser before any symbol resolution or Quill-specific processing.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class Special(str, Enum):
    """Modifier tag of attributes and operations."""

    NONE = ""
    STATIC = "static"
    STRINGIFIER = "stringifier"
    GETTER = "getter"
    SETTER = "setter"
    DELETER = "deleter"
    INHERIT = "inherit"


class GenericKind(str, Enum):
    """Generic wrapper of a type reference."""

    NONE = ""
    SEQUENCE = "sequence"
    PROMISE = "promise"
    RECORD = "record"


class PrimitiveKind(str, Enum):
    """Class of a built-in WebIDL type."""

    BOOLEAN = "boolean"
    INTEGER = "integer"
    BIGINT = "bigint"
    FLOAT = "float"
    STRING = "string"
    OBJECT = "object"
    ANY = "any"
    BINARY = "binary"
    UNDEFINED = "undefined"


PRIMITIVE_KINDS: dict[str, PrimitiveKind] = {
    "boolean": PrimitiveKind.BOOLEAN,
    "byte": PrimitiveKind.INTEGER,
    "octet": PrimitiveKind.INTEGER,
    "short": PrimitiveKind.INTEGER,
    "unsigned short": PrimitiveKind.INTEGER,
    "long": PrimitiveKind.INTEGER,
    "unsigned long": PrimitiveKind.INTEGER,
    "long long": PrimitiveKind.INTEGER,
    "unsigned long long": PrimitiveKind.INTEGER,
    "bigint": PrimitiveKind.BIGINT,
    "float": PrimitiveKind.FLOAT,
    "unrestricted float": PrimitiveKind.FLOAT,
    "double": PrimitiveKind.FLOAT,
    "unrestricted double": PrimitiveKind.FLOAT,
    "DOMString": PrimitiveKind.STRING,
    "ByteString": PrimitiveKind.STRING,
    "USVString": PrimitiveKind.STRING,
    "CSSOMString": PrimitiveKind.STRING,
    "object": PrimitiveKind.OBJECT,
    "any": PrimitiveKind.ANY,
    "ArrayBuffer": PrimitiveKind.BINARY,
    "SharedArrayBuffer": PrimitiveKind.BINARY,
    "DataView": PrimitiveKind.BINARY,
    "Int8Array": PrimitiveKind.BINARY,
    "Int16Array": PrimitiveKind.BINARY,
    "Int32Array": PrimitiveKind.BINARY,
    "Uint8Array": PrimitiveKind.BINARY,
    "Uint16Array": PrimitiveKind.BINARY,
    "Uint32Array": PrimitiveKind.BINARY,
    "Uint8ClampedArray": PrimitiveKind.BINARY,
    "BigInt64Array": PrimitiveKind.BINARY,
    "BigUint64Array": PrimitiveKind.BINARY,
    "Float16Array": PrimitiveKind.BINARY,
    "Float32Array": PrimitiveKind.BINARY,
    "Float64Array": PrimitiveKind.BINARY,
    "undefined": PrimitiveKind.UNDEFINED,
    "void": PrimitiveKind.UNDEFINED,
}


@dataclass
class SchemaNode:
    """Base class for all AST nodes."""

    pass


@dataclass
class TypeRef(SchemaNode):
    """A reference to a WebIDL type.

    `name` holds either a primitive keyword or the name of another
    definition. Generic and union types keep their inner types in `arguments`.
    """

    name: str = ""
    nullable: bool = False
    union: bool = False
    generic: GenericKind = GenericKind.NONE
    arguments: list[TypeRef] = field(default_factory=list)

    @property
    def primitive(self) -> PrimitiveKind | None:
        if self.union or self.generic != GenericKind.NONE:
            return None
        return PRIMITIVE_KINDS.get(self.name)

    def non_nullable(self) -> TypeRef:
        """Copy of this reference without the nullable flag."""
        return TypeRef(
            name=self.name,
            union=self.union,
            generic=self.generic,
            arguments=self.arguments,
        )

    def as_nullable(self) -> TypeRef:
        """Copy of this reference with the nullable flag set."""
        ref = self.non_nullable()
        ref.nullable = True
        return ref


@dataclass
class ValueLiteral(SchemaNode):
    """A default value or constant literal."""

    type: str = ""  # "string", "number", "boolean", "null", "Infinity", "NaN", "sequence", "dictionary"
    value: Any = None
    negative: bool = False


@dataclass
class Argument(SchemaNode):
    """An argument of a constructor, operation or callback."""

    name: str = ""
    type_ref: TypeRef | None = None
    optional: bool = False
    variadic: bool = False
    default: ValueLiteral | None = None


@dataclass
class Member(SchemaNode):
    """Base class for members of interfaces, mixins and dictionaries."""

    name: str = ""


@dataclass
class ConstructorMember(Member):
    arguments: list[Argument] = field(default_factory=list)


@dataclass
class AttributeMember(Member):
    type_ref: TypeRef | None = None
    special: Special = Special.NONE
    readonly: bool = False


@dataclass
class OperationMember(Member):
    # None for the bare `stringifier;` declaration
    return_type: TypeRef | None = None
    arguments: list[Argument] = field(default_factory=list)
    special: Special = Special.NONE


@dataclass
class ConstantMember(Member):
    type_ref: TypeRef | None = None
    value: ValueLiteral | None = None


@dataclass
class FieldMember(Member):
    type_ref: TypeRef | None = None
    required: bool = False
    default: ValueLiteral | None = None


@dataclass
class Definition(SchemaNode):
    """Base class for top-level definitions."""

    name: str = ""
    partial: bool = False


@dataclass
class MemberedDefinition(Definition):
    """A definition that owns members and may inherit from another one."""

    inheritance: str | None = None
    members: list[Member] = field(default_factory=list)


@dataclass
class InterfaceDefinition(MemberedDefinition):
    """`interface`, bound as an opaque struct."""


@dataclass
class MixinDefinition(MemberedDefinition):
    """`interface mixin`, bound through the interfaces that include it."""


@dataclass
class CallbackInterfaceDefinition(MemberedDefinition):
    def single_operation(self) -> OperationMember | None:
        """The operation that callers implement, if any."""
        for member in self.members:
            if isinstance(member, OperationMember):
                return member
        return None


@dataclass
class DictionaryDefinition(MemberedDefinition):
    """`dictionary`, bound as a struct with public fields."""


@dataclass
class EnumDefinition(Definition):
    values: list[str] = field(default_factory=list)


@dataclass
class TypedefDefinition(Definition):
    type_ref: TypeRef | None = None


@dataclass
class CallbackDefinition(Definition):
    return_type: TypeRef | None = None
    arguments: list[Argument] = field(default_factory=list)


@dataclass
class IncludesDefinition(Definition):
    """`Target includes Mixin;` relation. Has no name of its own."""

    target: str = ""
    includes: str = ""


@dataclass
class UnsupportedDefinition(Definition):
    """Any definition kind the generator has no binding for (namespace, ...)."""

    type_name: str = ""


@dataclass
class SchemaTree:
    """Root of the parsed definition tree (all fragments, in order)."""

    definitions: list[Definition] = field(default_factory=list)
