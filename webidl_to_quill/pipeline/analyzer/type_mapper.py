"""
Type mapping and overload mangling.

Maps WebIDL type references onto Quill types, and derives the short
structural tokens used to tell overloaded operations apart.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from typing import TypeVar

from ...utils import to_snake_case
from ..schema_ast.nodes import (
    Argument,
    CallbackDefinition,
    CallbackInterfaceDefinition,
    Definition,
    EnumDefinition,
    GenericKind,
    OperationMember,
    PrimitiveKind,
    TypedefDefinition,
    TypeRef,
)
from .symbol_table import SymbolTable

logger = logging.getLogger(__name__)

T = TypeVar("T")

GENERIC_ARITY = {
    GenericKind.SEQUENCE: 1,
    GenericKind.PROMISE: 1,
    GenericKind.RECORD: 2,
}


class FunctionShape:
    """Argument types and return type of a callback or callback interface."""

    def __init__(self, arguments: list[Argument], return_type: TypeRef | None, method: str | None = None):
        self.arguments = arguments
        self.return_type = return_type
        # Name of the host method for callback interfaces, None for plain callbacks
        self.method = method


class TypeResolver:
    """Shared lookup of named type references against the symbol table."""

    def __init__(self, symbols: SymbolTable, mutable: bool = True):
        self.symbols = symbols
        # Default for the `mutable` argument of the mapping methods
        self.mutable = mutable
        self._resolving: set[str] = set()

    def lookup(self, type_ref: TypeRef) -> Definition | None:
        """Find the definition a named reference points to, warning if absent."""
        definition = self.symbols.get(type_ref.name)
        if definition is None:
            logger.warning(f"Unable to find type '{type_ref.name}'")
        return definition

    def is_mutable(self, mutable: bool | None) -> bool:
        return self.mutable if mutable is None else mutable

    def function_shape(self, definition: Definition) -> FunctionShape | None:
        """The callable shape of a callback or single-method callback interface."""
        if isinstance(definition, CallbackDefinition):
            return FunctionShape(definition.arguments, definition.return_type)
        if isinstance(definition, CallbackInterfaceDefinition):
            operation = definition.single_operation()
            if operation is None:
                logger.warning(f"Callback interface '{definition.name}' declares no operation")
                return None
            return FunctionShape(operation.arguments, operation.return_type, operation.name)
        return None

    @contextmanager
    def entering(self, name: str) -> Iterator[bool]:
        """Track recursion through typedefs and callbacks; yields False on a cycle."""
        if name in self._resolving:
            logger.warning(f"Type '{name}' refers to itself")
            yield False
            return
        self._resolving.add(name)
        try:
            yield True
        finally:
            self._resolving.discard(name)

    def guarded(self, name: str, compute: Callable[[], T], fallback: T) -> T:
        with self.entering(name) as ok:
            if not ok:
                return fallback
            return compute()


class TypeMapper(TypeResolver):
    """Translates WebIDL type references into Quill type expressions."""

    DYNAMIC = "JsValue"

    TYPE_MAP: dict[PrimitiveKind, str] = {
        PrimitiveKind.BOOLEAN: "Bool",
        PrimitiveKind.INTEGER: "Int",
        PrimitiveKind.BIGINT: "Int",
        PrimitiveKind.FLOAT: "Float",
        PrimitiveKind.STRING: "String",
        PrimitiveKind.OBJECT: "JsObject",
        PrimitiveKind.ANY: "JsValue",
        PrimitiveKind.BINARY: "JsValue",
        PrimitiveKind.UNDEFINED: "Unit",
    }

    GENERIC_MAP: dict[GenericKind, str] = {
        GenericKind.SEQUENCE: "List",
        GenericKind.PROMISE: "Promise",
        GenericKind.RECORD: "Map",
    }

    def map_type(self, type_ref: TypeRef | None, mutable: bool | None = None) -> str:
        """
        Map a type reference to a Quill type.

        Args:
            type_ref: The WebIDL type (None stands for no return value)
            mutable: Whether references to interfaces and dictionaries are `mut`

        Returns:
            Quill type expression
        """
        if type_ref is None:
            return "Unit"
        if type_ref.nullable:
            return f"Option[{self.map_named(type_ref, mutable)}]"
        return self.map_named(type_ref, mutable)

    def map_named(self, type_ref: TypeRef, mutable: bool | None = None) -> str:
        """Map a type reference ignoring its nullability."""
        if type_ref.union:
            logger.warning("Union types are not yet implemented, using JsValue")
            return self.DYNAMIC

        if type_ref.generic != GenericKind.NONE:
            if len(type_ref.arguments) != GENERIC_ARITY[type_ref.generic]:
                logger.warning(f"Generic '{type_ref.name}' with {len(type_ref.arguments)} type arguments is not supported")
                return self.DYNAMIC
            args = ", ".join(self.map_type(arg, mutable) for arg in type_ref.arguments)
            return f"{self.GENERIC_MAP[type_ref.generic]}[{args}]"

        primitive = type_ref.primitive
        if primitive is not None:
            if primitive == PrimitiveKind.BINARY:
                logger.warning(f"Usage of type '{type_ref.name}' is not yet implemented")
            return self.TYPE_MAP[primitive]

        definition = self.lookup(type_ref)
        if definition is None:
            return self.DYNAMIC
        if isinstance(definition, EnumDefinition):
            return "String"
        if isinstance(definition, TypedefDefinition):
            return self.guarded(definition.name, lambda: self.map_type(definition.type_ref, mutable), self.DYNAMIC)
        if isinstance(definition, (CallbackDefinition, CallbackInterfaceDefinition)):
            shape = self.function_shape(definition)
            if shape is None:
                return self.DYNAMIC
            return self.guarded(definition.name, lambda: self.function_type(shape), self.DYNAMIC)
        if self.is_mutable(mutable):
            return f"mut {definition.name}"
        return definition.name

    def function_type(self, shape: FunctionShape) -> str:
        """Quill function type for a callable shape."""
        args = ", ".join(self.map_type(arg.type_ref) for arg in shape.arguments)
        return f"Fun({args}) -> {self.map_type(shape.return_type)}"


class OverloadMangler(TypeResolver):
    """Derives deterministic signature tokens for overloaded operations."""

    DYNAMIC = "any"

    TOKEN_MAP: dict[PrimitiveKind, str] = {
        PrimitiveKind.BOOLEAN: "bool",
        PrimitiveKind.INTEGER: "int",
        PrimitiveKind.BIGINT: "int",
        PrimitiveKind.FLOAT: "flt",
        PrimitiveKind.STRING: "str",
        PrimitiveKind.OBJECT: "obj",
        PrimitiveKind.ANY: "any",
        PrimitiveKind.BINARY: "any",
        PrimitiveKind.UNDEFINED: "unit",
    }

    GENERIC_TOKENS: dict[GenericKind, str] = {
        GenericKind.SEQUENCE: "list",
        GenericKind.PROMISE: "prom",
        GenericKind.RECORD: "rec",
    }

    def mangle(self, type_ref: TypeRef | None, mutable: bool | None = None) -> str:
        """
        Build the signature token of a type reference.

        Structurally identical types always give the same token.

        Args:
            type_ref: The WebIDL type (None stands for no return value)
            mutable: Whether references to interfaces and dictionaries are `mut`

        Returns:
            Token such as `int`, `olist_str` or `f1_mnode_unit`
        """
        if type_ref is None:
            return "unit"
        if type_ref.nullable:
            return f"o{self.mangle_named(type_ref, mutable)}"
        return self.mangle_named(type_ref, mutable)

    def mangle_named(self, type_ref: TypeRef, mutable: bool | None = None) -> str:
        """Token of a type reference ignoring its nullability."""
        if type_ref.union:
            return self.DYNAMIC

        if type_ref.generic != GenericKind.NONE:
            if len(type_ref.arguments) != GENERIC_ARITY[type_ref.generic]:
                return self.DYNAMIC
            parts = [self.GENERIC_TOKENS[type_ref.generic]]
            parts.extend(self.mangle(arg, mutable) for arg in type_ref.arguments)
            return "_".join(parts)

        primitive = type_ref.primitive
        if primitive is not None:
            return self.TOKEN_MAP[primitive]

        definition = self.lookup(type_ref)
        if definition is None:
            return self.DYNAMIC
        if isinstance(definition, EnumDefinition):
            return "str"
        if isinstance(definition, TypedefDefinition):
            return self.guarded(definition.name, lambda: self.mangle(definition.type_ref, mutable), self.DYNAMIC)
        if isinstance(definition, (CallbackDefinition, CallbackInterfaceDefinition)):
            shape = self.function_shape(definition)
            if shape is None:
                return self.DYNAMIC
            return self.guarded(definition.name, lambda: self.function_token(shape), self.DYNAMIC)
        # named tokens carry a marker no builtin token starts with and no inner separator
        compact = to_snake_case(definition.name).replace("_", "")
        if self.is_mutable(mutable):
            return f"m{compact}"
        return f"n{compact}"

    def function_token(self, shape: FunctionShape) -> str:
        """Token of a callable shape: arity, argument tokens, return token."""
        parts = [f"f{len(shape.arguments)}"]
        parts.extend(self.mangle(arg.type_ref) for arg in shape.arguments)
        parts.append(self.mangle(shape.return_type))
        return "_".join(parts)

    def suffix(self, arguments: list[Argument], mutable: bool | None = None) -> str:
        """Join the tokens of an argument list into a name suffix."""
        return "_".join(self.mangle(arg.type_ref, mutable) for arg in arguments)

    def mangled_name(self, base_name: str, operation: OperationMember, group_size: int) -> str:
        """Append the signature suffix when the operation is overloaded."""
        if group_size <= 1 or not operation.arguments:
            return base_name
        return f"{base_name}_{self.suffix(operation.arguments)}"
