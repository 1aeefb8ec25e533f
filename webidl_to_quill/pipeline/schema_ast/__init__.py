"""
Schema AST (Abstract Syntax Tree) module.

Contains the AST node definitions and the adapter over the WebIDL parser output.
"""

from __future__ import annotations

from .nodes import (
    Argument,
    AttributeMember,
    CallbackDefinition,
    CallbackInterfaceDefinition,
    ConstantMember,
    ConstructorMember,
    Definition,
    DictionaryDefinition,
    EnumDefinition,
    FieldMember,
    GenericKind,
    IncludesDefinition,
    InterfaceDefinition,
    Member,
    MemberedDefinition,
    MixinDefinition,
    OperationMember,
    PrimitiveKind,
    SchemaTree,
    Special,
    TypedefDefinition,
    TypeRef,
    UnsupportedDefinition,
    ValueLiteral,
)
from .parser import SchemaParser

__all__ = [
    "Argument",
    "AttributeMember",
    "CallbackDefinition",
    "CallbackInterfaceDefinition",
    "ConstantMember",
    "ConstructorMember",
    "Definition",
    "DictionaryDefinition",
    "EnumDefinition",
    "FieldMember",
    "GenericKind",
    "IncludesDefinition",
    "InterfaceDefinition",
    "Member",
    "MemberedDefinition",
    "MixinDefinition",
    "OperationMember",
    "PrimitiveKind",
    "SchemaTree",
    "Special",
    "TypedefDefinition",
    "TypeRef",
    "UnsupportedDefinition",
    "ValueLiteral",
    "SchemaParser",
]
