"""
WebIDL definition tree parser that builds an AST.

Phase 1 of the pipeline: convert the JSON tree produced by the external
webidl2 parser into typed definition nodes. The tree has already been
validated against the WebIDL grammar; this phase only checks its shape.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Any

from ...errors import SchemaParseError
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
    MixinDefinition,
    OperationMember,
    SchemaTree,
    Special,
    TypedefDefinition,
    TypeRef,
    UnsupportedDefinition,
    ValueLiteral,
)

logger = logging.getLogger(__name__)


class SchemaParser:
    """Parses webidl2 JSON definition trees into an AST."""

    GENERIC_KINDS = {
        "sequence": GenericKind.SEQUENCE,
        "FrozenArray": GenericKind.SEQUENCE,
        "ObservableArray": GenericKind.SEQUENCE,
        "Promise": GenericKind.PROMISE,
        "record": GenericKind.RECORD,
    }

    # Entries the parser emits that are not definitions
    SKIPPED_TYPES = {"eof"}

    def parse(self, tree: list[dict[str, Any]]) -> SchemaTree:
        """
        Parse a single definition tree.

        Args:
            tree: The list of definitions produced by the WebIDL parser

        Returns:
            SchemaTree with the parsed definitions in source order
        """
        return self.parse_fragments([tree])

    def parse_fragments(self, fragments: Iterable[list[dict[str, Any]]]) -> SchemaTree:
        """
        Parse several definition trees into one AST.

        Definitions keep their order: fragment by fragment, then source order.
        """
        ast = SchemaTree()
        for index, fragment in enumerate(fragments):
            if not isinstance(fragment, list):
                raise SchemaParseError(f"Fragment {index} must be a list of definitions, got {type(fragment).__name__}")
            for raw in fragment:
                definition = self._parse_definition(raw)
                if definition is not None:
                    ast.definitions.append(definition)
        return ast

    def _parse_definition(self, raw: Any) -> Definition | None:
        """Parse one top-level definition."""
        type_name = self._require(raw, "type", "definition")
        if type_name in self.SKIPPED_TYPES:
            return None

        name = raw.get("name") or ""
        partial = bool(raw.get("partial", False))

        if type_name in ("interface", "interface mixin", "callback interface", "dictionary"):
            members = [self._parse_member(m, name) for m in raw.get("members", [])]
            cls = {
                "interface": InterfaceDefinition,
                "interface mixin": MixinDefinition,
                "callback interface": CallbackInterfaceDefinition,
                "dictionary": DictionaryDefinition,
            }[type_name]
            return cls(
                name=name,
                partial=partial,
                inheritance=raw.get("inheritance") or None,
                members=members,
            )

        if type_name == "enum":
            values = []
            for value in raw.get("values", []):
                values.append(value["value"] if isinstance(value, dict) else str(value))
            return EnumDefinition(name=name, values=values)

        if type_name == "typedef":
            return TypedefDefinition(
                name=name,
                type_ref=self._parse_type(self._require(raw, "idlType", f"typedef {name}")),
            )

        if type_name == "callback":
            return CallbackDefinition(
                name=name,
                return_type=self._parse_optional_type(raw.get("idlType")),
                arguments=[self._parse_argument(a, name) for a in raw.get("arguments", [])],
            )

        if type_name == "includes":
            return IncludesDefinition(
                target=self._require(raw, "target", "includes"),
                includes=self._require(raw, "includes", "includes"),
            )

        logger.debug(f"Keeping unsupported definition '{name}' of type '{type_name}'")
        return UnsupportedDefinition(name=name, partial=partial, type_name=type_name)

    def _parse_member(self, raw: Any, owner: str) -> Member:
        """Parse a member of an interface, mixin or dictionary."""
        type_name = self._require(raw, "type", f"member of {owner}")
        name = raw.get("name") or ""

        if type_name == "constructor":
            return ConstructorMember(
                arguments=[self._parse_argument(a, owner) for a in raw.get("arguments", [])],
            )

        if type_name == "attribute":
            return AttributeMember(
                name=name,
                type_ref=self._parse_type(self._require(raw, "idlType", f"attribute {owner}.{name}")),
                special=self._parse_special(raw.get("special"), owner, name),
                readonly=bool(raw.get("readonly", False)),
            )

        if type_name == "operation":
            return OperationMember(
                name=name,
                return_type=self._parse_optional_type(raw.get("idlType")),
                arguments=[self._parse_argument(a, owner) for a in raw.get("arguments", [])],
                special=self._parse_special(raw.get("special"), owner, name),
            )

        if type_name == "const":
            return ConstantMember(
                name=name,
                type_ref=self._parse_type(self._require(raw, "idlType", f"const {owner}.{name}")),
                value=self._parse_value(self._require(raw, "value", f"const {owner}.{name}")),
            )

        if type_name == "field":
            return FieldMember(
                name=name,
                type_ref=self._parse_type(self._require(raw, "idlType", f"field {owner}.{name}")),
                required=bool(raw.get("required", False)),
                default=self._parse_optional_value(raw.get("default")),
            )

        raise SchemaParseError(f"Unknown member type '{type_name}' in '{owner}'")

    def _parse_argument(self, raw: Any, owner: str) -> Argument:
        """Parse an argument of a constructor, operation or callback."""
        name = self._require(raw, "name", f"argument in {owner}")
        return Argument(
            name=name,
            type_ref=self._parse_type(self._require(raw, "idlType", f"argument {owner}({name})")),
            optional=bool(raw.get("optional", False)),
            variadic=bool(raw.get("variadic", False)),
            default=self._parse_optional_value(raw.get("default")),
        )

    def _parse_optional_type(self, raw: Any) -> TypeRef | None:
        if raw is None:
            return None
        return self._parse_type(raw)

    def _parse_type(self, raw: Any) -> TypeRef:
        """Parse a type reference, recursing into generic and union members."""
        if isinstance(raw, str):
            # Some producers flatten plain references to their name
            return TypeRef(name=raw)
        if not isinstance(raw, dict):
            raise SchemaParseError(f"Expected a type object, got {type(raw).__name__}")

        inner = raw.get("idlType")
        generic_name = raw.get("generic") or ""
        union = bool(raw.get("union", False))
        ref = TypeRef(
            nullable=bool(raw.get("nullable", False)),
            union=union,
        )

        if generic_name:
            if generic_name not in self.GENERIC_KINDS:
                raise SchemaParseError(f"Unknown generic type '{generic_name}'")
            ref.generic = self.GENERIC_KINDS[generic_name]
            ref.name = generic_name
            ref.arguments = [self._parse_type(t) for t in self._as_list(inner)]
        elif union:
            ref.arguments = [self._parse_type(t) for t in self._as_list(inner)]
        elif isinstance(inner, str):
            ref.name = inner
        elif isinstance(inner, dict):
            # Wrapper produced for extended attributes on inner types
            nested = self._parse_type(inner)
            nested.nullable = nested.nullable or ref.nullable
            return nested
        else:
            raise SchemaParseError(f"Type reference has no usable 'idlType': {raw!r}")

        return ref

    def _parse_optional_value(self, raw: Any) -> ValueLiteral | None:
        if raw is None:
            return None
        return self._parse_value(raw)

    def _parse_value(self, raw: Any) -> ValueLiteral:
        type_name = self._require(raw, "type", "value literal")
        return ValueLiteral(
            type=type_name,
            value=raw.get("value"),
            negative=bool(raw.get("negative", False)),
        )

    def _parse_special(self, raw: Any, owner: str, name: str) -> Special:
        try:
            return Special(raw or "")
        except ValueError:
            raise SchemaParseError(f"Unknown special '{raw}' on '{owner}.{name}'") from None

    def _as_list(self, value: Any) -> list[Any]:
        if isinstance(value, list):
            return value
        if value is None:
            return []
        return [value]

    def _require(self, raw: Any, key: str, context: str) -> Any:
        """Fetch a mandatory key, raising SchemaParseError if absent."""
        if not isinstance(raw, dict):
            raise SchemaParseError(f"Expected an object for {context}, got {type(raw).__name__}")
        if key not in raw or raw[key] is None:
            raise SchemaParseError(f"Missing '{key}' in {context}")
        return raw[key]
