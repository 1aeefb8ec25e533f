"""
Shared fixtures: builders for webidl2 JSON definition trees.
"""

from __future__ import annotations

from typing import Any

import pytest

from webidl_to_quill.pipeline import BindingGenerator, CodeGeneratorConfig


class IdlBuilder:
    """Builds definition objects shaped like the webidl2 parser output."""

    def type(self, name: str, nullable: bool = False) -> dict[str, Any]:
        return {"type": None, "extAttrs": [], "generic": "", "nullable": nullable, "union": False, "idlType": name}

    def generic(self, generic: str, *inner: dict[str, Any], nullable: bool = False) -> dict[str, Any]:
        return {"type": None, "extAttrs": [], "generic": generic, "nullable": nullable, "union": False, "idlType": list(inner)}

    def union(self, *inner: dict[str, Any], nullable: bool = False) -> dict[str, Any]:
        return {"type": None, "extAttrs": [], "generic": "", "nullable": nullable, "union": True, "idlType": list(inner)}

    def argument(self, name: str, idl_type: dict[str, Any], variadic: bool = False, optional: bool = False) -> dict[str, Any]:
        return {
            "type": "argument",
            "name": name,
            "idlType": idl_type,
            "extAttrs": [],
            "default": None,
            "optional": optional,
            "variadic": variadic,
        }

    def constructor(self, *arguments: dict[str, Any]) -> dict[str, Any]:
        return {"type": "constructor", "arguments": list(arguments), "extAttrs": []}

    def attribute(self, name: str, idl_type: dict[str, Any], readonly: bool = False, special: str = "") -> dict[str, Any]:
        return {"type": "attribute", "name": name, "idlType": idl_type, "extAttrs": [], "special": special, "readonly": readonly}

    def operation(
        self,
        name: str,
        idl_type: dict[str, Any] | None,
        *arguments: dict[str, Any],
        special: str = "",
    ) -> dict[str, Any]:
        return {
            "type": "operation",
            "name": name,
            "idlType": idl_type,
            "arguments": list(arguments),
            "extAttrs": [],
            "special": special,
        }

    def const(self, name: str, idl_type: dict[str, Any], value: dict[str, Any]) -> dict[str, Any]:
        return {"type": "const", "name": name, "idlType": idl_type, "extAttrs": [], "value": value}

    def field(
        self,
        name: str,
        idl_type: dict[str, Any],
        required: bool = False,
        default: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        return {"type": "field", "name": name, "extAttrs": [], "idlType": idl_type, "default": default, "required": required}

    def value(self, type_name: str, value: Any = None, negative: bool = False) -> dict[str, Any]:
        literal: dict[str, Any] = {"type": type_name, "value": value}
        if type_name == "Infinity":
            literal["negative"] = negative
        return literal

    def interface(
        self,
        name: str,
        *members: dict[str, Any],
        inheritance: str | None = None,
        partial: bool = False,
        kind: str = "interface",
    ) -> dict[str, Any]:
        return {
            "type": kind,
            "name": name,
            "inheritance": inheritance,
            "members": list(members),
            "extAttrs": [],
            "partial": partial,
        }

    def mixin(self, name: str, *members: dict[str, Any]) -> dict[str, Any]:
        return self.interface(name, *members, kind="interface mixin")

    def callback_interface(self, name: str, *members: dict[str, Any]) -> dict[str, Any]:
        return self.interface(name, *members, kind="callback interface")

    def dictionary(self, name: str, *members: dict[str, Any], inheritance: str | None = None) -> dict[str, Any]:
        return self.interface(name, *members, inheritance=inheritance, kind="dictionary")

    def enum(self, name: str, *values: str) -> dict[str, Any]:
        return {
            "type": "enum",
            "name": name,
            "values": [{"type": "enum-value", "value": v} for v in values],
            "extAttrs": [],
        }

    def typedef(self, name: str, idl_type: dict[str, Any]) -> dict[str, Any]:
        return {"type": "typedef", "name": name, "idlType": idl_type, "extAttrs": []}

    def callback(self, name: str, idl_type: dict[str, Any] | None, *arguments: dict[str, Any]) -> dict[str, Any]:
        return {"type": "callback", "name": name, "idlType": idl_type, "arguments": list(arguments), "extAttrs": []}

    def includes(self, target: str, mixin: str) -> dict[str, Any]:
        return {"type": "includes", "target": target, "includes": mixin, "extAttrs": []}

    def eof(self) -> dict[str, Any]:
        return {"type": "eof", "value": ""}


@pytest.fixture
def idl() -> IdlBuilder:
    return IdlBuilder()


@pytest.fixture
def generate():
    """Generate a module from one definition tree, without the generation comment."""

    def _generate(definitions: list[dict[str, Any]], module: str = "test", **config: Any) -> str:
        generator_config = CodeGeneratorConfig.from_dict({"add_generation_comment": False, **config})
        return BindingGenerator(module, [definitions], generator_config).generate()

    return _generate
