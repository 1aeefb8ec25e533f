"""
Quill AST Serializer.

Converts Quill AST nodes to Quill source code:
- Module header rendered from the `prefix.quill.jinja2` template
- One blank line after every declaration
- Consecutive `val` declarations are grouped without blank lines
- `ext fun` bodies are escaped into Quill string literals
"""

from __future__ import annotations

from pathlib import Path

import jinja2

from .quill_ast_nodes import (
    QuillComment,
    QuillDeclaration,
    QuillExternalFunction,
    QuillFunction,
    QuillModule,
    QuillParameter,
    QuillStruct,
    QuillValue,
)


class QuillSerializer:
    """Serializes Quill AST nodes to source code."""

    INDENT = "    "  # 4 spaces

    TEMPLATE_LANG = "quill"

    def __init__(self):
        self._setup_templates()

    def _setup_templates(self) -> None:
        """Set up Jinja2 templates."""
        template_dir = Path(__file__).parent.parent.parent / "templates" / self.TEMPLATE_LANG
        self.jinja_env = jinja2.Environment(
            loader=jinja2.FileSystemLoader(str(template_dir)),
            lstrip_blocks=True,
            trim_blocks=True,
        )
        self.prefix_template = self.jinja_env.get_template(f"prefix.{self.TEMPLATE_LANG}.jinja2")

    def serialize(self, module: QuillModule) -> str:
        """Serialize a complete Quill module to source code."""
        header = self.prefix_template.render(
            generation_comment=module.generation_comment,
            module_name=module.name,
            host_module=module.host_module,
        )
        lines: list[str] = [header, ""]

        declarations = module.declarations
        for i, declaration in enumerate(declarations):
            lines.extend(self.serialize_declaration(declaration))
            following = declarations[i + 1] if i + 1 < len(declarations) else None
            if isinstance(declaration, QuillValue) and isinstance(following, QuillValue):
                continue
            lines.append("")

        return "\n".join(lines) + "\n"

    def serialize_declaration(self, declaration: QuillDeclaration) -> list[str]:
        """Serialize a single declaration, including its documentation."""
        lines = [f"/// {doc}" for doc in declaration.docs]

        if isinstance(declaration, QuillStruct):
            lines.extend(self._serialize_struct(declaration))
        elif isinstance(declaration, QuillExternalFunction):
            lines.extend(self._serialize_external_function(declaration))
        elif isinstance(declaration, QuillFunction):
            lines.extend(self._serialize_function(declaration))
        elif isinstance(declaration, QuillValue):
            lines.append(self._serialize_value(declaration))
        elif isinstance(declaration, QuillComment):
            lines.append(f"// {declaration.text}")
        else:
            raise TypeError(f"Cannot serialize {type(declaration).__name__}")

        return lines

    def escape_string(self, text: str) -> str:
        """Escape text for use inside a Quill string literal."""
        return text.replace("\\", "\\\\").replace('"', '\\"')

    def _visibility(self, is_public: bool) -> str:
        return "pub " if is_public else ""

    def _parameters(self, parameters: list[QuillParameter]) -> str:
        return ", ".join(p.to_string() for p in parameters)

    def _serialize_struct(self, struct: QuillStruct) -> list[str]:
        declaration = f"{self._visibility(struct.is_public)}struct {struct.name}"
        if struct.fields is None:
            return [f"{declaration}()"]

        lines = [f"{declaration}("]
        for i, struct_field in enumerate(struct.fields):
            comma = "," if i < len(struct.fields) - 1 else ""
            lines.append(f"{self.INDENT}{struct_field.to_string()}{comma}")
        lines.append(")")
        return lines

    def _signature(self, keyword: str, decl: QuillExternalFunction | QuillFunction) -> str:
        signature = f"{self._visibility(decl.is_public)}{keyword} {decl.owner}::{decl.name}({self._parameters(decl.parameters)})"
        if decl.return_type is not None:
            signature += f" -> {decl.return_type}"
        return signature

    def _serialize_external_function(self, function: QuillExternalFunction) -> list[str]:
        signature = self._signature("ext fun", function)
        body = [self.escape_string(line) for line in function.body]

        if len(body) == 1:
            if function.inline_body:
                return [f'{signature} = "{body[0]}"']
            return [signature, f'{self.INDENT}= "{body[0]}"']

        lines = [f'{signature} = "']
        lines.extend(f"{self.INDENT}{line}" for line in body)
        lines.append('"')
        return lines

    def _serialize_function(self, function: QuillFunction) -> list[str]:
        signature = self._signature("fun", function)
        if function.inline_body:
            return [f"{signature} = {function.expression}"]
        return [signature, f"{self.INDENT}= {function.expression}"]

    def _serialize_value(self, value: QuillValue) -> str:
        return f"{self._visibility(value.is_public)}val {value.owner}::{value.name}: {value.type_name} = {value.value}"
