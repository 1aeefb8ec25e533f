"""
Quill AST node definitions.

These nodes represent the declarations of a generated Quill binding module.
They are built by the backend and serialized to source code separately.
"""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class QuillNode:
    """Base class for all Quill AST nodes."""

    pass


@dataclass
class QuillParameter(QuillNode):
    """A parameter of a function, or a field of a struct."""

    name: str = ""
    type_name: str = ""
    variadic: bool = False

    def to_string(self) -> str:
        prefix = "..." if self.variadic else ""
        return f"{prefix}{self.name}: {self.type_name}"


@dataclass
class QuillDeclaration(QuillNode):
    """Base class for top-level declarations."""

    # Lines of the `///` documentation comment
    docs: list[str] = field(default_factory=list)


@dataclass
class QuillStruct(QuillDeclaration):
    """`struct Name(...)` declaration.

    `fields` is None for opaque structs, printed as `struct Name()`.
    """

    name: str = ""
    is_public: bool = True
    fields: list[QuillParameter] | None = None


@dataclass
class QuillExternalFunction(QuillDeclaration):
    """`ext fun` declaration whose body is JavaScript source.

    Body lines hold plain JavaScript; the serializer escapes them into a
    Quill string literal.
    """

    owner: str = ""
    name: str = ""
    is_public: bool = True
    parameters: list[QuillParameter] = field(default_factory=list)
    return_type: str | None = None
    body: list[str] = field(default_factory=list)
    # Keep a single-line body on the signature line
    inline_body: bool = False


@dataclass
class QuillFunction(QuillDeclaration):
    """`fun` declaration with a Quill expression body."""

    owner: str = ""
    name: str = ""
    is_public: bool = True
    parameters: list[QuillParameter] = field(default_factory=list)
    return_type: str | None = None
    expression: str = ""
    inline_body: bool = True


@dataclass
class QuillValue(QuillDeclaration):
    """`val Owner::NAME: Type = value` declaration."""

    owner: str = ""
    name: str = ""
    is_public: bool = True
    type_name: str = ""
    value: str = ""


@dataclass
class QuillComment(QuillDeclaration):
    """Free-standing `//` comment, used for definitions without bindings."""

    text: str = ""


@dataclass
class QuillModule(QuillNode):
    """Represents a complete generated Quill module."""

    name: str = ""
    generation_comment: str = ""
    host_module: str = "js"
    declarations: list[QuillDeclaration] = field(default_factory=list)
