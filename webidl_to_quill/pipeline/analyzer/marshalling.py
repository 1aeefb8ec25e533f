"""
Marshalling synthesis between JavaScript values and Quill values.

Every type shape gets a Marshaller node. A node renders a decode
expression (JavaScript value to Quill value) and an encode expression
(Quill value to JavaScript value); the two are structural inverses.

Local names introduced by the rendered expressions carry the nesting
depth as a suffix, so nested adapters never shadow each other.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field

from ..schema_ast.nodes import (
    CallbackDefinition,
    CallbackInterfaceDefinition,
    EnumDefinition,
    GenericKind,
    PrimitiveKind,
    TypedefDefinition,
    TypeRef,
)
from .symbol_table import SymbolTable
from .type_mapper import GENERIC_ARITY, FunctionShape, TypeMapper, TypeResolver


@dataclass
class Marshaller(ABC):
    """Base class for marshalling plan nodes."""

    @abstractmethod
    def decode(self, expr: str, depth: int = 0) -> str:
        """Render the conversion of a JavaScript value to a Quill value."""

    @abstractmethod
    def encode(self, expr: str, depth: int = 0) -> str:
        """Render the conversion of a Quill value to a JavaScript value."""


@dataclass
class Passthrough(Marshaller):
    """Identity marshalling for values Quill only sees as `JsValue`."""

    def decode(self, expr: str, depth: int = 0) -> str:
        return expr

    def encode(self, expr: str, depth: int = 0) -> str:
        return expr


@dataclass
class PrimitiveConversion(Marshaller):
    type_name: str = ""
    encoder: str = "as_js"

    def decode(self, expr: str, depth: int = 0) -> str:
        return f"#fun({self.type_name}::from_js)({expr})"

    def encode(self, expr: str, depth: int = 0) -> str:
        return f"#fun({self.type_name}::{self.encoder})({expr})"


@dataclass
class SymbolConversion(Marshaller):
    """Conversion through the `from_js`/`as_js` pair generated for a definition."""

    name: str = ""

    def decode(self, expr: str, depth: int = 0) -> str:
        return f"#fun({self.name}::from_js)({expr})"

    def encode(self, expr: str, depth: int = 0) -> str:
        return f"#fun({self.name}::as_js)({expr})"


@dataclass
class ContainerConversion(Marshaller):
    """Conversion of a generic container, mapping each element through `element`."""

    container: str = ""
    type_args: str = ""
    element: Marshaller = field(default_factory=Passthrough)
    variable: str = "e"

    def decode(self, expr: str, depth: int = 0) -> str:
        v = f"{self.variable}{depth}"
        inner = self.element.decode(v, depth + 1)
        return f"#fun({self.container}::from_js[{self.type_args}])({expr}, ({v}) => {inner})"

    def encode(self, expr: str, depth: int = 0) -> str:
        v = f"{self.variable}{depth}"
        inner = self.element.encode(v, depth + 1)
        return f"#fun({self.container}::as_js[{self.type_args}])({expr}, ({v}) => {inner})"


@dataclass
class OptionalConversion(ContainerConversion):
    """Host null or undefined is the empty option, anything else is wrapped."""

    container: str = "Option"
    variable: str = "n"


@dataclass
class SequenceConversion(ContainerConversion):
    container: str = "List"
    variable: str = "e"


@dataclass
class PromiseConversion(ContainerConversion):
    container: str = "Promise"
    variable: str = "t"


@dataclass
class RecordConversion(Marshaller):
    type_args: str = ""
    key: Marshaller = field(default_factory=Passthrough)
    value: Marshaller = field(default_factory=Passthrough)

    def decode(self, expr: str, depth: int = 0) -> str:
        k, v = f"k{depth}", f"v{depth}"
        return (
            f"#fun(Map::from_js[{self.type_args}])({expr}, "
            f"({k}) => {self.key.decode(k, depth + 1)}, ({v}) => {self.value.decode(v, depth + 1)})"
        )

    def encode(self, expr: str, depth: int = 0) -> str:
        k, v = f"k{depth}", f"v{depth}"
        return (
            f"#fun(Map::as_js[{self.type_args}])({expr}, "
            f"({k}) => {self.key.encode(k, depth + 1)}, ({v}) => {self.value.encode(v, depth + 1)})"
        )


@dataclass
class FunctionAdapter(Marshaller):
    """Adapter closure translating the calling convention of a callback.

    Decoding wraps a host function: each call encodes its arguments and
    decodes the result. Encoding wraps a Quill function the other way round.
    For callback interfaces `method` names the host-side method.
    """

    arguments: list[Marshaller] = field(default_factory=list)
    result: Marshaller = field(default_factory=Passthrough)
    method: str | None = None

    def decode(self, expr: str, depth: int = 0) -> str:
        f, r = f"f{depth}", f"r{depth}"
        params = self._params(depth)
        args = ", ".join(m.encode(p, depth + 1) for m, p in zip(self.arguments, params))
        callee = f"{f}.{self.method}" if self.method else f
        body = f"{{ const {r} = {callee}({args}); return {self.result.decode(r, depth + 1)}; }}"
        return f"(({f}) => ({', '.join(params)}) => {body})({expr})"

    def encode(self, expr: str, depth: int = 0) -> str:
        f, r = f"f{depth}", f"r{depth}"
        params = self._params(depth)
        args = ", ".join(m.decode(p, depth + 1) for m, p in zip(self.arguments, params))
        body = f"{{ const {r} = {f}({args}); return {self.result.encode(r, depth + 1)}; }}"
        adapter = f"({', '.join(params)}) => {body}"
        if self.method:
            return f"(({f}) => ({{ {self.method}: {adapter} }}))({expr})"
        return f"(({f}) => {adapter})({expr})"

    def _params(self, depth: int) -> list[str]:
        return [f"a{depth}_{i}" for i in range(len(self.arguments))]


class MarshallingSynthesizer(TypeResolver):
    """Builds marshalling plans for WebIDL type references."""

    def __init__(self, symbols: SymbolTable, mapper: TypeMapper | None = None):
        super().__init__(symbols)
        self.mapper = mapper or TypeMapper(symbols)

    def decode(self, type_ref: TypeRef | None, expr: str) -> str:
        """Expression converting the JavaScript value `expr` to Quill."""
        return self.plan(type_ref).decode(expr)

    def encode(self, type_ref: TypeRef | None, expr: str) -> str:
        """Expression converting the Quill value `expr` to JavaScript."""
        return self.plan(type_ref).encode(expr)

    def plan(self, type_ref: TypeRef | None) -> Marshaller:
        """
        Build the marshalling plan of a type reference.

        Args:
            type_ref: The WebIDL type (None stands for no return value)

        Returns:
            Root node of the plan
        """
        if type_ref is None:
            return PrimitiveConversion(type_name="Unit")
        if type_ref.nullable:
            return OptionalConversion(
                type_args=self.mapper.map_named(type_ref),
                element=self.plan_named(type_ref),
            )
        return self.plan_named(type_ref)

    def plan_named(self, type_ref: TypeRef) -> Marshaller:
        """Plan of a type reference ignoring its nullability."""
        if type_ref.union:
            return Passthrough()

        if type_ref.generic != GenericKind.NONE:
            if len(type_ref.arguments) != GENERIC_ARITY[type_ref.generic]:
                return Passthrough()
            if type_ref.generic == GenericKind.RECORD:
                key, value = type_ref.arguments
                return RecordConversion(
                    type_args=f"{self.mapper.map_type(key)}, {self.mapper.map_type(value)}",
                    key=self.plan(key),
                    value=self.plan(value),
                )
            inner = type_ref.arguments[0]
            cls = SequenceConversion if type_ref.generic == GenericKind.SEQUENCE else PromiseConversion
            return cls(type_args=self.mapper.map_type(inner), element=self.plan(inner))

        primitive = type_ref.primitive
        if primitive is not None:
            return self._plan_primitive(primitive)

        definition = self.symbols.get(type_ref.name)
        if definition is None:
            return Passthrough()
        if isinstance(definition, EnumDefinition):
            return PrimitiveConversion(type_name="String")
        if isinstance(definition, TypedefDefinition):
            return self.guarded(definition.name, lambda: self.plan(definition.type_ref), Passthrough())
        if isinstance(definition, (CallbackDefinition, CallbackInterfaceDefinition)):
            shape = self.function_shape(definition)
            if shape is None:
                return Passthrough()
            return self.guarded(definition.name, lambda: self.plan_function(shape), Passthrough())
        return SymbolConversion(name=definition.name)

    def plan_function(self, shape: FunctionShape) -> FunctionAdapter:
        return FunctionAdapter(
            arguments=[self.plan(arg.type_ref) for arg in shape.arguments],
            result=self.plan(shape.return_type),
            method=shape.method,
        )

    def _plan_primitive(self, primitive: PrimitiveKind) -> Marshaller:
        if primitive == PrimitiveKind.BIGINT:
            return PrimitiveConversion(type_name="Int", encoder="as_js_bigint")
        if primitive in (PrimitiveKind.OBJECT, PrimitiveKind.ANY, PrimitiveKind.BINARY):
            return Passthrough()
        return PrimitiveConversion(type_name=TypeMapper.TYPE_MAP[primitive])
