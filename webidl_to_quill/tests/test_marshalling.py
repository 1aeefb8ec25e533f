"""
Tests for marshalling synthesis.

Rendered expressions are checked as text. The inverse property is checked
by running the marshalling plans through a small reference interpreter
that models JavaScript values as Python values and Quill values as tagged
tuples.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import pytest

from webidl_to_quill.pipeline.analyzer import (
    FunctionAdapter,
    MarshallingSynthesizer,
    OptionalConversion,
    Passthrough,
    PrimitiveConversion,
    PromiseConversion,
    RecordConversion,
    SequenceConversion,
    SymbolConversion,
    SymbolTable,
)
from webidl_to_quill.pipeline.schema_ast import SchemaParser


@dataclass(frozen=True)
class JsPromise:
    value: Any


def to_quill(plan, js):
    """Reference semantics of `plan.decode`."""
    if isinstance(plan, Passthrough):
        return js
    if isinstance(plan, PrimitiveConversion):
        return (plan.type_name, js)
    if isinstance(plan, SymbolConversion):
        return ("ref", plan.name, js)
    if isinstance(plan, OptionalConversion):
        return ("none",) if js is None else ("some", to_quill(plan.element, js))
    if isinstance(plan, SequenceConversion):
        return ("list", tuple(to_quill(plan.element, e) for e in js))
    if isinstance(plan, PromiseConversion):
        return ("promise", to_quill(plan.element, js.value))
    if isinstance(plan, RecordConversion):
        return ("map", tuple((to_quill(plan.key, k), to_quill(plan.value, v)) for k, v in js.items()))
    if isinstance(plan, FunctionAdapter):
        target = js[plan.method] if plan.method else js

        def quill_function(*args):
            js_args = [to_js(a, v) for a, v in zip(plan.arguments, args)]
            return to_quill(plan.result, target(*js_args))

        return ("fun", quill_function)
    raise TypeError(plan)


def to_js(plan, value):
    """Reference semantics of `plan.encode`."""
    if isinstance(plan, Passthrough):
        return value
    if isinstance(plan, PrimitiveConversion):
        assert value[0] == plan.type_name
        return value[1]
    if isinstance(plan, SymbolConversion):
        assert value[:2] == ("ref", plan.name)
        return value[2]
    if isinstance(plan, OptionalConversion):
        return None if value == ("none",) else to_js(plan.element, value[1])
    if isinstance(plan, SequenceConversion):
        return [to_js(plan.element, e) for e in value[1]]
    if isinstance(plan, PromiseConversion):
        return JsPromise(to_js(plan.element, value[1]))
    if isinstance(plan, RecordConversion):
        return {to_js(plan.key, k): to_js(plan.value, v) for k, v in value[1]}
    if isinstance(plan, FunctionAdapter):
        quill_function = value[1]

        def js_function(*args):
            return to_js(plan.result, quill_function(*[to_quill(a, v) for a, v in zip(plan.arguments, args)]))

        return {plan.method: js_function} if plan.method else js_function
    raise TypeError(plan)


@pytest.fixture
def synthesizer(idl):
    tree = SchemaParser().parse(
        [
            idl.interface("Node"),
            idl.enum("Mode", "open"),
            idl.typedef("Nodes", idl.generic("sequence", idl.type("Node"))),
            idl.callback("Listener", idl.type("undefined"), idl.argument("node", idl.type("Node"))),
            idl.callback("Predicate", idl.type("boolean"), idl.argument("value", idl.type("long"))),
            idl.callback("Factory", idl.type("Predicate")),
            idl.callback_interface(
                "EventListener",
                idl.operation("handleEvent", idl.type("boolean"), idl.argument("event", idl.type("Node"))),
            ),
        ]
    )
    return MarshallingSynthesizer(SymbolTable.build(tree.definitions))


def _type(raw):
    """Parse a raw type object through a throwaway typedef."""
    return SchemaParser().parse([{"type": "typedef", "name": "T", "idlType": raw}]).definitions[0].type_ref


class TestRenderedExpressions:
    def test_primitives(self, idl, synthesizer):
        assert synthesizer.decode(_type(idl.type("boolean")), "x") == "#fun(Bool::from_js)(x)"
        assert synthesizer.encode(_type(idl.type("double")), "x") == "#fun(Float::as_js)(x)"
        assert synthesizer.encode(_type(idl.type("bigint")), "x") == "#fun(Int::as_js_bigint)(x)"
        assert synthesizer.decode(_type(idl.type("Mode")), "x") == "#fun(String::from_js)(x)"
        assert synthesizer.decode(_type(idl.type("any")), "x") == "x"
        assert synthesizer.encode(_type(idl.type("Float32Array")), "x") == "x"
        assert synthesizer.decode(None, "x") == "#fun(Unit::from_js)(x)"

    def test_nullable_reference(self, idl, synthesizer):
        ref = _type(idl.type("Node", nullable=True))

        assert synthesizer.decode(ref, "x") == "#fun(Option::from_js[mut Node])(x, (n0) => #fun(Node::from_js)(n0))"
        assert synthesizer.encode(ref, "x") == "#fun(Option::as_js[mut Node])(x, (n0) => #fun(Node::as_js)(n0))"

    def test_nested_containers_use_depth_suffixes(self, idl, synthesizer):
        ref = _type(idl.generic("sequence", idl.generic("sequence", idl.type("long"))))

        assert synthesizer.decode(ref, "x") == (
            "#fun(List::from_js[List[Int]])(x, (e0) => #fun(List::from_js[Int])(e0, (e1) => #fun(Int::from_js)(e1)))"
        )

    def test_record_and_promise(self, idl, synthesizer):
        record = _type(idl.generic("record", idl.type("DOMString"), idl.type("double")))
        promise = _type(idl.generic("Promise", idl.type("Nodes")))

        assert synthesizer.decode(record, "x") == (
            "#fun(Map::from_js[String, Float])(x, (k0) => #fun(String::from_js)(k0), (v0) => #fun(Float::from_js)(v0))"
        )
        assert synthesizer.encode(promise, "x") == (
            "#fun(Promise::as_js[List[mut Node]])(x, (t0) => "
            "#fun(List::as_js[mut Node])(t0, (e1) => #fun(Node::as_js)(e1)))"
        )

    def test_callback_adapters(self, idl, synthesizer):
        ref = _type(idl.type("Listener"))

        assert synthesizer.decode(ref, "x") == (
            "((f0) => (a0_0) => { const r0 = f0(#fun(Node::as_js)(a0_0)); return #fun(Unit::from_js)(r0); })(x)"
        )
        assert synthesizer.encode(ref, "x") == (
            "((f0) => (a0_0) => { const r0 = f0(#fun(Node::from_js)(a0_0)); return #fun(Unit::as_js)(r0); })(x)"
        )

    def test_callback_interface_adapters(self, idl, synthesizer):
        ref = _type(idl.type("EventListener"))

        assert synthesizer.decode(ref, "x") == (
            "((f0) => (a0_0) => { const r0 = f0.handleEvent(#fun(Node::as_js)(a0_0)); return #fun(Bool::from_js)(r0); })(x)"
        )
        assert synthesizer.encode(ref, "x") == (
            "((f0) => ({ handleEvent: (a0_0) => { const r0 = f0(#fun(Node::from_js)(a0_0)); "
            "return #fun(Bool::as_js)(r0); } }))(x)"
        )

    def test_nested_adapters_do_not_shadow(self, idl, synthesizer):
        decoded = synthesizer.decode(_type(idl.type("Factory")), "x")

        assert "const r0 = f0()" in decoded
        assert "((f1) => (a1_0) => { const r1 = f1(#fun(Int::as_js)(a1_0)); return #fun(Bool::from_js)(r1); })(r0)" in decoded


class TestInverseMarshalling:
    @pytest.mark.parametrize(
        "raw, js_value",
        [
            ({"type": None, "generic": "", "nullable": False, "union": False, "idlType": "long"}, 42),
            ({"type": None, "generic": "", "nullable": True, "union": False, "idlType": "DOMString"}, None),
            ({"type": None, "generic": "", "nullable": True, "union": False, "idlType": "DOMString"}, "text"),
            ({"type": None, "generic": "", "nullable": False, "union": False, "idlType": "Nodes"}, ["a", "b"]),
            ({"type": None, "generic": "", "nullable": False, "union": False, "idlType": "any"}, {"free": "form"}),
        ],
    )
    def test_values_round_trip(self, synthesizer, raw, js_value):
        plan = synthesizer.plan(_type(raw))

        quill_value = to_quill(plan, js_value)

        assert to_js(plan, quill_value) == js_value
        assert to_quill(plan, to_js(plan, quill_value)) == quill_value

    def test_nested_containers_round_trip(self, idl, synthesizer):
        ref = _type(
            idl.generic(
                "record",
                idl.type("DOMString"),
                idl.generic("sequence", idl.type("Node", nullable=True)),
            )
        )
        plan = synthesizer.plan(ref)
        js_value = {"first": ["n1", None], "second": []}

        assert to_js(plan, to_quill(plan, js_value)) == js_value

    def test_promise_round_trip(self, idl, synthesizer):
        plan = synthesizer.plan(_type(idl.generic("Promise", idl.type("double", nullable=True))))

        assert to_js(plan, to_quill(plan, JsPromise(1.5))) == JsPromise(1.5)
        assert to_js(plan, to_quill(plan, JsPromise(None))) == JsPromise(None)

    def test_callback_round_trip(self, idl, synthesizer):
        plan = synthesizer.plan(_type(idl.type("Predicate")))

        def is_even(value):
            return value % 2 == 0

        round_tripped = to_js(plan, to_quill(plan, is_even))

        assert [round_tripped(v) for v in range(4)] == [is_even(v) for v in range(4)]

    def test_callback_interface_round_trip(self, idl, synthesizer):
        plan = synthesizer.plan(_type(idl.type("EventListener")))
        listener = {"handleEvent": lambda event: event == "click"}

        round_tripped = to_js(plan, to_quill(plan, listener))

        assert round_tripped["handleEvent"]("click") is True
        assert round_tripped["handleEvent"]("hover") is False

    def test_quill_function_round_trip(self, idl, synthesizer):
        plan = synthesizer.plan(_type(idl.type("Predicate")))
        quill_function = ("fun", lambda value: ("Bool", value[1] > 0))

        decoded = to_quill(plan, to_js(plan, quill_function))

        assert decoded[1](("Int", 3)) == ("Bool", True)
        assert decoded[1](("Int", -3)) == ("Bool", False)


if __name__ == "__main__":
    pytest.main([__file__])
