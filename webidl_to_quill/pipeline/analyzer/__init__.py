"""
Analyzer module.

Contains symbol lookup, member flattening, type mapping, overload
mangling and marshalling synthesis.
"""

from __future__ import annotations

from .marshalling import (
    FunctionAdapter,
    Marshaller,
    MarshallingSynthesizer,
    OptionalConversion,
    Passthrough,
    PrimitiveConversion,
    PromiseConversion,
    RecordConversion,
    SequenceConversion,
    SymbolConversion,
)
from .member_resolver import MemberResolver
from .symbol_table import SymbolTable
from .type_mapper import OverloadMangler, TypeMapper

__all__ = [
    "SymbolTable",
    "MemberResolver",
    "TypeMapper",
    "OverloadMangler",
    "MarshallingSynthesizer",
    "Marshaller",
    "Passthrough",
    "PrimitiveConversion",
    "SymbolConversion",
    "OptionalConversion",
    "SequenceConversion",
    "PromiseConversion",
    "RecordConversion",
    "FunctionAdapter",
]
