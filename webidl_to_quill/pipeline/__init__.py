"""
Pipeline - AST-based WebIDL to Quill binding generator.

This module provides a multi-phase architecture for generating Quill
bindings from WebIDL definition trees:

1. Phase 1 (Parser): Parse the webidl2 JSON tree into a Schema AST
2. Phase 2 (Analyzer): Build the symbol table, flatten members, map types
3. Phase 3 (AST Backend): Build the Quill declaration tree
4. Phase 4 (Serializer): Convert the Quill AST to source code
5. Phase 5 (Writer): Validate and atomically write the module
"""

from __future__ import annotations

from .config import CodeGeneratorConfig, OutputConfig, OutputMode
from .generator import BindingGenerator
from .writer import AtomicWriter

__all__ = [
    "BindingGenerator",
    "CodeGeneratorConfig",
    "OutputConfig",
    "OutputMode",
    "AtomicWriter",
]
