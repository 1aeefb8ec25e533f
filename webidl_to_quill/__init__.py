"""WebIDL to Quill binding generator

A Python package for generating Quill bindings to JavaScript APIs from
WebIDL definitions. Interfaces, dictionaries, enums, callbacks and mixins
become Quill declarations with conversions to and from JavaScript values.
"""

__version__ = "1.0.0"

from .pipeline import (
    AtomicWriter,
    BindingGenerator,
    CodeGeneratorConfig,
    OutputConfig,
    OutputMode,
)

__all__ = [
    "BindingGenerator",
    "CodeGeneratorConfig",
    "OutputConfig",
    "OutputMode",
    "AtomicWriter",
]
