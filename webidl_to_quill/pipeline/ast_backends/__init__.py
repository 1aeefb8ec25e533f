"""
AST backends module.

Builds the Quill declaration tree of a binding module and serializes it.
"""

from __future__ import annotations

from .base import AstBackend
from .emission import EmissionRecord
from .quill_ast_nodes import (
    QuillComment,
    QuillDeclaration,
    QuillExternalFunction,
    QuillFunction,
    QuillModule,
    QuillNode,
    QuillParameter,
    QuillStruct,
    QuillValue,
)
from .quill_backend import QuillAstBackend
from .quill_serializer import QuillSerializer

__all__ = [
    "AstBackend",
    "EmissionRecord",
    "QuillAstBackend",
    "QuillSerializer",
    "QuillNode",
    "QuillDeclaration",
    "QuillParameter",
    "QuillStruct",
    "QuillExternalFunction",
    "QuillFunction",
    "QuillValue",
    "QuillComment",
    "QuillModule",
]
