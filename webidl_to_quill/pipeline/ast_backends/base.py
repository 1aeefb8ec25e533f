"""
Base class for AST-based binding backends.

Defines the interface that a target-language backend must implement.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from ..config import CodeGeneratorConfig
from ..schema_ast.nodes import SchemaTree, TypeRef, ValueLiteral
from .quill_ast_nodes import QuillModule


class AstBackend(ABC):
    """Abstract base class for AST-based binding backends."""

    # File extension
    FILE_EXTENSION: str = ""

    def __init__(self, config: CodeGeneratorConfig):
        """
        Initialize the backend.

        Args:
            config: Code generation configuration
        """
        self.config = config

    @abstractmethod
    def build_module(self, tree: SchemaTree, module_name: str, generation_comment: str = "") -> QuillModule:
        """
        Build the declaration tree of a module.

        Args:
            tree: The parsed definitions
            module_name: Name of the generated module
            generation_comment: Comment placed above the module header

        Returns:
            Module AST ready for serialization
        """

    @abstractmethod
    def translate_type(self, type_ref: TypeRef | None) -> str:
        """
        Translate a WebIDL type to a target-language type string.

        Args:
            type_ref: The type reference

        Returns:
            Target-language type string
        """

    @abstractmethod
    def format_default_value(self, value: ValueLiteral, type_ref: TypeRef) -> str:
        """
        Format a default value for the target language.

        Args:
            value: The literal from the schema
            type_ref: The type of the value

        Returns:
            Formatted default value string
        """
