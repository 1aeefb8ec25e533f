"""
Binding generator facade.

Runs the whole pipeline for one module: parse the definition trees, bind
them with the Quill backend and serialize (or write) the result.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from .. import __version__
from ..cli_utils import reconstruct_command_line
from .ast_backends import QuillAstBackend, QuillModule
from .config import CodeGeneratorConfig, OutputMode
from .schema_ast import SchemaParser, SchemaTree
from .writer import AtomicWriter

logger = logging.getLogger(__name__)


class BindingGenerator:
    """Generates one Quill binding module from WebIDL definition trees."""

    def __init__(
        self,
        module_name: str,
        fragments: list[list[dict[str, Any]]],
        config: CodeGeneratorConfig | None = None,
    ):
        """
        Initialize the generator.

        Args:
            module_name: Name of the generated Quill module
            fragments: Definition trees to merge, each a list of definitions
            config: Code generation configuration
        """
        self.module_name = module_name
        self.fragments = fragments
        self.config = config or CodeGeneratorConfig()
        self.parser = SchemaParser()
        self.backend = QuillAstBackend(self.config)

    def parse(self) -> SchemaTree:
        tree = self.parser.parse_fragments(self.fragments)
        logger.debug(f"Parsed {len(tree.definitions)} definitions from {len(self.fragments)} fragment(s)")
        return tree

    def build_module(self) -> QuillModule:
        """Build the module AST without serializing it."""
        return self.backend.build_module(self.parse(), self.module_name, self._generate_command_comment())

    def generate(self) -> str:
        """Generate the Quill source code of the module."""
        return self.backend.serializer.serialize(self.build_module())

    def write(self, path: Path) -> str:
        """
        Generate the module and write it to a file.

        Args:
            path: Output file path

        Returns:
            The generated source code

        Raises:
            FileExistsError: If the file exists and the output mode forbids overwriting
            OutputValidationError: If the generated code fails validation
        """
        code = self.generate()
        output = self.config.output
        validate = output.validate_before_write

        if not output.atomic_write:
            if output.mode == OutputMode.ERROR_IF_EXISTS and path.exists():
                raise FileExistsError(f"Output file already exists: {path}. Use --force to overwrite it.")
            path.write_text(code, encoding="utf-8")
            return code

        writer = AtomicWriter()
        if output.mode == OutputMode.FORCE:
            writer.write(path, code, validate)
        else:
            writer.write_if_not_exists(path, code, validate)
        return code

    def _generate_command_comment(self) -> str:
        """Generate a simplified command line comment for the generated file"""
        if not self.config.add_generation_comment:
            return ""

        try:
            from ..webidl_to_quill import webidl_to_quill as click_command  # noqa

            command_line = reconstruct_command_line(click_command)
        except (ImportError, AttributeError):
            # Fallback if Click command not available
            command_line = "webidl_to_quill"

        return f"// Generated by webidl_to_quill v{__version__} : {command_line}"
