"""
Atomic file writer for generated binding modules.

Ensures that file writes are atomic to prevent data corruption
from interrupted operations.
"""

from __future__ import annotations

import logging
import re
import tempfile
from collections.abc import Callable
from pathlib import Path

from ...errors import OutputValidationError

logger = logging.getLogger(__name__)

# Escape sequence inside a Quill string literal
_ESCAPE_PATTERN = re.compile(r"\\.")


class AtomicWriter:
    """Handles atomic file writes with validation.

    Uses a two-phase commit approach:
    1. Write to a temporary file in the same directory
    2. Validate the content
    3. Atomically replace the target file

    This ensures that an interrupted write operation never leaves
    the target file in an incomplete state.
    """

    def __init__(self, validate_quill: Callable[[str], None] | None = None):
        """Initialize the atomic writer.

        Args:
            validate_quill: Optional validation function for Quill code
        """
        self._validate_quill = validate_quill or self._default_validate_quill

    def write(self, path: Path, content: str, validate: bool = True) -> None:
        """Write content to file atomically.

        Args:
            path: Target file path
            content: Content to write
            validate: Whether to validate before finalizing

        Raises:
            OutputValidationError: If validation fails
            OSError: If file operations fail
        """
        path.parent.mkdir(parents=True, exist_ok=True)

        # Same directory ensures atomic rename on the same filesystem
        temp_fd, temp_path_str = tempfile.mkstemp(
            dir=path.parent,
            prefix=f".{path.name}.",
            suffix=".tmp",
            text=True,
        )
        temp_path = Path(temp_path_str)

        try:
            with open(temp_fd, "w", encoding="utf-8") as f:
                f.write(content)

            if validate:
                self._validate_quill(content)

            temp_path.replace(path)
        except Exception:
            if temp_path.exists():
                try:
                    temp_path.unlink()
                except OSError:
                    logger.warning(f"Could not remove temporary file {temp_path}")
            raise

        logger.info(f"Wrote {path}")

    def write_if_not_exists(self, path: Path, content: str, validate: bool = True) -> bool:
        """Write content only if the file doesn't exist.

        Args:
            path: Target file path
            content: Content to write
            validate: Whether to validate before finalizing

        Returns:
            True if file was written

        Raises:
            FileExistsError: If the file already exists
            OutputValidationError: If validation fails
        """
        if path.exists():
            raise FileExistsError(f"Output file already exists: {path}. Use --force to overwrite it.")

        self.write(path, content, validate)
        return True

    def _default_validate_quill(self, content: str) -> None:
        """Default Quill validation.

        Args:
            content: Quill code to validate

        Raises:
            OutputValidationError: If validation fails
        """
        if not any(line.startswith("mod ") for line in content.splitlines()):
            raise OutputValidationError("Generated Quill code is missing the module declaration")

        # Every string literal must be closed once escapes are removed
        quotes = _ESCAPE_PATTERN.sub("", content).count('"')
        if quotes % 2 != 0:
            raise OutputValidationError(f"Generated Quill code has an unterminated string literal ({quotes} quotes)")
