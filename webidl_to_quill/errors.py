"""
Exceptions raised by the binding generator.
"""

from __future__ import annotations


class WebIdlToQuillError(Exception):
    """Base class for all generator errors."""


class SchemaParseError(WebIdlToQuillError):
    """Raised when the WebIDL definition tree is malformed.

    The tree is produced by an external parser, so this only covers
    structural problems: missing keys, wrong value types, unknown member kinds.
    """


class BindingError(WebIdlToQuillError):
    """Raised when a single definition cannot be bound.

    The orchestrator catches it, logs it and skips the offending definition
    without aborting the run.
    """

    def __init__(self, symbol: str, message: str):
        super().__init__(f"{symbol}: {message}")
        self.symbol = symbol


class OutputValidationError(WebIdlToQuillError):
    """Raised when generated Quill code fails validation before writing."""
