"""
Symbol table for definition lookup by name.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator

from ..schema_ast.nodes import Definition, IncludesDefinition

logger = logging.getLogger(__name__)


class SymbolTable:
    """Indexes named definitions and `includes` relations of one run."""

    def __init__(self):
        self._symbols: dict[str, Definition] = {}
        self._includes: list[IncludesDefinition] = []
        self._partials: dict[str, list[Definition]] = {}

    @classmethod
    def build(cls, definitions: Iterable[Definition]) -> SymbolTable:
        """
        Build a symbol table from definitions in schema order.

        A later complete definition replaces an earlier one with the same
        name. A partial definition never replaces an existing one; it is
        kept aside so its members can be merged into the complete one.

        Args:
            definitions: All definitions, possibly merged from several fragments

        Returns:
            The populated symbol table
        """
        table = cls()
        for definition in definitions:
            table.add(definition)
        return table

    def add(self, definition: Definition) -> None:
        """Register one definition."""
        if isinstance(definition, IncludesDefinition):
            self._includes.append(definition)
            return
        if not definition.name:
            return
        if definition.partial:
            partials = self._partials.setdefault(definition.name, [])
            if definition in partials:
                logger.debug(f"Skipping repeated partial definition of '{definition.name}'")
                return
            partials.append(definition)

        existing = self._symbols.get(definition.name)
        if existing is not None:
            if definition.partial:
                logger.debug(f"Partial definition of '{definition.name}' does not replace the existing one")
                return
            if not definition.partial and not existing.partial:
                logger.warning(f"Definition '{definition.name}' is declared more than once, the last declaration wins")
        self._symbols[definition.name] = definition

    def get(self, name: str | None) -> Definition | None:
        """Get a definition by name."""
        if not name:
            return None
        return self._symbols.get(name)

    def partials_for(self, name: str) -> list[Definition]:
        """All partial definitions declared for a name, in schema order."""
        return list(self._partials.get(name, []))

    def includes_for(self, target: str) -> list[IncludesDefinition]:
        """All `includes` relations whose target is the given name, in schema order."""
        return [inc for inc in self._includes if inc.target == target]

    def __contains__(self, name: object) -> bool:
        return name in self._symbols

    def __len__(self) -> int:
        return len(self._symbols)

    def __iter__(self) -> Iterator[Definition]:
        return iter(self._symbols.values())
