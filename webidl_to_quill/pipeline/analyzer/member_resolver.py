"""
Member resolver for inheritance and mixin flattening.

Collects the members an interface or dictionary exposes once its base
chain and its included mixins are taken into account.
"""

from __future__ import annotations

import logging

from ...utils import is_identifier
from ..schema_ast.nodes import ConstructorMember, Definition, Member, MemberedDefinition
from .symbol_table import SymbolTable

logger = logging.getLogger(__name__)


class MemberResolver:
    """Flattens inheritance chains and mixin inclusions."""

    def __init__(self, symbols: SymbolTable):
        """
        Initialize the resolver.

        Args:
            symbols: Symbol table of the current run
        """
        self.symbols = symbols

    def resolve(self, definition: Definition) -> list[Member]:
        """
        Resolve the flattened member list of a definition.

        Own members come first (including those of partial definitions
        of the same name), then those of each ancestor (constructors
        excluded), then those of every mixin included into the definition.

        Args:
            definition: The interface, mixin, callback interface or dictionary

        Returns:
            Ordered list of members with valid identifiers
        """
        if not isinstance(definition, MemberedDefinition):
            return []

        collected: list[Member] = []
        seen: set[str] = set()

        for searched in self._chain(definition):
            seen.add(searched.name)
            for member in self._own_members(searched):
                if isinstance(member, ConstructorMember) and searched is not definition:
                    continue
                collected.append(member)

        for relation in self.symbols.includes_for(definition.name):
            included = self.symbols.get(relation.includes)
            if not isinstance(included, MemberedDefinition):
                logger.warning(f"Could not find mixin '{relation.includes}' included by '{definition.name}'")
                continue
            if included.name in seen:
                continue
            seen.add(included.name)
            collected.extend(self._own_members(included))

        return [m for m in collected if self._has_valid_name(m, definition)]

    def ancestors(self, definition: Definition) -> list[MemberedDefinition]:
        """The resolved base definitions of a definition, nearest first."""
        if not isinstance(definition, MemberedDefinition):
            return []
        chain = self._chain(definition)
        return chain[1:]

    def _own_members(self, definition: MemberedDefinition) -> list[Member]:
        """Members of a definition followed by those of its partial definitions."""
        members = list(definition.members)
        for partial in self.symbols.partials_for(definition.name):
            if partial is not definition and isinstance(partial, MemberedDefinition):
                members.extend(partial.members)
        return members

    def _chain(self, definition: MemberedDefinition) -> list[MemberedDefinition]:
        """Walk the inheritance chain starting at (and including) the definition."""
        chain = [definition]
        visited = {definition.name}
        searched = definition
        while searched.inheritance:
            base = self.symbols.get(searched.inheritance)
            if not isinstance(base, MemberedDefinition):
                logger.warning(f"Could not find base '{searched.inheritance}' of '{searched.name}'")
                break
            if base.name in visited:
                logger.warning(f"Inheritance cycle detected at '{base.name}' while resolving '{definition.name}'")
                break
            visited.add(base.name)
            chain.append(base)
            searched = base
        return chain

    def _has_valid_name(self, member: Member, owner: Definition) -> bool:
        # Constructors and unnamed specials have no name to check
        if not member.name or is_identifier(member.name):
            return True
        logger.debug(f"Skipping member '{member.name}' of '{owner.name}': not a valid identifier")
        return False
