"""
Emission record for declaration deduplication.
"""

from __future__ import annotations

import logging

logger = logging.getLogger(__name__)

# (symbol name, member discriminator)
EmissionPath = tuple[str, str | None]


class EmissionRecord:
    """Remembers which declarations have been produced during one run.

    The same definition can be reached several times: through partial
    definitions, through several schema fragments or through several
    `includes` relations. Only the first occurrence of a path is emitted.
    """

    def __init__(self):
        self._emitted: set[EmissionPath] = set()
        self._order: list[EmissionPath] = []

    def claim(self, symbol: str, discriminator: str | None = None) -> bool:
        """
        Mark a declaration path as emitted.

        Args:
            symbol: Name of the definition owning the declaration
            discriminator: Member discriminator, None for the definition itself

        Returns:
            True if the path was not emitted before and the caller should emit it
        """
        path = (symbol, discriminator)
        if path in self._emitted:
            logger.debug(f"Skipping already emitted declaration {symbol}::{discriminator or ''}")
            return False
        self._emitted.add(path)
        self._order.append(path)
        return True

    def is_emitted(self, symbol: str, discriminator: str | None = None) -> bool:
        return (symbol, discriminator) in self._emitted

    def savepoint(self) -> int:
        """Position to roll back to if the current definition fails."""
        return len(self._order)

    def rollback(self, savepoint: int) -> None:
        """Forget every claim made after the given savepoint."""
        for path in self._order[savepoint:]:
            self._emitted.discard(path)
        del self._order[savepoint:]

    def __contains__(self, path: object) -> bool:
        return path in self._emitted

    def __len__(self) -> int:
        return len(self._emitted)
