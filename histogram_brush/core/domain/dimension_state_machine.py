"""Active-dimension state machine.

Exactly one dimension is active at any time. The only transition that
matters is a switch to a different dimension: it changes the meaning of
every cached index and therefore requires a full cache invalidation.
Re-selecting the active dimension is a no-op.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from histogram_brush.core.domain.errors import UnknownDimensionError


@dataclass(frozen=True, slots=True)
class DimensionTransition:
    prev: str
    next: str

    @property
    def changed(self) -> bool:
        return self.prev != self.next

    @property
    def requires_invalidation(self) -> bool:
        return self.changed


class ActiveDimensionState:
    """Holds the active dimension name and guards transitions."""

    def __init__(self, dimensions: Iterable[str], initial: str) -> None:
        self._known: frozenset[str] = frozenset(dimensions)
        if initial not in self._known:
            raise UnknownDimensionError(initial)
        self._active = initial

    @property
    def active(self) -> str:
        return self._active

    def is_active(self, name: str) -> bool:
        return name == self._active

    def transition(self, name: str) -> DimensionTransition:
        """Move to ``name`` and return the transition taken."""
        if name not in self._known:
            raise UnknownDimensionError(name)
        transition = DimensionTransition(prev=self._active, next=name)
        self._active = name
        return transition
