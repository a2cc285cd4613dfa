"""
Base class for layout anchors.

An anchor is a cheap structural check against a handful of cells.  A
``CoordinateMap`` candidate is accepted only when every one of its
anchors holds on the grid.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from dto.cell import RawGrid


class Anchor(ABC):
    """Interface that every anchor check must implement."""

    @abstractmethod
    def check(self, grid: RawGrid) -> bool:
        """Return True when the grid has the expected content at this anchor."""
        ...

    @abstractmethod
    def describe(self) -> str:
        """Short human-readable description, used in fallback warnings."""
        ...
