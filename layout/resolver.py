"""
Layout Variant Resolver.

Walks an ordered list of ``CoordinateMap`` candidates and returns the
first one whose anchors all hold on the grid.  When none does, the
default map (the first candidate unless one is given) is used anyway
("best effort"): extractors skip whatever does not parse, and the broker
fixes the gaps by hand.
"""

from __future__ import annotations

import logging
from typing import List, Optional

from pydantic import BaseModel

from dto.cell import RawGrid
from dto.coordinate_map import CoordinateMap
from layout.anchors import anchors_for
from layout.constants import LAYOUT_OVERRIDE
from layout.variants import DEFAULT_PRIMARY, PRIMARY_VARIANTS, SECONDARY_VARIANTS

logger = logging.getLogger(__name__)


class LayoutResolution(BaseModel):
    coordinate_map: CoordinateMap
    # False when no candidate validated and the default was used.
    matched: bool
    failed_anchors: List[str] = []


def failed_anchors(cmap: CoordinateMap, grid: RawGrid) -> List[str]:
    """Descriptions of every anchor of *cmap* that does not hold on *grid*."""
    return [a.describe() for a in anchors_for(cmap) if not a.check(grid)]


class LayoutResolver:
    """
    Usage::

        resolver = LayoutResolver(PRIMARY_VARIANTS)
        resolution = resolver.resolve(grid)
    """

    def __init__(
        self,
        candidates: List[CoordinateMap],
        override: Optional[str] = None,
        default: Optional[CoordinateMap] = None,
    ) -> None:
        if not candidates:
            raise ValueError("LayoutResolver needs at least one candidate")
        self.candidates = list(candidates)
        self.override = override
        # Best-effort map when nothing validates; the first candidate if unset.
        self._default = default

    @property
    def default(self) -> CoordinateMap:
        return self._default if self._default is not None else self.candidates[0]

    def _forced(self) -> Optional[CoordinateMap]:
        if not self.override or self.override.lower() == "auto":
            return None
        for cmap in self.candidates:
            if cmap.name == self.override:
                return cmap
        logger.warning(
            "Unknown layout '%s' (known: %s); resolving by anchors",
            self.override,
            ", ".join(c.name for c in self.candidates),
        )
        return None

    def resolve(self, grid: RawGrid) -> LayoutResolution:
        forced = self._forced()
        if forced is not None:
            logger.info("Layout forced to '%s' for sheet '%s'", forced.name, grid.sheet_name)
            return LayoutResolution(coordinate_map=forced, matched=True)

        for cmap in self.candidates:
            failed = failed_anchors(cmap, grid)
            if not failed:
                logger.info(
                    "Sheet '%s' matches layout '%s'", grid.sheet_name, cmap.name
                )
                return LayoutResolution(coordinate_map=cmap, matched=True)
            logger.debug(
                "Layout '%s' rejected for sheet '%s': %s",
                cmap.name,
                grid.sheet_name,
                "; ".join(failed),
            )

        failed = failed_anchors(self.default, grid)
        logger.warning(
            "No known layout matches sheet '%s', falling back to '%s' "
            "(failed anchors: %s)",
            grid.sheet_name,
            self.default.name,
            "; ".join(failed),
        )
        return LayoutResolution(
            coordinate_map=self.default,
            matched=False,
            failed_anchors=failed,
        )


def primary_resolver(override: Optional[str] = None) -> LayoutResolver:
    return LayoutResolver(
        PRIMARY_VARIANTS,
        override=override or LAYOUT_OVERRIDE,
        default=DEFAULT_PRIMARY,
    )


def secondary_resolver(override: Optional[str] = None) -> LayoutResolver:
    # The PROPOSAL_LAYOUT override targets the first sheet only.
    return LayoutResolver(SECONDARY_VARIANTS, override=override)
