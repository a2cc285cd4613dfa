"""
Base class for all section extractors.

Each extractor receives the sheet's ``RawGrid`` together with the
coordinates of its section and returns a ``SectionResult``: the rows it
accepted plus the rows it skipped (and why).  Extractors never raise for
a malformed row.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any, Generic, TypeVar

from dto.cell import RawGrid
from dto.proposal import SectionResult, SkippedRow

logger = logging.getLogger(__name__)

CoordsT = TypeVar("CoordsT")
RowT = TypeVar("RowT")

# Skip reasons
BLANK_LABEL = "blank-label"
SENTINEL = "sentinel"
PREFIX_MISMATCH = "prefix-mismatch"
AGE_PATTERN_MISMATCH = "age-pattern-mismatch"


class SectionExtractor(ABC, Generic[CoordsT, RowT]):
    """Interface that every range-based section extractor must implement."""

    section: str = ""

    @abstractmethod
    def extract(self, grid: RawGrid, coords: CoordsT) -> SectionResult[RowT]:
        """
        Read the section described by *coords* out of *grid*.

        Returns every accepted row in grid order; rejected rows end up in
        ``SectionResult.skipped``.
        """
        ...

    def _skip(
        self,
        result: SectionResult[Any],
        row: int,
        label: str,
        reason: str,
    ) -> None:
        logger.debug(
            "  [%s] row %d skipped (%s): %r", self.section, row, reason, label
        )
        result.skipped.append(SkippedRow(row=row, label=label, reason=reason))
