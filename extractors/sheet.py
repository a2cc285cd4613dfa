"""
SheetExtractor — the per-sheet orchestrator.

Responsibilities:
  1. Resolve which ``CoordinateMap`` applies to the sheet.
  2. Run every section extractor against that map, in sheet order:
     company → demographics → plans with copay → copay age bands →
     plans without copay → no-copay age bands.
  3. Return a ``SheetExtraction`` with rows and skip diagnostics.
"""

from __future__ import annotations

import logging

from dto.cell import RawGrid
from dto.proposal import SheetExtraction
from extractors.age_bands import AgeBandExtractor
from extractors.company import CompanyExtractor
from extractors.demographics import DemographicsExtractor
from extractors.plans import PlanExtractor
from layout.resolver import LayoutResolver

logger = logging.getLogger(__name__)


class SheetExtractor:
    """
    Extracts every section of one quote sheet.

    Usage::

        extractor = SheetExtractor(primary_resolver())
        extraction = extractor.extract(grid)
    """

    def __init__(self, resolver: LayoutResolver) -> None:
        self.resolver = resolver
        self._company = CompanyExtractor()
        self._demographics = DemographicsExtractor()
        self._plans_with_copay = PlanExtractor("plans_with_copay")
        self._plans_without_copay = PlanExtractor("plans_without_copay")
        self._age_bands_copay = AgeBandExtractor("age_bands_copay")
        self._age_bands_no_copay = AgeBandExtractor("age_bands_no_copay")

    def extract(self, grid: RawGrid) -> SheetExtraction:
        resolution = self.resolver.resolve(grid)
        cmap = resolution.coordinate_map

        extraction = SheetExtraction(
            sheet_name=grid.sheet_name,
            layout=cmap.name,
            matched=resolution.matched,
            failed_anchors=resolution.failed_anchors,
            company=self._company.extract(grid, cmap.company),
            demographics=self._demographics.extract(grid, cmap.demographics),
            plans_with_copay=self._plans_with_copay.extract(grid, cmap.plans_with_copay),
            plans_without_copay=self._plans_without_copay.extract(
                grid, cmap.plans_without_copay
            ),
            age_bands_copay=self._age_bands_copay.extract(grid, cmap.age_bands_copay),
            age_bands_no_copay=self._age_bands_no_copay.extract(
                grid, cmap.age_bands_no_copay
            ),
        )

        logger.info(
            "  -> sheet '%s' (%s): %d demographic, %d+%d plan, %d+%d age-band row(s)",
            grid.sheet_name,
            cmap.name,
            len(extraction.demographics.rows),
            len(extraction.plans_with_copay.rows),
            len(extraction.plans_without_copay.rows),
            len(extraction.age_bands_copay.rows),
            len(extraction.age_bands_no_copay.rows),
        )
        return extraction
