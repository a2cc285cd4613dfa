"""
Plan pricing list (with or without copay).

Only rows whose name starts with the brand prefix are plans; anything
else inside the range is a spacer, a merged caption or a footnote.
"""

from __future__ import annotations

from dto.cell import RawGrid
from dto.coordinate_map import PlanCoordinates
from dto.proposal import PlanRow, SectionResult
from extractors.base import BLANK_LABEL, PREFIX_MISMATCH, SectionExtractor
from utils.normalizers import parse_currency, trimmed_label


class PlanExtractor(SectionExtractor[PlanCoordinates, PlanRow]):

    def __init__(self, section: str = "plans") -> None:
        self.section = section

    def extract(
        self,
        grid: RawGrid,
        coords: PlanCoordinates,
    ) -> SectionResult[PlanRow]:
        result: SectionResult[PlanRow] = SectionResult[PlanRow]()

        for r in coords.rows():
            name = trimmed_label(grid.cell(r, coords.name_column))
            if not name:
                self._skip(result, r, name, BLANK_LABEL)
                continue
            if not name.startswith(coords.name_prefix):
                self._skip(result, r, name, PREFIX_MISMATCH)
                continue

            result.rows.append(
                PlanRow(
                    name=name,
                    ans_code=trimmed_label(grid.cell(r, coords.ans_column)),
                    per_capita=parse_currency(grid.cell(r, coords.per_capita_column)),
                    estimated_invoice=parse_currency(
                        grid.cell(r, coords.estimated_invoice_column)
                    ),
                )
            )

        return result
