"""
Age-band pricing matrix: rows are age ranges, columns are plans.

The header row is read first.  Every non-blank header cell after the
label column becomes a plan key *and keeps its own column index*, so a
blank header cell between two plans never shifts the prices of the next
plan.  Every data row gets exactly that key set; a blank price is 0.
"""

from __future__ import annotations

from typing import Dict, List, Tuple

from dto.cell import RawGrid
from dto.coordinate_map import AgeBandCoordinates
from dto.proposal import AgeBandPricingRow, SectionResult
from extractors.base import AGE_PATTERN_MISMATCH, BLANK_LABEL, SectionExtractor
from utils.normalizers import is_age_range, parse_currency, trimmed_label


def read_plan_columns(grid: RawGrid, coords: AgeBandCoordinates) -> List[Tuple[str, int]]:
    """Return ``[(plan_name, column_index), ...]`` from the header row."""
    columns: List[Tuple[str, int]] = []
    seen: Dict[str, int] = {}
    cells = grid.row_cells(coords.header_row)
    for col in range(coords.first_plan_column, len(cells)):
        name = trimmed_label(cells[col])
        if not name:
            continue
        # Duplicate headers would collapse into one key.
        seen[name] = seen.get(name, 0) + 1
        if seen[name] > 1:
            name = f"{name} ({seen[name]})"
        columns.append((name, col))
    return columns


class AgeBandExtractor(SectionExtractor[AgeBandCoordinates, AgeBandPricingRow]):

    def __init__(self, section: str = "age_bands") -> None:
        self.section = section

    def extract(
        self,
        grid: RawGrid,
        coords: AgeBandCoordinates,
    ) -> SectionResult[AgeBandPricingRow]:
        result: SectionResult[AgeBandPricingRow] = SectionResult[AgeBandPricingRow]()
        plan_columns = read_plan_columns(grid, coords)

        for r in coords.rows():
            label = trimmed_label(grid.cell(r, coords.label_column))
            if not label:
                self._skip(result, r, label, BLANK_LABEL)
                continue
            if not is_age_range(label):
                self._skip(result, r, label, AGE_PATTERN_MISMATCH)
                continue

            result.rows.append(
                AgeBandPricingRow(
                    age_range=label,
                    prices={
                        name: parse_currency(grid.cell(r, col))
                        for name, col in plan_columns
                    },
                )
            )

        return result
