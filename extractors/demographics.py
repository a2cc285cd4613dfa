"""
Demographic breakdown: one row per age range with titular / dependent /
aggregate / total head counts split by sex, plus the share of lives.
"""

from __future__ import annotations

from typing import Optional

from dto.cell import RawGrid
from dto.coordinate_map import DemographicsCoordinates
from dto.proposal import DemographicRow, SectionResult
from extractors.base import BLANK_LABEL, SENTINEL, SectionExtractor
from utils.normalizers import parse_count, parse_percentage, trimmed_label


def _normalize_sentinel(label: str) -> str:
    return label.strip().rstrip(":").strip().upper()


def _count(grid: RawGrid, row: int, col: Optional[int]) -> int:
    return parse_count(grid.cell(row, col)) if col is not None else 0


class DemographicsExtractor(SectionExtractor[DemographicsCoordinates, DemographicRow]):
    section = "demographics"

    def extract(
        self,
        grid: RawGrid,
        coords: DemographicsCoordinates,
    ) -> SectionResult[DemographicRow]:
        result: SectionResult[DemographicRow] = SectionResult[DemographicRow]()
        sentinels = {_normalize_sentinel(s) for s in coords.sentinel_labels}

        for r in coords.rows():
            label = trimmed_label(grid.cell(r, coords.age_column))
            if not label:
                self._skip(result, r, label, BLANK_LABEL)
                continue
            if _normalize_sentinel(label) in sentinels:
                self._skip(result, r, label, SENTINEL)
                continue

            result.rows.append(
                DemographicRow(
                    age_range=label,
                    titular_male=_count(grid, r, coords.titular_male),
                    titular_female=_count(grid, r, coords.titular_female),
                    dependent_male=_count(grid, r, coords.dependent_male),
                    dependent_female=_count(grid, r, coords.dependent_female),
                    aggregate_male=_count(grid, r, coords.aggregate_male),
                    aggregate_female=_count(grid, r, coords.aggregate_female),
                    total_male=_count(grid, r, coords.total_male),
                    total_female=_count(grid, r, coords.total_female),
                    total=_count(grid, r, coords.total),
                    percentage=parse_percentage(
                        grid.cell(r, coords.percentage),
                        scale=coords.percentage_scale,
                    ),
                )
            )

        return result
