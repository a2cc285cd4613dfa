"""
Anchor checks derived from a ``CoordinateMap``.

Every map gets the same structural anchors (company name present, a
brand-prefixed plan row, a plausible age-band header) plus whatever
explicit label anchors its revision declares.
"""

from __future__ import annotations

from typing import List

from dto.cell import RawGrid, TextCell
from dto.coordinate_map import (
    AgeBandCoordinates,
    CoordinateMap,
    LabelAnchor,
    PlanCoordinates,
)
from layout.base import Anchor
from utils.normalizers import is_age_range, parse_currency, trimmed_label


class NonBlankCellAnchor(Anchor):
    """A single cell that must hold something."""

    def __init__(self, row: int, column: int, what: str) -> None:
        self.row = row
        self.column = column
        self.what = what

    def check(self, grid: RawGrid) -> bool:
        return trimmed_label(grid.cell(self.row, self.column)) != ""

    def describe(self) -> str:
        return f"{self.what} at ({self.row}, {self.column}) is not blank"


class PrefixedPlanAnchor(Anchor):
    """At least one row of a plan range starts with the brand prefix."""

    def __init__(self, coords: PlanCoordinates) -> None:
        self.coords = coords

    def check(self, grid: RawGrid) -> bool:
        prefix = self.coords.name_prefix
        return any(
            trimmed_label(grid.cell(r, self.coords.name_column)).startswith(prefix)
            for r in self.coords.rows()
        )

    def describe(self) -> str:
        return (
            f"a '{self.coords.name_prefix}' plan in rows "
            f"{self.coords.start_row}-{self.coords.end_row}, "
            f"column {self.coords.name_column}"
        )


class AgeBandHeaderAnchor(Anchor):
    """
    The header row holds plan names above the age-range rows.

    A data row must not pass for a header, so the header's own label cell
    cannot be an age range, its plan cells must be text that reads as
    neither a price nor an age range, and the first row below it must be
    an age range.
    """

    def __init__(self, coords: AgeBandCoordinates) -> None:
        self.coords = coords

    @staticmethod
    def _is_plan_name(cell) -> bool:
        if not isinstance(cell, TextCell):
            return False
        text = trimmed_label(cell)
        return not is_age_range(text) and parse_currency(text) == 0

    def check(self, grid: RawGrid) -> bool:
        c = self.coords
        if is_age_range(trimmed_label(grid.cell(c.header_row, c.label_column))):
            return False
        header = grid.row_cells(c.header_row)[c.first_plan_column:]
        names = [cell for cell in header if trimmed_label(cell)]
        if not names or not all(self._is_plan_name(cell) for cell in names):
            return False
        return is_age_range(trimmed_label(grid.cell(c.start_row, c.label_column)))

    def describe(self) -> str:
        return (
            f"age-band header with plan names at row {self.coords.header_row} "
            f"and an age range at row {self.coords.start_row}"
        )


class ExpectedLabelAnchor(Anchor):
    """A cell whose text starts with one of the expected labels."""

    def __init__(self, spec: LabelAnchor) -> None:
        self.spec = spec

    def check(self, grid: RawGrid) -> bool:
        text = trimmed_label(grid.cell(self.spec.row, self.spec.column)).upper()
        if not text:
            return False
        return any(text.startswith(label.upper()) for label in self.spec.labels)

    def describe(self) -> str:
        return (
            f"label {self.spec.labels} at ({self.spec.row}, {self.spec.column})"
        )


def anchors_for(cmap: CoordinateMap) -> List[Anchor]:
    """Build the anchor list used to validate *cmap* against a grid."""
    anchors: List[Anchor] = []
    if cmap.company is not None:
        row, col = cmap.company.name_cell
        anchors.append(NonBlankCellAnchor(row, col, "company name"))
    anchors.append(PrefixedPlanAnchor(cmap.plans_with_copay))
    anchors.append(AgeBandHeaderAnchor(cmap.age_bands_copay))
    anchors.extend(ExpectedLabelAnchor(spec) for spec in cmap.anchors)
    return anchors
