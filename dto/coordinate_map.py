"""
CoordinateMap DTOs — where each logical section of the quote sheet lives.

All coordinates are zero-based (row, column) indices into a ``RawGrid``.
Each layout revision of the quote workbook is one ``CoordinateMap``; the
extractors are driven purely by these values.
"""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, model_validator


class RowRange(BaseModel):
    """Inclusive row range shared by every range-based section."""

    start_row: int
    end_row: int

    @model_validator(mode="after")
    def _check_range(self):
        if self.start_row < 0:
            raise ValueError(f"start_row must be >= 0, got {self.start_row}")
        if self.end_row < self.start_row:
            raise ValueError(
                f"end_row ({self.end_row}) is before start_row ({self.start_row})"
            )
        return self

    def rows(self) -> range:
        return range(self.start_row, self.end_row + 1)


class CompanyCoordinates(BaseModel):
    """Name, concessionaire and broker sit in one column on three consecutive rows."""

    row: int = 1
    column: int = 1

    @property
    def name_cell(self):
        return self.row, self.column

    @property
    def concessionaire_cell(self):
        return self.row + 1, self.column

    @property
    def broker_cell(self):
        return self.row + 2, self.column


class DemographicsCoordinates(RowRange):
    age_column: int
    titular_male: int
    titular_female: int
    dependent_male: int
    dependent_female: int
    # Some revisions carry real "agregado" columns, others leave them out.
    aggregate_male: Optional[int] = None
    aggregate_female: Optional[int] = None
    total_male: int
    total_female: int
    total: int
    percentage: int
    # Multiplier applied to raw numeric percentages (100 = stored as fraction).
    percentage_scale: float = 100.0
    sentinel_labels: List[str] = ["TOTAL", "IDADE MÉDIA"]

    @property
    def has_aggregates(self) -> bool:
        return self.aggregate_male is not None and self.aggregate_female is not None


class PlanCoordinates(RowRange):
    name_column: int
    ans_column: int
    per_capita_column: int
    estimated_invoice_column: int
    name_prefix: str = "KLINI"


class AgeBandCoordinates(RowRange):
    header_row: int
    label_column: int
    first_plan_column: int

    @model_validator(mode="after")
    def _check_header(self):
        if self.header_row < 0:
            raise ValueError(f"header_row must be >= 0, got {self.header_row}")
        if self.first_plan_column <= self.label_column:
            raise ValueError("first_plan_column must come after label_column")
        return self


class LabelAnchor(BaseModel):
    """A cell expected to hold one of a few known labels."""

    row: int
    column: int
    labels: List[str]


class CoordinateMap(BaseModel):
    """A named, versioned layout of the quote sheet."""

    name: str
    revision: str
    company: Optional[CompanyCoordinates] = None
    demographics: DemographicsCoordinates
    plans_with_copay: PlanCoordinates
    plans_without_copay: PlanCoordinates
    age_bands_copay: AgeBandCoordinates
    age_bands_no_copay: AgeBandCoordinates
    anchors: List[LabelAnchor] = []
