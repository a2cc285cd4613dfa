"""
Raw cell values as read from a worksheet.

A worksheet is reduced to a rectangular-ish grid of three cell kinds:
text, number and blank.  Extractors never look at openpyxl objects; they
only see a ``RawGrid``.
"""

from __future__ import annotations

import math
from typing import Annotated, Any, List, Literal, Sequence, Union

from pydantic import BaseModel, Field


class TextCell(BaseModel):
    kind: Literal["text"] = "text"
    value: str

    model_config = {"frozen": True}


class NumberCell(BaseModel):
    kind: Literal["number"] = "number"
    value: float

    model_config = {"frozen": True}


class BlankCell(BaseModel):
    kind: Literal["blank"] = "blank"

    model_config = {"frozen": True}


RawCell = Annotated[
    Union[TextCell, NumberCell, BlankCell],
    Field(discriminator="kind"),
]

BLANK = BlankCell()


def to_raw_cell(value: Any) -> Union[TextCell, NumberCell, BlankCell]:
    """Wrap a plain Python value (as returned by openpyxl) into a raw cell."""
    if value is None:
        return BLANK
    if isinstance(value, (TextCell, NumberCell, BlankCell)):
        return value
    if isinstance(value, bool):
        return TextCell(value=str(value))
    if isinstance(value, (int, float)):
        if not math.isfinite(value):
            return BLANK
        return NumberCell(value=float(value))
    if isinstance(value, str):
        if value == "":
            return BLANK
        return TextCell(value=value)
    return TextCell(value=str(value))


class RawGrid(BaseModel):
    """
    One worksheet as an immutable grid of raw cells.

    Rows may be ragged: trailing cells that the reader never produced are
    simply absent and read back as blank.
    """

    sheet_name: str = ""
    rows: List[List[RawCell]] = []

    model_config = {"frozen": True}

    @classmethod
    def from_values(
        cls,
        values: Sequence[Sequence[Any]],
        sheet_name: str = "",
    ) -> "RawGrid":
        return cls(
            sheet_name=sheet_name,
            rows=[[to_raw_cell(v) for v in row] for row in values],
        )

    @property
    def num_rows(self) -> int:
        return len(self.rows)

    def cell(self, row: int, col: int) -> Union[TextCell, NumberCell, BlankCell]:
        """Return the cell at zero-based (row, col); blank when absent."""
        if row < 0 or col < 0 or row >= len(self.rows):
            return BLANK
        cells = self.rows[row]
        if col >= len(cells):
            return BLANK
        return cells[col]

    def row_cells(self, row: int) -> List[Union[TextCell, NumberCell, BlankCell]]:
        if row < 0 or row >= len(self.rows):
            return []
        return list(self.rows[row])


class WorkbookGrids(BaseModel):
    """Every sheet of a workbook, in workbook order."""

    sheet_names: List[str] = []
    grids: List[RawGrid] = []

    def grid(self, sheet_name: str) -> RawGrid:
        return self.grids[self.sheet_names.index(sheet_name)]

    @property
    def first(self) -> RawGrid:
        return self.grids[0]
