"""
Cell grid reader — turns workbook bytes into one ``RawGrid`` per sheet.

The workbook is opened with ``data_only=True`` so formula cells carry
Excel's cached result instead of the formula text; formulas are never
evaluated here.
"""

from __future__ import annotations

import io
import logging
import zipfile
from pathlib import Path
from typing import BinaryIO, List, Union

import openpyxl
from openpyxl.utils.exceptions import InvalidFileException

from dto.cell import RawGrid, WorkbookGrids, to_raw_cell

logger = logging.getLogger(__name__)

WorkbookSource = Union[bytes, bytearray, str, Path, BinaryIO]

DECODE_ERROR_MESSAGE = (
    "Erro ao processar arquivo. Verifique se o arquivo está no formato correto."
)


class WorkbookDecodeError(ValueError):
    """The upload is not a readable spreadsheet (or has nothing in it)."""

    def __init__(self, detail: str = "") -> None:
        super().__init__(DECODE_ERROR_MESSAGE)
        self.detail = detail


def _open_stream(source: WorkbookSource) -> BinaryIO:
    if isinstance(source, (bytes, bytearray)):
        if not source:
            raise WorkbookDecodeError("empty upload")
        return io.BytesIO(bytes(source))
    if isinstance(source, (str, Path)):
        path = Path(source)
        if not path.is_file():
            raise WorkbookDecodeError(f"file not found: {path}")
        data = path.read_bytes()
        if not data:
            raise WorkbookDecodeError(f"empty file: {path}")
        return io.BytesIO(data)
    return source


def _sheet_rows(ws) -> List[List[object]]:
    rows: List[List[object]] = []
    for values in ws.iter_rows(values_only=True):
        row = list(values)
        # Drop trailing empties; the grid treats absent cells as blank.
        while row and (row[-1] is None or row[-1] == ""):
            row.pop()
        rows.append(row)
    while rows and not rows[-1]:
        rows.pop()
    return rows


def read_workbook(source: WorkbookSource) -> WorkbookGrids:
    """
    Decode *source* (bytes, a path, or a binary file object) into a
    ``WorkbookGrids``.  Raises ``WorkbookDecodeError`` when the data is
    not an .xlsx workbook or has no sheets.
    """
    stream = _open_stream(source)
    try:
        workbook = openpyxl.load_workbook(stream, data_only=True)
    except (InvalidFileException, zipfile.BadZipFile, KeyError, OSError, ValueError) as exc:
        logger.error("Could not open workbook: %s", exc)
        raise WorkbookDecodeError(str(exc)) from exc

    try:
        # Chart sheets have no cells; only worksheets count.
        worksheets = list(workbook.worksheets)
        if not worksheets:
            raise WorkbookDecodeError("workbook has no sheets")

        sheet_names = [ws.title for ws in worksheets]
        grids: List[RawGrid] = []
        for ws in worksheets:
            name = ws.title
            rows = _sheet_rows(ws)
            grids.append(
                RawGrid(
                    sheet_name=name,
                    rows=[[to_raw_cell(v) for v in row] for row in rows],
                )
            )
            logger.info("  Sheet '%s': %d row(s) read", name, len(rows))
    finally:
        workbook.close()

    return WorkbookGrids(sheet_names=sheet_names, grids=grids)
