"""
Layout Visualizer — copies the quote sheet(s) into a new workbook and
colours every section range of the resolved layout, so a drifted template
can be checked by eye.

Usage:
    python visualize_layout.py <quote.xlsx> [-o <output.xlsx>] [--layout <name>]
"""

from __future__ import annotations

import argparse
import logging
import sys
from copy import copy
from pathlib import Path
from typing import List, Optional, Tuple

import openpyxl
from openpyxl.cell.cell import MergedCell
from openpyxl.comments import Comment
from openpyxl.styles import Border, Font, PatternFill, Side
from openpyxl.utils import get_column_letter

from cell_reader import WorkbookDecodeError, read_workbook
from dto.coordinate_map import CoordinateMap
from layout.resolver import LayoutResolution, primary_resolver, secondary_resolver
from parser import find_secondary_sheet

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s  %(levelname)-8s  %(message)s",
)
logger = logging.getLogger(__name__)

# ── Section colors (ARGB hex, no leading #) ─────────────────────────
_SECTION_COLORS = {
    "company": ("FFB3E5FC", "FF0288D1"),
    "demographics": ("FFC8E6C9", "FF388E3C"),
    "plans_with_copay": ("FFFFF9C4", "FFF9A825"),
    "age_bands_copay": ("FFFFCCBC", "FFE64A19"),
    "plans_without_copay": ("FFE1BEE7", "FF7B1FA2"),
    "age_bands_no_copay": ("FFB2DFDB", "FF00796B"),
}

_LABEL_FONT = Font(bold=True, size=9, color="FF000000")

# (section, min_row, min_col, max_row, max_col), all 1-based for openpyxl
Box = Tuple[str, int, int, int, int]


# ── Helpers ──────────────────────────────────────────────────────────


def _make_border(color: str) -> Border:
    side = Side(style="thin", color=color)
    return Border(left=side, right=side, top=side, bottom=side)


def _copy_sheet(src_wb, dst_wb, sheet_name: str) -> None:
    """
    Recreate *sheet_name* inside *dst_wb* so the section colours are laid
    over the broker's own sheet: values and cell formatting first, then
    merges, then column widths and row heights.
    """
    src = src_wb[sheet_name]
    dst = dst_wb.create_sheet(title=sheet_name)

    for row in src.iter_rows():
        for cell in row:
            # Covered cells of a merge carry no value of their own.
            if isinstance(cell, MergedCell):
                continue
            target = dst.cell(row=cell.row, column=cell.column, value=cell.value)
            if not cell.has_style:
                continue
            for attr in ("font", "border", "fill", "alignment"):
                setattr(target, attr, copy(getattr(cell, attr)))
            target.number_format = cell.number_format

    for cell_range in src.merged_cells.ranges:
        dst.merge_cells(cell_range.coord)

    for letter, dim in src.column_dimensions.items():
        dst.column_dimensions[letter].width = dim.width
    for index, dim in src.row_dimensions.items():
        dst.row_dimensions[index].height = dim.height



def section_boxes(cmap: CoordinateMap) -> List[Box]:
    """Bounding boxes of every section of *cmap*, converted to 1-based."""
    boxes: List[Box] = []
    if cmap.company is not None:
        r, c = cmap.company.name_cell
        boxes.append(("company", r + 1, c + 1, r + 3, c + 1))

    d = cmap.demographics
    d_cols = [
        d.age_column, d.titular_male, d.titular_female, d.dependent_male,
        d.dependent_female, d.total_male, d.total_female, d.total, d.percentage,
    ]
    if d.has_aggregates:
        d_cols += [d.aggregate_male, d.aggregate_female]
    boxes.append(
        ("demographics", d.start_row + 1, min(d_cols) + 1, d.end_row + 1, max(d_cols) + 1)
    )

    for name, p in (
        ("plans_with_copay", cmap.plans_with_copay),
        ("plans_without_copay", cmap.plans_without_copay),
    ):
        cols = [p.name_column, p.ans_column, p.per_capita_column, p.estimated_invoice_column]
        boxes.append((name, p.start_row + 1, min(cols) + 1, p.end_row + 1, max(cols) + 1))

    for name, a in (
        ("age_bands_copay", cmap.age_bands_copay),
        ("age_bands_no_copay", cmap.age_bands_no_copay),
    ):
        # Plan columns are open-ended; mark the label column plus the first plan.
        boxes.append(
            (name, a.header_row + 1, a.label_column + 1, a.end_row + 1, a.first_plan_column + 1)
        )
    return boxes


def _paint(ws, resolution: LayoutResolution) -> List[dict]:
    legend = []
    cmap = resolution.coordinate_map
    for section, min_row, min_col, max_row, max_col in section_boxes(cmap):
        fill_argb, border_argb = _SECTION_COLORS[section]
        fill = PatternFill(start_color=fill_argb, end_color=fill_argb, fill_type="solid")
        border = _make_border(border_argb)

        for r in range(min_row, max_row + 1):
            for c in range(min_col, max_col + 1):
                cell = ws.cell(row=r, column=c)
                if isinstance(cell, MergedCell):
                    continue
                cell.fill = fill
                cell.border = border

        bbox = f"{get_column_letter(min_col)}{min_row}:{get_column_letter(max_col)}{max_row}"
        tl_cell = ws.cell(row=min_row, column=min_col)
        if not isinstance(tl_cell, MergedCell):
            tl_cell.comment = Comment(f"{section}\n{cmap.name}\n{bbox}", "layout-visualizer")

        logger.info("  %-20s %s", section, bbox)
        legend.append(
            {
                "section": section,
                "bbox": bbox,
                "sheet": ws.title,
                "layout": cmap.name,
                "matched": "yes" if resolution.matched else "fallback",
                "fill_argb": fill_argb,
            }
        )
    return legend


# ── Core logic ───────────────────────────────────────────────────────


def visualize(excel_path: str, output_path: str, layout: Optional[str] = None) -> None:
    grids = read_workbook(excel_path)
    src_wb = openpyxl.load_workbook(excel_path)

    targets = [(grids.sheet_names[0], primary_resolver(layout))]
    secondary = find_secondary_sheet(grids.sheet_names)
    if secondary is not None:
        targets.append((secondary, secondary_resolver()))

    dst_wb = openpyxl.Workbook()
    default_sheet = dst_wb.active

    legend_entries: List[dict] = []
    for sheet_name, resolver in targets:
        logger.info("Sheet '%s'", sheet_name)
        resolution = resolver.resolve(grids.grid(sheet_name))
        _copy_sheet(src_wb, dst_wb, sheet_name)
        legend_entries += _paint(dst_wb[sheet_name], resolution)

    dst_wb.remove(default_sheet)

    ws_legend = dst_wb.create_sheet("_Layout Legend")
    headers = ["Section", "Range", "Sheet", "Layout", "Matched", "Color"]
    col_widths = [22, 14, 18, 22, 10, 10]
    for i, (header, width) in enumerate(zip(headers, col_widths), start=1):
        cell = ws_legend.cell(row=1, column=i, value=header)
        cell.font = _LABEL_FONT
        ws_legend.column_dimensions[get_column_letter(i)].width = width

    for row_idx, entry in enumerate(legend_entries, start=2):
        ws_legend.cell(row=row_idx, column=1, value=entry["section"])
        ws_legend.cell(row=row_idx, column=2, value=entry["bbox"])
        ws_legend.cell(row=row_idx, column=3, value=entry["sheet"])
        ws_legend.cell(row=row_idx, column=4, value=entry["layout"])
        ws_legend.cell(row=row_idx, column=5, value=entry["matched"])
        ws_legend.cell(row=row_idx, column=6, value="").fill = PatternFill(
            start_color=entry["fill_argb"],
            end_color=entry["fill_argb"],
            fill_type="solid",
        )

    dst_wb.save(output_path)
    logger.info("Annotated workbook saved to: %s", output_path)


# ── CLI ──────────────────────────────────────────────────────────────


def main() -> None:
    parser = argparse.ArgumentParser(
        description="Colour the resolved section ranges of a quote workbook.",
    )
    parser.add_argument("excel_file", help="Path to the .xlsx quote workbook")
    parser.add_argument(
        "-o",
        "--output",
        default=None,
        help="Output .xlsx path (default: <workbook>_layout.xlsx)",
    )
    parser.add_argument(
        "-l",
        "--layout",
        default=None,
        help="Force a layout revision for the first sheet",
    )
    args = parser.parse_args()

    if not Path(args.excel_file).is_file():
        logger.error("File not found: %s", args.excel_file)
        sys.exit(1)

    output_path = args.output or f"{Path(args.excel_file).stem}_layout.xlsx"
    try:
        visualize(args.excel_file, output_path, layout=args.layout)
    except WorkbookDecodeError as exc:
        logger.error("%s (%s)", exc, exc.detail)
        sys.exit(1)


if __name__ == "__main__":
    main()
