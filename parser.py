"""
Quote workbook parser — CLI entry point.

Usage:
    python parser.py <quote.xlsx> [--output <proposal.json>] [--html <preview.html>]
                     [--pptx <deck.pptx>] [--cover <image>] [--layout <name>]

Reads the quote spreadsheet, resolves its layout revision, extracts the
company header, demographics, plan lists and age-band pricing matrices
from the first sheet (plus the secondary "PRODUTOS G" sheet when the
workbook has one), and writes the proposal as a single JSON file.
Optionally renders an HTML preview and a slide deck from the same record.
"""

from __future__ import annotations

import argparse
import logging
import os
import sys
from datetime import date
from pathlib import Path
from typing import List, Optional

from assembler import assemble_proposal
from cell_reader import WorkbookDecodeError, WorkbookSource, read_workbook
from dto.cell import WorkbookGrids
from dto.proposal import ProposalRecord, SheetReport
from extractors.sheet import SheetExtractor
from layout.constants import SECONDARY_SHEET_MARKER, VALIDITY_DAYS
from layout.resolver import primary_resolver, secondary_resolver

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s  %(levelname)-8s  %(name)s  %(message)s",
)
logger = logging.getLogger(__name__)


# -------------------------------------------------------------------
# Multi-sheet orchestration
# -------------------------------------------------------------------


def find_secondary_sheet(
    sheet_names: List[str],
    marker: str = SECONDARY_SHEET_MARKER,
) -> Optional[str]:
    """Return the secondary product-line sheet, never the first sheet."""
    for name in sheet_names[1:]:
        if marker and marker in name.upper():
            return name
    return None


def extract_proposal(
    grids: WorkbookGrids,
    layout: Optional[str] = None,
    secondary_layout: Optional[str] = None,
    today: Optional[date] = None,
    validity_days: int = VALIDITY_DAYS,
) -> ProposalRecord:
    """Run extraction over already-decoded sheets and assemble the record."""
    primary = SheetExtractor(primary_resolver(layout)).extract(grids.first)

    secondary = None
    secondary_name = find_secondary_sheet(grids.sheet_names)
    if secondary_name is not None:
        logger.info("Secondary product sheet found: %s", secondary_name)
        secondary = SheetExtractor(secondary_resolver(secondary_layout)).extract(
            grids.grid(secondary_name)
        )

    return assemble_proposal(
        primary,
        secondary,
        today=today,
        validity_days=validity_days,
    )


def parse_workbook(
    source: WorkbookSource,
    layout: Optional[str] = None,
    secondary_layout: Optional[str] = None,
    today: Optional[date] = None,
) -> ProposalRecord:
    """
    Parse a quote workbook and return its ``ProposalRecord``.

    Only ``WorkbookDecodeError`` escapes: row-level and layout problems
    degrade into shorter sections (see ``record.report``).
    """
    logger.info("Loading workbook...")
    grids = read_workbook(source)
    logger.info("  -> %d sheet(s): %s", len(grids.sheet_names), grids.sheet_names)
    return extract_proposal(
        grids,
        layout=layout,
        secondary_layout=secondary_layout,
        today=today,
    )


def _log_sheet_report(report: SheetReport) -> None:
    if not report.matched:
        logger.warning(
            "Sheet '%s' used fallback layout '%s' — review the output",
            report.sheet_name,
            report.layout,
        )
    for section, skipped in report.skipped.items():
        if skipped:
            reasons = sorted({s.reason for s in skipped})
            logger.info(
                "  %s: %d row(s) skipped (%s)",
                section,
                len(skipped),
                ", ".join(reasons),
            )


# -------------------------------------------------------------------
# CLI
# -------------------------------------------------------------------


def main() -> None:
    parser = argparse.ArgumentParser(
        description="Convert a quote workbook into a structured proposal.",
    )
    parser.add_argument(
        "excel_file",
        help="Path to the .xlsx quote workbook",
    )
    parser.add_argument(
        "-o",
        "--output",
        default=None,
        help="Output JSON file path (default: <input_name>_proposal.json)",
    )
    parser.add_argument(
        "--html",
        default=None,
        help="Also write an HTML preview of the proposal tables",
    )
    parser.add_argument(
        "--pptx",
        default=None,
        help="Also write a slide deck (.pptx)",
    )
    parser.add_argument(
        "--cover",
        default=None,
        help="Cover image for the slide deck",
    )
    parser.add_argument(
        "-l",
        "--layout",
        default=None,
        help="Force a layout revision for the first sheet (default: detect)",
    )
    args = parser.parse_args()

    excel_path = args.excel_file
    if not os.path.isfile(excel_path):
        logger.error("File not found: %s", excel_path)
        sys.exit(1)

    if args.output:
        output_path = args.output
    else:
        stem = Path(excel_path).stem
        output_path = f"{stem}_proposal.json"

    try:
        record = parse_workbook(excel_path, layout=args.layout)
    except WorkbookDecodeError as exc:
        logger.error("%s (%s)", exc, exc.detail)
        sys.exit(1)

    if record.report is not None:
        _log_sheet_report(record.report.primary)
        if record.report.secondary is not None:
            _log_sheet_report(record.report.secondary)

    json_str = record.model_dump_json(by_alias=True, exclude_none=True, indent=2)
    with open(output_path, "w", encoding="utf-8") as f:
        f.write(json_str)
    logger.info("Proposal written to %s", output_path)

    if args.html:
        from utils.html import render_proposal_html

        with open(args.html, "w", encoding="utf-8") as f:
            f.write(render_proposal_html(record))
        logger.info("HTML preview written to %s", args.html)

    if args.pptx:
        from render.deck import export_deck

        cover = Path(args.cover).read_bytes() if args.cover else None
        export_deck(record, args.pptx, cover_image=cover)
        logger.info("Slide deck written to %s", args.pptx)


if __name__ == "__main__":
    main()
