"""
Slide deck rendering for a ``ProposalRecord`` (python-pptx).

Slide order:
  1. Cover (optional background image, company, emission / validity)
  2. Demographics
  3. Plans with copay, then the copay age-band matrix
  4. Plans without copay, then the no-copay age-band matrix
  5. Slides 2-4 again for the secondary product line, when present

Sections without rows get no slide.
"""

from __future__ import annotations

import io
import logging
from pathlib import Path
from typing import List, Optional, Sequence, Union

from pptx import Presentation
from pptx.dml.color import RGBColor
from pptx.enum.text import MSO_ANCHOR, PP_ALIGN
from pptx.util import Inches, Pt

from dto.proposal import AgeBandPricingRow, DemographicRow, PlanRow, ProposalRecord
from utils.normalizers import format_currency_or_dash

logger = logging.getLogger(__name__)

# Brand palette
TEAL_DARK = RGBColor(0x1D, 0x78, 0x74)
TEAL_PRIMARY = RGBColor(0x19, 0x9A, 0x8E)
ORANGE = RGBColor(0xF4, 0x79, 0x3B)
ROW_WHITE = RGBColor(0xFF, 0xFF, 0xFF)
ROW_LIGHT = RGBColor(0xE8, 0xF5, 0xF3)
TEXT_WHITE = RGBColor(0xFF, 0xFF, 0xFF)
TEXT_DARK = RGBColor(0x1D, 0x3D, 0x3A)
TEXT_GRAY = RGBColor(0x33, 0x33, 0x33)

FONT_FACE = "Arial"
CARRIER_ANS = "ANS - Nº 42.202-9"

SLIDE_WIDTH = Inches(10)
SLIDE_HEIGHT = Inches(5.625)
_BLANK_LAYOUT = 6

PathLike = Union[str, Path]


def _add_text(
    slide,
    text: str,
    left: float,
    top: float,
    width: float,
    height: float,
    size: int,
    color: RGBColor,
    bold: bool = False,
    align=PP_ALIGN.LEFT,
) -> None:
    box = slide.shapes.add_textbox(Inches(left), Inches(top), Inches(width), Inches(height))
    tf = box.text_frame
    tf.word_wrap = True
    p = tf.paragraphs[0]
    p.text = text
    p.alignment = align
    p.font.size = Pt(size)
    p.font.bold = bold
    p.font.name = FONT_FACE
    p.font.color.rgb = color


def _fill_cell(cell, text: str, fill: RGBColor, color: RGBColor, size: int, bold: bool) -> None:
    cell.fill.solid()
    cell.fill.fore_color.rgb = fill
    cell.vertical_anchor = MSO_ANCHOR.MIDDLE
    tf = cell.text_frame
    tf.text = text
    p = tf.paragraphs[0]
    p.alignment = PP_ALIGN.CENTER
    p.font.size = Pt(size)
    p.font.bold = bold
    p.font.name = FONT_FACE
    p.font.color.rgb = color


def _add_table(
    slide,
    header: Sequence[str],
    rows: Sequence[Sequence[str]],
    top: float = 1.0,
    first_col_width: Optional[float] = None,
) -> None:
    """Header row in the brand teal, zebra body, first column highlighted."""
    total_width = 9.5
    n_cols = len(header)
    shape = slide.shapes.add_table(
        len(rows) + 1,
        n_cols,
        Inches(0.25),
        Inches(top),
        Inches(total_width),
        Inches(0.3 * (len(rows) + 1)),
    )
    table = shape.table

    if first_col_width is not None and n_cols > 1:
        rest = (total_width - first_col_width) / (n_cols - 1)
        table.columns[0].width = Inches(first_col_width)
        for i in range(1, n_cols):
            table.columns[i].width = Inches(rest)

    for c, text in enumerate(header):
        _fill_cell(table.cell(0, c), text, TEAL_DARK, TEXT_WHITE, 9, True)

    for r, row in enumerate(rows, start=1):
        zebra = ROW_WHITE if (r - 1) % 2 == 0 else ROW_LIGHT
        for c, text in enumerate(row):
            first = c == 0
            _fill_cell(
                table.cell(r, c),
                text,
                ROW_LIGHT if first else zebra,
                TEXT_DARK,
                8,
                first,
            )


def _section_slide(prs, title: str, accent: RGBColor = TEAL_PRIMARY):
    slide = prs.slides.add_slide(prs.slide_layouts[_BLANK_LAYOUT])
    _add_text(slide, title, 0.5, 0.25, 7.5, 0.6, 20, accent, bold=True)
    _add_text(slide, CARRIER_ANS, 8.0, 0.3, 1.8, 0.3, 10, TEXT_GRAY, align=PP_ALIGN.RIGHT)
    return slide


def _cover_slide(prs, record: ProposalRecord, cover_image: Optional[bytes]) -> None:
    slide = prs.slides.add_slide(prs.slide_layouts[_BLANK_LAYOUT])
    if cover_image:
        slide.shapes.add_picture(io.BytesIO(cover_image), 0, 0, SLIDE_WIDTH, SLIDE_HEIGHT)
    else:
        slide.background.fill.solid()
        slide.background.fill.fore_color.rgb = TEAL_PRIMARY

    _add_text(slide, "PROPOSTA COMERCIAL PME", 0.5, 1.8, 9, 1, 36, TEXT_WHITE, bold=True)
    if record.company.name:
        _add_text(slide, record.company.name, 0.5, 2.9, 9, 0.6, 22, TEXT_WHITE)
    dates = (
        f"Emissão: {record.emission_date:%d/%m/%Y}    "
        f"Validade: {record.validity_date:%d/%m/%Y}"
    )
    _add_text(slide, dates, 0.5, 3.6, 9, 0.4, 14, TEXT_WHITE)
    details = [t for t in (record.company.concessionaire, record.company.broker) if t]
    if details:
        _add_text(slide, " | ".join(details), 0.5, 4.1, 9, 0.4, 12, TEXT_WHITE)
    _add_text(slide, CARRIER_ANS, 8.0, 0.3, 1.8, 0.3, 10, TEXT_WHITE, align=PP_ALIGN.RIGHT)


def _demographics_slide(prs, rows: List[DemographicRow], suffix: str) -> None:
    slide = _section_slide(prs, f"Distribuição Demográfica{suffix}")
    header = [
        "Faixa Etária",
        "Titular M", "Titular F",
        "Dependente M", "Dependente F",
        "Agregado M", "Agregado F",
        "Total M", "Total F",
        "Total", "%",
    ]
    body = [
        [
            r.age_range,
            str(r.titular_male), str(r.titular_female),
            str(r.dependent_male), str(r.dependent_female),
            str(r.aggregate_male), str(r.aggregate_female),
            str(r.total_male), str(r.total_female),
            str(r.total), r.percentage,
        ]
        for r in rows
    ]
    _add_table(slide, header, body, top=0.9, first_col_width=1.1)


def _plans_slide(prs, plans: List[PlanRow], title: str) -> None:
    slide = _section_slide(prs, title)
    header = ["Plano", "Registro ANS", "Valor Per Capita", "Fatura Estimada"]
    body = [
        [
            p.name,
            p.ans_code,
            format_currency_or_dash(p.per_capita),
            format_currency_or_dash(p.estimated_invoice),
        ]
        for p in plans
    ]
    _add_table(slide, header, body, top=1.0, first_col_width=3.5)


def _age_bands_slide(
    prs,
    rows: List[AgeBandPricingRow],
    title: str,
    accent: RGBColor,
) -> None:
    slide = _section_slide(prs, title, accent)
    plan_names = rows[0].plan_names
    header = ["Faixa", *plan_names]
    body = [
        [r.age_range, *(format_currency_or_dash(r.prices.get(n, 0)) for n in plan_names)]
        for r in rows
    ]
    _add_table(slide, header, body, top=0.8, first_col_width=0.8)


def _product_slides(
    prs,
    demographics: List[DemographicRow],
    plans_with_copay: List[PlanRow],
    age_copay: List[AgeBandPricingRow],
    plans_without_copay: List[PlanRow],
    age_no_copay: List[AgeBandPricingRow],
    suffix: str = "",
) -> None:
    if demographics:
        _demographics_slide(prs, demographics, suffix)
    if plans_with_copay:
        _plans_slide(prs, plans_with_copay, f"Planos com Coparticipação{suffix}")
    if age_copay:
        _age_bands_slide(
            prs, age_copay, f"Valores por Faixa Etária - COM Coparticipação{suffix}", ORANGE
        )
    if plans_without_copay:
        _plans_slide(prs, plans_without_copay, f"Planos sem Coparticipação{suffix}")
    if age_no_copay:
        _age_bands_slide(
            prs,
            age_no_copay,
            f"Valores por Faixa Etária - SEM Coparticipação{suffix}",
            TEAL_PRIMARY,
        )


def build_deck(record: ProposalRecord, cover_image: Optional[bytes] = None):
    """Build the proposal ``Presentation`` for *record*."""
    prs = Presentation()
    prs.slide_width = SLIDE_WIDTH
    prs.slide_height = SLIDE_HEIGHT
    prs.core_properties.author = "Klini Saúde"
    prs.core_properties.title = "Proposta Comercial PME"

    _cover_slide(prs, record, cover_image)
    _product_slides(
        prs,
        record.demographics,
        record.plans_with_copay,
        record.age_based_pricing_copay,
        record.plans_without_copay,
        record.age_based_pricing_no_copay,
    )
    if record.has_secondary:
        _product_slides(
            prs,
            record.demographics_secondary or [],
            record.plans_with_copay_secondary or [],
            record.age_based_pricing_copay_secondary or [],
            record.plans_without_copay_secondary or [],
            record.age_based_pricing_no_copay_secondary or [],
            suffix=" - Produtos G",
        )

    logger.info("Deck built: %d slide(s)", len(prs.slides))
    return prs


def export_deck(
    record: ProposalRecord,
    output: Union[PathLike, io.BytesIO],
    cover_image: Optional[bytes] = None,
) -> None:
    prs = build_deck(record, cover_image=cover_image)
    prs.save(output if isinstance(output, io.BytesIO) else str(output))
