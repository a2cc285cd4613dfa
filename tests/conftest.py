"""Shared fixtures: synthetic quote sheets as plain values, grids and .xlsx bytes."""

import io
from typing import Any, List, Optional

import openpyxl
import pytest

from dto.cell import RawGrid


def _put(rows: List[List[Any]], r: int, c: int, value: Any) -> None:
    while len(rows) <= r:
        rows.append([])
    row = rows[r]
    while len(row) <= c:
        row.append(None)
    row[c] = value


def _as_brl_text(value: float) -> str:
    return f"R$ {value:.2f}".replace(".", ",")


def build_quote_values(
    label_col: int = 1,
    company_row: Optional[int] = 1,
    demo_row: int = 7,
    plans_copay_row: int = 26,
    age_copay_row: int = 40,
    plans_no_copay_row: int = 60,
    age_no_copay_row: int = 75,
    aggregates: bool = False,
    text_prices: bool = False,
) -> List[List[Any]]:
    """
    A quote sheet in the current template, with the section positions
    overridable to mimic the other template revisions.  With *text_prices*
    every age-band price is stored as BRL text ("R$ 150,50").
    """
    rows: List[List[Any]] = []
    L = label_col
    price = _as_brl_text if text_prices else (lambda value: value)

    if company_row is not None:
        _put(rows, company_row, L, "Acme Corp")
        _put(rows, company_row + 1, L, "Concessionária Alfa")
        _put(rows, company_row + 2, L, "Corretora Beta")

    # Demographics header and body
    header = demo_row - 2
    _put(rows, header, L, "FAIXA ETÁRIA")
    _put(rows, header, L + 1, "TITULAR")
    _put(rows, header, L + 3, "DEPENDENTE")
    _put(rows, header, L + 5, "AGREGADO")
    _put(rows, header, L + 7, "TOTAL")
    demographics = [
        ("00-18", 3, 2, 1, 1, (1, 0), 5, 3, 8, 0.4),
        ("19-23", 4, 4, 1, 1, (0, 0), 5, 5, 10, "50%"),
        (None, None, None, None, None, (None, None), None, None, None, None),
        ("59+", 1, 1, 0, 0, (0, 0), 1, 1, 2, 0.1),
        ("TOTAL", 8, 7, 2, 2, (1, 0), 11, 9, 20, 1),
        ("IDADE MÉDIA:", 34.5, None, None, None, (None, None), None, None, None, None),
    ]
    for i, (age, tm, tf, dm, df, agg, totm, totf, tot, pct) in enumerate(demographics):
        r = demo_row + i
        if age is None:
            continue
        _put(rows, r, L, age)
        for offset, value in enumerate((tm, tf, dm, df), start=1):
            _put(rows, r, L + offset, value)
        if aggregates:
            _put(rows, r, L + 5, agg[0])
            _put(rows, r, L + 6, agg[1])
        _put(rows, r, L + 7, totm)
        _put(rows, r, L + 8, totf)
        _put(rows, r, L + 9, tot)
        _put(rows, r, L + 10, pct)

    # Plans with copay
    r = plans_copay_row
    _put(rows, r, L, "KLINI 100 ENF")
    _put(rows, r, L + 3, "123.456/78-9")
    _put(rows, r, L + 4, "R$ 1.234,56")
    _put(rows, r, L + 5, 9876.48)
    _put(rows, r + 1, L, "Observação: valores sujeitos a análise")
    _put(rows, r + 2, L, "  KLINI 200 APT  ")
    _put(rows, r + 2, L + 3, 987654)
    _put(rows, r + 2, L + 4, 250.0)
    _put(rows, r + 2, L + 5, "-")

    # Copay age bands
    r = age_copay_row
    _put(rows, r, L, "FAIXA ETÁRIA")
    _put(rows, r, L + 1, "KLINI 100 ENF")
    _put(rows, r, L + 2, "KLINI 200 APT")
    _put(rows, r + 1, L, "00-18")
    _put(rows, r + 1, L + 1, price(150.5))
    _put(rows, r + 1, L + 2, "R$ 200,00")
    _put(rows, r + 2, L, "19-23")
    _put(rows, r + 2, L + 1, price(180.0))
    _put(rows, r + 3, L, "Valores em R$")
    _put(rows, r + 4, L, "59+")
    _put(rows, r + 4, L + 1, "R$ 1.050,75")
    _put(rows, r + 4, L + 2, price(1200))

    # Plans without copay
    r = plans_no_copay_row
    _put(rows, r, L, "KLINI 100 ENF S/ COPART")
    _put(rows, r, L + 3, "123.456/78-9")
    _put(rows, r, L + 4, 1400.0)
    _put(rows, r, L + 5, 11200.0)
    _put(rows, r + 2, L, "KLINI 200 APT S/ COPART")
    _put(rows, r + 2, L + 3, "987.654/32-1")
    _put(rows, r + 2, L + 4, "R$ 300,00")
    _put(rows, r + 2, L + 5, "R$ 2.400,00")

    # No-copay age bands
    r = age_no_copay_row
    _put(rows, r, L, "FAIXA ETÁRIA")
    _put(rows, r, L + 1, "KLINI 100 ENF S/ COPART")
    _put(rows, r, L + 2, "KLINI 200 APT S/ COPART")
    _put(rows, r + 1, L, "00-18")
    _put(rows, r + 1, L + 1, price(170.0))
    _put(rows, r + 1, L + 2, price(230.0))
    _put(rows, r + 2, L, "59+")
    _put(rows, r + 2, L + 1, price(1100.0))
    _put(rows, r + 2, L + 2, price(1300.0))

    return rows


def build_secondary_values() -> List[List[Any]]:
    """The "PRODUTOS G" sheet: no company block, sections higher up."""
    return build_quote_values(
        company_row=None,
        demo_row=4,
        plans_copay_row=22,
        age_copay_row=35,
        plans_no_copay_row=54,
        age_no_copay_row=68,
    )


def workbook_bytes(*sheets) -> bytes:
    """Write ``(sheet_name, values)`` pairs into an in-memory .xlsx."""
    wb = openpyxl.Workbook()
    wb.remove(wb.active)
    for name, values in sheets:
        ws = wb.create_sheet(title=name)
        for r, row in enumerate(values):
            for c, value in enumerate(row):
                if value is not None:
                    ws.cell(row=r + 1, column=c + 1, value=value)
    buf = io.BytesIO()
    wb.save(buf)
    return buf.getvalue()


@pytest.fixture
def quote_values():
    return build_quote_values()


@pytest.fixture
def quote_grid(quote_values):
    return RawGrid.from_values(quote_values, sheet_name="Cotação")


def build_previous_revision_values(text_prices: bool = False) -> List[List[Any]]:
    """The earlier template: aggregates filled in, lower tables one row up."""
    return build_quote_values(
        plans_copay_row=25,
        age_copay_row=39,
        plans_no_copay_row=59,
        age_no_copay_row=74,
        aggregates=True,
        text_prices=text_prices,
    )


@pytest.fixture
def previous_revision_grid():
    return RawGrid.from_values(build_previous_revision_values(), sheet_name="Cotação")


@pytest.fixture
def previous_revision_text_prices_grid():
    return RawGrid.from_values(
        build_previous_revision_values(text_prices=True), sheet_name="Cotação"
    )


@pytest.fixture
def quote_text_prices_grid():
    return RawGrid.from_values(build_quote_values(text_prices=True), sheet_name="Cotação")


@pytest.fixture
def compact_grid():
    return RawGrid.from_values(build_quote_values(label_col=0), sheet_name="Cotação")


@pytest.fixture
def secondary_grid():
    return RawGrid.from_values(build_secondary_values(), sheet_name="PRODUTOS G")


@pytest.fixture
def quote_xlsx(quote_values):
    return workbook_bytes(("Cotação", quote_values))


@pytest.fixture
def quote_xlsx_with_secondary(quote_values):
    return workbook_bytes(
        ("Cotação", quote_values),
        ("PRODUTOS G", build_secondary_values()),
    )


@pytest.fixture
def make_xlsx():
    return workbook_bytes
