"""
Utility to render a ``ProposalRecord`` into HTML preview tables.

Mirrors what the broker sees before exporting: a company header card,
the demographic distribution, the plan lists and the age-band pricing
matrices, with BRL amounts and "-" for empty prices.
"""

from __future__ import annotations

from typing import List, Sequence, Tuple, Union

from dto.proposal import AgeBandPricingRow, DemographicRow, PlanRow, ProposalRecord
from utils.normalizers import format_currency_or_dash

# (text, colspan)
HeaderCell = Union[str, Tuple[str, int]]


def _escape_html(text: str) -> str:
    return (
        text.replace("&", "&amp;")
        .replace("<", "&lt;")
        .replace(">", "&gt;")
        .replace('"', "&quot;")
    )


def render_table_html(
    heading: Sequence[Sequence[HeaderCell]],
    data: Sequence[Sequence[str]],
    title: str = "",
) -> str:
    """
    Render header rows and body rows into an HTML ``<table>`` string.

    Header cells are plain text or ``(text, colspan)`` pairs.
    """
    parts: List[str] = ['<table border="1" cellpadding="5" cellspacing="0">']
    if title:
        parts.append(f"  <caption>{_escape_html(title)}</caption>")

    if heading:
        parts.append("  <thead>")
        for row in heading:
            parts.append("    <tr>")
            for cell in row:
                text, span = (cell, 1) if isinstance(cell, str) else cell
                attr = f' colspan="{span}"' if span > 1 else ""
                parts.append(f"      <th{attr}>{_escape_html(text)}</th>")
            parts.append("    </tr>")
        parts.append("  </thead>")

    if data:
        parts.append("  <tbody>")
        for index, row in enumerate(data):
            css = "row-alt" if index % 2 else "row"
            parts.append(f'    <tr class="{css}">')
            for value in row:
                parts.append(f"      <td>{_escape_html(value)}</td>")
            parts.append("    </tr>")
        parts.append("  </tbody>")

    parts.append("</table>")
    return "\n".join(parts)


def render_demographics_html(rows: List[DemographicRow]) -> str:
    heading = [
        [
            "Faixa Etária",
            ("Titular", 2),
            ("Dependente", 2),
            ("Agregado", 2),
            ("Total", 3),
            "%",
        ],
        ["", "M", "F", "M", "F", "M", "F", "M", "F", "Total", "%"],
    ]
    data = [
        [
            r.age_range,
            str(r.titular_male),
            str(r.titular_female),
            str(r.dependent_male),
            str(r.dependent_female),
            str(r.aggregate_male),
            str(r.aggregate_female),
            str(r.total_male),
            str(r.total_female),
            str(r.total),
            r.percentage,
        ]
        for r in rows
    ]
    return render_table_html(heading, data, title="Distribuição Demográfica")


def render_plans_html(plans: List[PlanRow], title: str) -> str:
    heading = [["Plano", "Registro ANS", "Valor Per Capita", "Fatura Estimada"]]
    data = [
        [
            p.name,
            p.ans_code,
            format_currency_or_dash(p.per_capita),
            format_currency_or_dash(p.estimated_invoice),
        ]
        for p in plans
    ]
    return render_table_html(heading, data, title=title)


def render_age_bands_html(rows: List[AgeBandPricingRow], title: str) -> str:
    """Empty sections render as an empty string."""
    if not rows:
        return ""
    plan_names = rows[0].plan_names
    heading = [["Faixa Etária", *plan_names]]
    data = [
        [r.age_range, *(format_currency_or_dash(r.prices.get(n, 0)) for n in plan_names)]
        for r in rows
    ]
    return render_table_html(heading, data, title=title)


def _render_company_html(record: ProposalRecord) -> str:
    company = record.company
    items = [
        ("Empresa", company.name),
        ("Concessionária", company.concessionaire),
        ("Corretora", company.broker),
        ("Emissão", record.emission_date.strftime("%d/%m/%Y")),
        ("Validade", record.validity_date.strftime("%d/%m/%Y")),
    ]
    lines = ['<dl class="company">']
    for label, value in items:
        lines.append(f"  <dt>{_escape_html(label)}</dt><dd>{_escape_html(value)}</dd>")
    lines.append("</dl>")
    return "\n".join(lines)


def _render_sections(
    demographics: List[DemographicRow],
    plans_with_copay: List[PlanRow],
    age_copay: List[AgeBandPricingRow],
    plans_without_copay: List[PlanRow],
    age_no_copay: List[AgeBandPricingRow],
    suffix: str = "",
) -> List[str]:
    parts = [
        render_demographics_html(demographics),
        render_plans_html(plans_with_copay, f"Planos com Coparticipação{suffix}"),
        render_age_bands_html(
            age_copay, f"Valores por Faixa Etária - COM Coparticipação{suffix}"
        ),
        render_plans_html(plans_without_copay, f"Planos sem Coparticipação{suffix}"),
        render_age_bands_html(
            age_no_copay, f"Valores por Faixa Etária - SEM Coparticipação{suffix}"
        ),
    ]
    return [p for p in parts if p]


def render_proposal_html(record: ProposalRecord) -> str:
    """Full preview document for *record*."""
    body = [_render_company_html(record)]
    body += _render_sections(
        record.demographics,
        record.plans_with_copay,
        record.age_based_pricing_copay,
        record.plans_without_copay,
        record.age_based_pricing_no_copay,
    )
    if record.has_secondary:
        body += _render_sections(
            record.demographics_secondary or [],
            record.plans_with_copay_secondary or [],
            record.age_based_pricing_copay_secondary or [],
            record.plans_without_copay_secondary or [],
            record.age_based_pricing_no_copay_secondary or [],
            suffix=" - Produtos G",
        )

    title = _escape_html(f"Proposta - {record.company.name}".rstrip(" -"))
    return "\n".join(
        [
            "<!DOCTYPE html>",
            '<html lang="pt-BR">',
            '<head><meta charset="utf-8">',
            f"<title>{title}</title>",
            "</head>",
            "<body>",
            *body,
            "</body>",
            "</html>",
        ]
    )
