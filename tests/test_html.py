from datetime import date

from dto.proposal import AgeBandPricingRow, CompanyRecord, PlanRow, ProposalRecord
from parser import parse_workbook
from utils.html import (
    render_age_bands_html,
    render_plans_html,
    render_proposal_html,
    render_table_html,
)


class TestRenderTableHtml:
    """Tests for the generic table renderer."""

    def test_colspan_and_escaping(self):
        html = render_table_html([[("Titular", 2), "A&B"]], [["<x>", "1"]], title="T")
        assert '<th colspan="2">Titular</th>' in html
        assert "<th>A&amp;B</th>" in html
        assert "<td>&lt;x&gt;</td>" in html
        assert "<caption>T</caption>" in html

    def test_alternating_rows(self):
        html = render_table_html([["a"]], [["1"], ["2"], ["3"]])
        assert html.count('class="row"') == 2
        assert html.count('class="row-alt"') == 1


class TestSectionHtml:
    """Tests for the proposal section renderers."""

    def test_plans_use_currency_and_dash(self):
        plans = [PlanRow(name="KLINI 100", ans_code="1", per_capita=1234.56, estimated_invoice=0)]
        html = render_plans_html(plans, "Planos")
        assert "R$ 1.234,56" in html
        assert "<td>-</td>" in html

    def test_empty_age_bands_render_nothing(self):
        assert render_age_bands_html([], "Faixas") == ""

    def test_age_band_columns_follow_header(self):
        rows = [AgeBandPricingRow(age_range="00-18", prices={"B": 2.0, "A": 1.0})]
        html = render_age_bands_html(rows, "Faixas")
        assert html.index("<th>B</th>") < html.index("<th>A</th>")


class TestRenderProposalHtml:
    """Tests for the full preview document."""

    def test_document(self, quote_xlsx):
        record = parse_workbook(quote_xlsx, today=date(2025, 12, 1))
        html = render_proposal_html(record)
        assert html.startswith("<!DOCTYPE html>")
        assert "<title>Proposta - Acme Corp</title>" in html
        assert "01/12/2025" in html
        assert "31/12/2025" in html
        assert "Distribuição Demográfica" in html
        assert "Produtos G" not in html

    def test_secondary_sections(self, quote_xlsx_with_secondary):
        record = parse_workbook(quote_xlsx_with_secondary)
        html = render_proposal_html(record)
        assert "Planos com Coparticipação - Produtos G" in html

    def test_empty_company_title(self):
        record = ProposalRecord(
            company=CompanyRecord(),
            emission_date=date(2025, 1, 1),
            validity_date=date(2025, 1, 31),
        )
        assert "<title>Proposta</title>" in render_proposal_html(record)
