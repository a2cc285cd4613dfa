import io
import json
import sys
from datetime import date

import openpyxl
import pytest

import parser
from assembler import assemble_proposal
from cell_reader import DECODE_ERROR_MESSAGE, WorkbookDecodeError, read_workbook
from dto.cell import NumberCell, TextCell
from extractors.sheet import SheetExtractor
from layout.resolver import primary_resolver
from parser import extract_proposal, find_secondary_sheet, parse_workbook

TODAY = date(2025, 12, 1)


class TestReadWorkbook:
    """Tests for decoding workbook bytes into grids."""

    def test_reads_bytes(self, quote_xlsx):
        grids = read_workbook(quote_xlsx)
        assert grids.sheet_names == ["Cotação"]
        grid = grids.first
        assert grid.sheet_name == "Cotação"
        assert grid.cell(1, 1) == TextCell(value="Acme Corp")
        assert grid.cell(7, 2) == NumberCell(value=3.0)
        assert grid.cell(0, 0).kind == "blank"

    def test_reads_path_and_file_object(self, quote_xlsx, tmp_path):
        path = tmp_path / "cotacao.xlsx"
        path.write_bytes(quote_xlsx)
        assert read_workbook(path) == read_workbook(str(path))
        assert read_workbook(io.BytesIO(quote_xlsx)) == read_workbook(quote_xlsx)

    def test_trailing_blanks_are_dropped(self, make_xlsx):
        grids = read_workbook(make_xlsx(("S", [["a", None, None], [None], [None]])))
        assert grids.first.rows == [[TextCell(value="a")]]

    def test_formulas_are_not_evaluated(self):
        wb = openpyxl.Workbook()
        wb.active["A1"] = 2
        wb.active["A2"] = "=A1*2"
        buf = io.BytesIO()
        wb.save(buf)
        # No cached value was stored, so the cell reads back blank.
        grid = read_workbook(buf.getvalue()).first
        assert grid.cell(1, 0).kind == "blank"

    def test_sheet_order_is_kept(self, quote_xlsx_with_secondary):
        grids = read_workbook(quote_xlsx_with_secondary)
        assert grids.sheet_names == ["Cotação", "PRODUTOS G"]
        assert grids.grid("PRODUTOS G").sheet_name == "PRODUTOS G"

    @pytest.mark.parametrize("data", [b"", b"not a spreadsheet", b"PK\x03\x04garbage"])
    def test_garbage_raises_decode_error(self, data):
        with pytest.raises(WorkbookDecodeError) as exc_info:
            read_workbook(data)
        assert str(exc_info.value) == DECODE_ERROR_MESSAGE

    def test_missing_file(self, tmp_path):
        with pytest.raises(WorkbookDecodeError):
            read_workbook(tmp_path / "missing.xlsx")


class TestFindSecondarySheet:
    """Tests for locating the secondary product sheet."""

    def test_case_insensitive_match(self):
        assert find_secondary_sheet(["Cotação", "Produtos G - Dez"]) == "Produtos G - Dez"

    def test_first_sheet_is_never_secondary(self):
        assert find_secondary_sheet(["PRODUTOS G"]) is None
        assert find_secondary_sheet(["PRODUTOS G", "Outra"]) is None

    def test_absent(self):
        assert find_secondary_sheet(["Cotação", "Resumo"]) is None
        assert find_secondary_sheet([]) is None


class TestAssembleProposal:
    """Tests for the aggregate assembler."""

    def test_dates(self, quote_grid):
        primary = SheetExtractor(primary_resolver("auto")).extract(quote_grid)
        record = assemble_proposal(primary, today=TODAY)
        assert record.emission_date == TODAY
        assert record.validity_date == date(2025, 12, 31)

        dumped = record.model_dump(by_alias=True)
        assert dumped["emissionDate"] == "01/12/2025"
        assert dumped["validityDate"] == "31/12/2025"

    def test_custom_validity(self, quote_grid):
        primary = SheetExtractor(primary_resolver("auto")).extract(quote_grid)
        record = assemble_proposal(primary, today=TODAY, validity_days=10)
        assert record.validity_date == date(2025, 12, 11)

    def test_no_secondary(self, quote_grid):
        primary = SheetExtractor(primary_resolver("auto")).extract(quote_grid)
        record = assemble_proposal(primary, today=TODAY)
        assert not record.has_secondary
        assert record.plans_with_copay_secondary is None
        assert record.report.secondary is None
        assert record.report.primary.layout == "klini-2025-12"


class TestParseWorkbook:
    """End-to-end tests from workbook bytes to the proposal record."""

    def test_minimal_sheet(self, make_xlsx):
        values = [[None] * 4 for _ in range(43)]
        values[1] = ["", "Acme Corp"]
        values[7] = [None, "0-18", 1, 2]
        values[8] = [None, "19-23", 3, 4]
        values[9] = [None, "TOTAL", 4, 6]
        values[26] = [None, "KLINI Basic", None, None, "ANS 1", 100, 1000]
        values[27] = [None, "Other Plan", None, None, "ANS 2", 200, 2000]
        values[40] = ["", "Faixa", "Plan A", "Plan B"]
        values[41] = ["", "0-18", 100, 120]
        values[42] = ["", "19-23", 110, 130]

        record = parse_workbook(make_xlsx(("Cotação", values)), layout="auto", today=TODAY)

        assert record.company.name == "Acme Corp"
        assert len(record.demographics) == 2
        assert [p.name for p in record.plans_with_copay] == ["KLINI Basic"]
        assert record.plans_with_copay[0].ans_code == "ANS 1"
        assert len(record.age_based_pricing_copay) == 2
        for row in record.age_based_pricing_copay:
            assert set(row.prices) == {"Plan A", "Plan B"}
        assert record.plans_without_copay == []
        assert record.age_based_pricing_no_copay == []
        assert record.report.primary.matched

    def test_full_workbook(self, quote_xlsx):
        record = parse_workbook(quote_xlsx, layout="auto", today=TODAY)
        assert record.company.broker == "Corretora Beta"
        assert len(record.demographics) == 3
        assert len(record.plans_with_copay) == 2
        assert len(record.plans_without_copay) == 2
        assert record.plans_without_copay[1].estimated_invoice == pytest.approx(2400.0)
        assert len(record.age_based_pricing_copay) == 3
        assert len(record.age_based_pricing_no_copay) == 2

    def test_unrecognised_sheet_degrades(self, make_xlsx):
        record = parse_workbook(make_xlsx(("Planilha", [["foo"]])), today=TODAY)
        assert record.company.name == ""
        assert record.demographics == []
        assert record.plans_with_copay == []
        assert not record.report.primary.matched
        assert record.report.primary.failed_anchors

    def test_idempotent(self, quote_xlsx):
        first = parse_workbook(quote_xlsx, today=TODAY)
        second = parse_workbook(quote_xlsx, today=TODAY)
        assert first.model_dump(by_alias=True) == second.model_dump(by_alias=True)

    def test_secondary_sheet_is_merged(self, quote_xlsx_with_secondary):
        record = parse_workbook(quote_xlsx_with_secondary, today=TODAY)
        assert record.has_secondary
        assert len(record.demographics_secondary) == 3
        assert [p.name for p in record.plans_with_copay_secondary] == [
            "KLINI 100 ENF",
            "KLINI 200 APT",
        ]
        assert len(record.age_based_pricing_no_copay_secondary) == 2
        assert record.report.secondary.layout == "produtos-g-2025-12"
        # Company comes from the first sheet only.
        assert record.company.name == "Acme Corp"

    def test_decode_error_propagates(self):
        with pytest.raises(WorkbookDecodeError):
            parse_workbook(b"garbage")

    def test_extract_proposal_from_grids(self, quote_xlsx_with_secondary):
        grids = read_workbook(quote_xlsx_with_secondary)
        record = extract_proposal(grids, layout="auto", today=TODAY)
        assert record.has_secondary


class TestProposalJson:
    """Tests for the serialised proposal shape."""

    def test_camel_case_keys(self, quote_xlsx):
        record = parse_workbook(quote_xlsx, today=TODAY)
        data = record.model_dump(by_alias=True, exclude_none=True)

        assert set(data) == {
            "company",
            "emissionDate",
            "validityDate",
            "demographics",
            "plansWithCopay",
            "plansWithoutCopay",
            "ageBasedPricingCopay",
            "ageBasedPricingNoCopay",
        }
        assert data["demographics"][0] == {
            "ageRange": "00-18",
            "titularM": 3,
            "titularF": 2,
            "dependentM": 1,
            "dependentF": 1,
            "agregadoM": 0,
            "agregadoF": 0,
            "totalM": 5,
            "totalF": 3,
            "total": 8,
            "percentage": "40%",
        }
        assert data["plansWithCopay"][0] == {
            "name": "KLINI 100 ENF",
            "ansCode": "123.456/78-9",
            "perCapita": 1234.56,
            "estimatedInvoice": 9876.48,
        }
        assert data["ageBasedPricingCopay"][0] == {
            "ageRange": "00-18",
            "KLINI 100 ENF": 150.5,
            "KLINI 200 APT": 200.0,
        }

    def test_secondary_keys_present_with_sheet(self, quote_xlsx_with_secondary):
        record = parse_workbook(quote_xlsx_with_secondary, today=TODAY)
        data = record.model_dump(by_alias=True, exclude_none=True)
        assert "demographicsSecondary" in data
        assert "ageBasedPricingNoCopaySecondary" in data
        assert "report" not in data


class TestMain:
    """Tests for the command-line entry point."""

    def test_writes_json(self, quote_xlsx, tmp_path, monkeypatch):
        src = tmp_path / "cotacao.xlsx"
        src.write_bytes(quote_xlsx)
        out = tmp_path / "out.json"
        html = tmp_path / "preview.html"
        monkeypatch.setattr(
            sys, "argv", ["parser.py", str(src), "-o", str(out), "--html", str(html)]
        )

        parser.main()

        data = json.loads(out.read_text(encoding="utf-8"))
        assert data["company"]["name"] == "Acme Corp"
        assert "Acme Corp" in html.read_text(encoding="utf-8")

    def test_default_output_name(self, quote_xlsx, tmp_path, monkeypatch):
        src = tmp_path / "cotacao.xlsx"
        src.write_bytes(quote_xlsx)
        monkeypatch.chdir(tmp_path)
        monkeypatch.setattr(sys, "argv", ["parser.py", str(src)])

        parser.main()

        assert (tmp_path / "cotacao_proposal.json").is_file()

    def test_bad_file_exits(self, tmp_path, monkeypatch):
        src = tmp_path / "broken.xlsx"
        src.write_bytes(b"not a workbook")
        monkeypatch.setattr(sys, "argv", ["parser.py", str(src)])

        with pytest.raises(SystemExit) as exc_info:
            parser.main()
        assert exc_info.value.code == 1
