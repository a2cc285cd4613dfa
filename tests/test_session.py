from datetime import date

import pytest

from cell_reader import WorkbookDecodeError
from session import ProposalSession


class TestProposalSession:
    """Tests for the single-slot proposal session."""

    def test_starts_empty(self):
        assert ProposalSession().current is None

    def test_upload_installs_record(self, quote_xlsx):
        session = ProposalSession()
        record = session.upload(quote_xlsx, today=date(2025, 12, 1))
        assert session.current is record
        assert record.company.name == "Acme Corp"

    def test_failed_upload_keeps_previous_record(self, quote_xlsx):
        session = ProposalSession()
        previous = session.upload(quote_xlsx)
        with pytest.raises(WorkbookDecodeError):
            session.upload(b"definitely not xlsx")
        assert session.current is previous

    def test_new_upload_replaces_record(self, quote_xlsx, quote_xlsx_with_secondary):
        session = ProposalSession()
        session.upload(quote_xlsx)
        session.upload(quote_xlsx_with_secondary)
        assert session.current.has_secondary

    def test_clear(self, quote_xlsx):
        session = ProposalSession()
        session.upload(quote_xlsx)
        session.clear()
        assert session.current is None

    def test_forced_layout(self, quote_xlsx):
        session = ProposalSession(layout="klini-compact")
        record = session.upload(quote_xlsx)
        assert record.report.primary.layout == "klini-compact"
        # Wrong layout: company cell is in the other column.
        assert record.company.name == ""
