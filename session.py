"""
In-memory proposal slot for one user session.

Exactly one ``ProposalRecord`` is live at a time.  A new upload is
extracted completely before it replaces the current record, so a failed
upload leaves the previous proposal in place and consumers never see a
half-built record.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Optional

from cell_reader import WorkbookSource
from dto.proposal import ProposalRecord
from parser import parse_workbook

logger = logging.getLogger(__name__)


class ProposalSession:

    def __init__(self, layout: Optional[str] = None) -> None:
        self.layout = layout
        self._record: Optional[ProposalRecord] = None

    @property
    def current(self) -> Optional[ProposalRecord]:
        return self._record

    def upload(
        self,
        source: WorkbookSource,
        today: Optional[date] = None,
    ) -> ProposalRecord:
        """
        Extract *source* and install it as the current proposal.

        ``WorkbookDecodeError`` propagates and the previous record stays.
        """
        record = parse_workbook(source, layout=self.layout, today=today)
        self._record = record
        logger.info(
            "Proposal for '%s' installed (%d plan(s) with copay, %d without)",
            record.company.name,
            len(record.plans_with_copay),
            len(record.plans_without_copay),
        )
        return record

    def clear(self) -> None:
        self._record = None
