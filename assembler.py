"""
Aggregate assembler — merges per-sheet extractions into one
``ProposalRecord``.

The primary sheet supplies the company header and the five main
collections.  When the secondary product-line sheet was read, its five
collections are attached under the ``*_secondary`` fields; otherwise
those fields stay ``None`` and are left out of the serialised record.
"""

from __future__ import annotations

from datetime import date, timedelta
from typing import Optional

from dto.proposal import ExtractionReport, ProposalRecord, SheetExtraction
from layout.constants import VALIDITY_DAYS


def assemble_proposal(
    primary: SheetExtraction,
    secondary: Optional[SheetExtraction] = None,
    today: Optional[date] = None,
    validity_days: int = VALIDITY_DAYS,
) -> ProposalRecord:
    emission = today or date.today()

    fields = dict(
        company=primary.company,
        emission_date=emission,
        validity_date=emission + timedelta(days=validity_days),
        demographics=primary.demographics.rows,
        plans_with_copay=primary.plans_with_copay.rows,
        plans_without_copay=primary.plans_without_copay.rows,
        age_based_pricing_copay=primary.age_bands_copay.rows,
        age_based_pricing_no_copay=primary.age_bands_no_copay.rows,
    )
    if secondary is not None:
        fields.update(
            demographics_secondary=secondary.demographics.rows,
            plans_with_copay_secondary=secondary.plans_with_copay.rows,
            plans_without_copay_secondary=secondary.plans_without_copay.rows,
            age_based_pricing_copay_secondary=secondary.age_bands_copay.rows,
            age_based_pricing_no_copay_secondary=secondary.age_bands_no_copay.rows,
        )

    fields["report"] = ExtractionReport(
        primary=primary.report(),
        secondary=secondary.report() if secondary is not None else None,
    )
    return ProposalRecord(**fields)
