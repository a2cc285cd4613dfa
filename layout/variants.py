"""
Known layout revisions of the quote workbook.

Each revision is pure data.  The resolver walks the lists in order, so a
revision with extra anchors sits before the one it could be mistaken for.
``DEFAULT_PRIMARY`` is the best-effort map when nothing validates.
"""

from __future__ import annotations

from typing import Dict, List

from dto.coordinate_map import (
    AgeBandCoordinates,
    CompanyCoordinates,
    CoordinateMap,
    DemographicsCoordinates,
    LabelAnchor,
    PlanCoordinates,
)
from layout.constants import PLAN_PREFIX


def _plans(start_row: int, end_row: int, first_col: int) -> PlanCoordinates:
    # Name, then two merged spacer columns, then ANS / per capita / invoice.
    return PlanCoordinates(
        start_row=start_row,
        end_row=end_row,
        name_column=first_col,
        ans_column=first_col + 3,
        per_capita_column=first_col + 4,
        estimated_invoice_column=first_col + 5,
        name_prefix=PLAN_PREFIX,
    )


def _age_bands(header_row: int, label_col: int) -> AgeBandCoordinates:
    return AgeBandCoordinates(
        header_row=header_row,
        start_row=header_row + 1,
        end_row=header_row + 10,
        label_column=label_col,
        first_plan_column=label_col + 1,
    )


# Current template: label column B, aggregate ("agregado") columns unused.
KLINI_2025_12 = CoordinateMap(
    name="klini-2025-12",
    revision="2025-12",
    company=CompanyCoordinates(row=1, column=1),
    demographics=DemographicsCoordinates(
        start_row=7,
        end_row=16,
        age_column=1,
        titular_male=2,
        titular_female=3,
        dependent_male=4,
        dependent_female=5,
        total_male=8,
        total_female=9,
        total=10,
        percentage=11,
    ),
    plans_with_copay=_plans(26, 33, first_col=1),
    plans_without_copay=_plans(60, 67, first_col=1),
    age_bands_copay=_age_bands(40, label_col=1),
    age_bands_no_copay=_age_bands(75, label_col=1),
)

# Previous template: real aggregate columns, every table below the
# demographics one row higher.
KLINI_2025_10 = CoordinateMap(
    name="klini-2025-10",
    revision="2025-10",
    company=CompanyCoordinates(row=1, column=1),
    demographics=DemographicsCoordinates(
        start_row=7,
        end_row=16,
        age_column=1,
        titular_male=2,
        titular_female=3,
        dependent_male=4,
        dependent_female=5,
        aggregate_male=6,
        aggregate_female=7,
        total_male=8,
        total_female=9,
        total=10,
        percentage=11,
    ),
    plans_with_copay=_plans(25, 32, first_col=1),
    plans_without_copay=_plans(59, 66, first_col=1),
    age_bands_copay=_age_bands(39, label_col=1),
    age_bands_no_copay=_age_bands(74, label_col=1),
    anchors=[LabelAnchor(row=5, column=6, labels=["AGREGADO"])],
)

# Current template exported without the leading spacer column.
KLINI_COMPACT = CoordinateMap(
    name="klini-compact",
    revision="2025-12",
    company=CompanyCoordinates(row=1, column=0),
    demographics=DemographicsCoordinates(
        start_row=7,
        end_row=16,
        age_column=0,
        titular_male=1,
        titular_female=2,
        dependent_male=3,
        dependent_female=4,
        total_male=7,
        total_female=8,
        total=9,
        percentage=10,
    ),
    plans_with_copay=_plans(26, 33, first_col=0),
    plans_without_copay=_plans(60, 67, first_col=0),
    age_bands_copay=_age_bands(40, label_col=0),
    age_bands_no_copay=_age_bands(75, label_col=0),
)

# "PRODUTOS G" sheet: no company block, sections start higher up.
PRODUTOS_G_2025_12 = CoordinateMap(
    name="produtos-g-2025-12",
    revision="2025-12",
    company=None,
    demographics=DemographicsCoordinates(
        start_row=4,
        end_row=13,
        age_column=1,
        titular_male=2,
        titular_female=3,
        dependent_male=4,
        dependent_female=5,
        total_male=8,
        total_female=9,
        total=10,
        percentage=11,
    ),
    plans_with_copay=_plans(22, 29, first_col=1),
    plans_without_copay=_plans(54, 61, first_col=1),
    age_bands_copay=_age_bands(35, label_col=1),
    age_bands_no_copay=_age_bands(68, label_col=1),
)

PRIMARY_VARIANTS: List[CoordinateMap] = [
    KLINI_2025_10,
    KLINI_2025_12,
    KLINI_COMPACT,
]

DEFAULT_PRIMARY = KLINI_2025_12

# A copied primary sheet is common on the secondary tab.
SECONDARY_VARIANTS: List[CoordinateMap] = [PRODUTOS_G_2025_12] + PRIMARY_VARIANTS

VARIANTS_BY_NAME: Dict[str, CoordinateMap] = {
    cmap.name: cmap for cmap in SECONDARY_VARIANTS
}
