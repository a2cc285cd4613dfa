"""
Domain records for a quote proposal.

    ProposalRecord
      ├─ company: CompanyRecord
      ├─ demographics: List[DemographicRow]
      ├─ plans_with_copay / plans_without_copay: List[PlanRow]
      ├─ age_based_pricing_copay / _no_copay: List[AgeBandPricingRow]
      └─ optional *_secondary copies of the five collections

Serialising with ``model_dump(by_alias=True, exclude_none=True)`` yields
the camelCase JSON shape consumed by the preview and slide renderers.
"""

from __future__ import annotations

from datetime import date
from typing import Any, Dict, Generic, List, Optional, TypeVar

from pydantic import BaseModel, Field, field_serializer, model_serializer

DATE_FORMAT = "%d/%m/%Y"


class CompanyRecord(BaseModel):
    name: str = ""
    concessionaire: str = ""
    broker: str = ""


class DemographicRow(BaseModel):
    age_range: str = Field(serialization_alias="ageRange")
    titular_male: int = Field(0, serialization_alias="titularM")
    titular_female: int = Field(0, serialization_alias="titularF")
    dependent_male: int = Field(0, serialization_alias="dependentM")
    dependent_female: int = Field(0, serialization_alias="dependentF")
    aggregate_male: int = Field(0, serialization_alias="agregadoM")
    aggregate_female: int = Field(0, serialization_alias="agregadoF")
    total_male: int = Field(0, serialization_alias="totalM")
    total_female: int = Field(0, serialization_alias="totalF")
    total: int = 0
    percentage: str = "0%"


class PlanRow(BaseModel):
    name: str
    ans_code: str = Field("", serialization_alias="ansCode")
    per_capita: float = Field(0.0, serialization_alias="perCapita")
    estimated_invoice: float = Field(0.0, serialization_alias="estimatedInvoice")


class AgeBandPricingRow(BaseModel):
    """One age bucket with a price per plan (plan order follows the header row)."""

    age_range: str
    prices: Dict[str, float] = {}

    @model_serializer(mode="plain")
    def _flatten(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {"ageRange": self.age_range}
        out.update(self.prices)
        return out

    @property
    def plan_names(self) -> List[str]:
        return list(self.prices)


# -------------------------------------------------------------------
# Extraction diagnostics
# -------------------------------------------------------------------

RowT = TypeVar("RowT")


class SkippedRow(BaseModel):
    """A grid row inside a section range that did not become a record."""

    row: int
    label: str = ""
    reason: str


class SectionResult(BaseModel, Generic[RowT]):
    rows: List[RowT] = []
    skipped: List[SkippedRow] = []


class SheetReport(BaseModel):
    sheet_name: str
    layout: str
    matched: bool
    failed_anchors: List[str] = []
    skipped: Dict[str, List[SkippedRow]] = {}


class ExtractionReport(BaseModel):
    primary: SheetReport
    secondary: Optional[SheetReport] = None


# -------------------------------------------------------------------
# Aggregate root
# -------------------------------------------------------------------


class ProposalRecord(BaseModel):
    company: CompanyRecord = CompanyRecord()
    emission_date: date = Field(serialization_alias="emissionDate")
    validity_date: date = Field(serialization_alias="validityDate")

    demographics: List[DemographicRow] = []
    plans_with_copay: List[PlanRow] = Field([], serialization_alias="plansWithCopay")
    plans_without_copay: List[PlanRow] = Field(
        [], serialization_alias="plansWithoutCopay"
    )
    age_based_pricing_copay: List[AgeBandPricingRow] = Field(
        [], serialization_alias="ageBasedPricingCopay"
    )
    age_based_pricing_no_copay: List[AgeBandPricingRow] = Field(
        [], serialization_alias="ageBasedPricingNoCopay"
    )

    # Secondary product line: only present when the workbook has that sheet.
    demographics_secondary: Optional[List[DemographicRow]] = Field(
        None, serialization_alias="demographicsSecondary"
    )
    plans_with_copay_secondary: Optional[List[PlanRow]] = Field(
        None, serialization_alias="plansWithCopaySecondary"
    )
    plans_without_copay_secondary: Optional[List[PlanRow]] = Field(
        None, serialization_alias="plansWithoutCopaySecondary"
    )
    age_based_pricing_copay_secondary: Optional[List[AgeBandPricingRow]] = Field(
        None, serialization_alias="ageBasedPricingCopaySecondary"
    )
    age_based_pricing_no_copay_secondary: Optional[List[AgeBandPricingRow]] = Field(
        None, serialization_alias="ageBasedPricingNoCopaySecondary"
    )

    report: Optional[ExtractionReport] = Field(None, exclude=True)

    @field_serializer("emission_date", "validity_date")
    def _localized_date(self, value: date) -> str:
        return value.strftime(DATE_FORMAT)

    @property
    def has_secondary(self) -> bool:
        return self.demographics_secondary is not None


class SheetExtraction(BaseModel):
    """Everything read from one sheet, before assembly."""

    sheet_name: str
    layout: str
    matched: bool
    failed_anchors: List[str] = []
    company: CompanyRecord = CompanyRecord()
    demographics: SectionResult[DemographicRow] = SectionResult[DemographicRow]()
    plans_with_copay: SectionResult[PlanRow] = SectionResult[PlanRow]()
    plans_without_copay: SectionResult[PlanRow] = SectionResult[PlanRow]()
    age_bands_copay: SectionResult[AgeBandPricingRow] = SectionResult[AgeBandPricingRow]()
    age_bands_no_copay: SectionResult[AgeBandPricingRow] = SectionResult[
        AgeBandPricingRow
    ]()

    def report(self) -> SheetReport:
        return SheetReport(
            sheet_name=self.sheet_name,
            layout=self.layout,
            matched=self.matched,
            failed_anchors=self.failed_anchors,
            skipped={
                "demographics": self.demographics.skipped,
                "plans_with_copay": self.plans_with_copay.skipped,
                "plans_without_copay": self.plans_without_copay.skipped,
                "age_bands_copay": self.age_bands_copay.skipped,
                "age_bands_no_copay": self.age_bands_no_copay.skipped,
            },
        )
