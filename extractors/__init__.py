from extractors.age_bands import AgeBandExtractor
from extractors.base import SectionExtractor
from extractors.company import CompanyExtractor
from extractors.demographics import DemographicsExtractor
from extractors.plans import PlanExtractor

__all__ = [
    "SectionExtractor",
    "CompanyExtractor",
    "DemographicsExtractor",
    "PlanExtractor",
    "AgeBandExtractor",
]
