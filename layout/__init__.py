"""
Layout variant resolution.

The quote workbook has drifted across template revisions.  Each revision
is a ``CoordinateMap`` (see ``layout.variants``); the resolver picks one
by checking anchors:
  1. company name cell is filled (primary sheets only)
  2. a brand-prefixed plan row exists in the with-copay plan range
  3. the copay age-band header holds plan names above age-range rows
  4. any extra label anchors the revision declares
"""

from layout.base import Anchor
from layout.resolver import (
    LayoutResolution,
    LayoutResolver,
    primary_resolver,
    secondary_resolver,
)
from layout.variants import (
    DEFAULT_PRIMARY,
    PRIMARY_VARIANTS,
    SECONDARY_VARIANTS,
    VARIANTS_BY_NAME,
)

__all__ = [
    "Anchor",
    "LayoutResolution",
    "LayoutResolver",
    "primary_resolver",
    "secondary_resolver",
    "DEFAULT_PRIMARY",
    "PRIMARY_VARIANTS",
    "SECONDARY_VARIANTS",
    "VARIANTS_BY_NAME",
]
