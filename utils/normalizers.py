"""
Scalar normalizers: raw cell values → domain scalars.

Every function accepts either a raw cell model (``TextCell`` /
``NumberCell`` / ``BlankCell``) or the plain Python value a reader would
produce, and none of them raise on bad input.
"""

from __future__ import annotations

import math
import re
from typing import Any, Union

from dto.cell import BlankCell, NumberCell, TextCell

Number = Union[int, float]

# Currency symbols and whitespace (\s also covers non-breaking spaces).
_CURRENCY_NOISE_RE = re.compile(r"R\$|\$|\s")
_LEADING_NUMBER_RE = re.compile(r"[+-]?\d+(?:\.\d+)?")
_THOUSANDS_ONLY_RE = re.compile(r"^[+-]?\d{1,3}(?:\.\d{3})+$")


def _unwrap(raw: Any) -> Any:
    """Return the plain Python value behind a raw cell model."""
    if isinstance(raw, BlankCell):
        return None
    if isinstance(raw, (TextCell, NumberCell)):
        return raw.value
    return raw


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def _normalize_decimal_text(text: str) -> str:
    """
    Turn BRL-formatted text into a dot-decimal string.

    "R$ 1.234,56" → "1234.56", "1.234" → "1234", "6.80" → "6.80".
    """
    cleaned = _CURRENCY_NOISE_RE.sub("", text)
    if "," in cleaned:
        return cleaned.replace(".", "").replace(",", ".")
    if _THOUSANDS_ONLY_RE.match(cleaned):
        return cleaned.replace(".", "")
    return cleaned


def _parse_number_text(text: str) -> float | None:
    m = _LEADING_NUMBER_RE.match(_normalize_decimal_text(text))
    if not m:
        return None
    value = float(m.group(0))
    return value if math.isfinite(value) else None


def parse_currency(raw: Any) -> float:
    """
    Parse a BRL amount.  Numbers pass through; text such as "R$ 1.234,56"
    is cleaned and parsed; anything unparseable ("-", "", "n/d") is 0.
    """
    value = _unwrap(raw)
    if _is_number(value):
        return float(value) if math.isfinite(value) else 0.0
    if isinstance(value, str):
        parsed = _parse_number_text(value)
        return parsed if parsed is not None else 0.0
    return 0.0


def format_currency(amount: Number) -> str:
    """Render *amount* as pt-BR currency: 1234.56 → "R$ 1.234,56"."""
    sign = "-" if amount < 0 else ""
    # Swap en-US separators for pt-BR ones.
    body = f"{abs(amount):,.2f}".replace(",", "_").replace(".", ",").replace("_", ".")
    return f"{sign}R$ {body}"


def format_currency_or_dash(amount: Any) -> str:
    """Currency text for display, or "-" for zero/absent amounts."""
    value = parse_currency(amount)
    if value <= 0:
        return "-"
    return format_currency(value)


def parse_percentage(raw: Any, scale: float = 100.0) -> str:
    """
    Normalise a percentage to its display form.

    Text that already has a "%" is returned unchanged; numbers are treated
    as fractions (``scale=100``) and rounded to a whole percent.
    """
    value = _unwrap(raw)
    if isinstance(value, str):
        if "%" in value:
            return value
        value = _parse_number_text(value)
    if not _is_number(value) or not math.isfinite(value):
        return "0%"
    return f"{_round_half_up(value * scale)}%"


def parse_count(raw: Any) -> int:
    """Head counts: whole numbers, 0 when blank or unreadable."""
    value = _unwrap(raw)
    if isinstance(value, str):
        value = _parse_number_text(value)
    if not _is_number(value) or not math.isfinite(value):
        return 0
    return _round_half_up(value)


def trimmed_label(raw: Any) -> str:
    """Cell value as a stripped string; "" means the cell is absent."""
    value = _unwrap(raw)
    if value is None:
        return ""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value).strip()


# "18-23", "00 - 18", "59+" (searched, so "00 - 18 anos" also counts).
_AGE_RANGE_RE = re.compile(r"\d+\s*[-–]\s*\d+|\d+\s*\+")


def is_age_range(label: str) -> bool:
    return bool(_AGE_RANGE_RE.search(label))
