"""Company header: name, concessionaire and broker."""

from __future__ import annotations

from typing import Optional

from dto.cell import RawGrid
from dto.coordinate_map import CompanyCoordinates
from dto.proposal import CompanyRecord
from utils.normalizers import trimmed_label


class CompanyExtractor:
    section = "company"

    def extract(
        self,
        grid: RawGrid,
        coords: Optional[CompanyCoordinates],
    ) -> CompanyRecord:
        if coords is None:
            return CompanyRecord()
        return CompanyRecord(
            name=trimmed_label(grid.cell(*coords.name_cell)),
            concessionaire=trimmed_label(grid.cell(*coords.concessionaire_cell)),
            broker=trimmed_label(grid.cell(*coords.broker_cell)),
        )
