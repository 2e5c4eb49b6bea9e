"""Province schemas."""
from .base import CamelModel


class ProvinceRead(CamelModel):
    id: int
    name: str
    code: str
    region: str
    capital: str | None = None
    population: int | None = None
    project_count: int = 0


class ProvinceCounts(CamelModel):
    total: int
    by_region: dict[str, int]


class ProvinceList(CamelModel):
    provinces: list[ProvinceRead]
    by_region: dict[str, list[ProvinceRead]]
    counts: ProvinceCounts
