"""Pydantic schemas for filter catalogs."""

from crimemap.schemas.base import CamelModel


class CrimeTypeOut(CamelModel):
    id: int
    name: str
    label: str | None = None
    color: str | None = None


class BarangayOut(CamelModel):
    id: int
    name: str
