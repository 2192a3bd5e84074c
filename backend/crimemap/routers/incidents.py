"""API routes for incident filter catalogs."""

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from crimemap.database import get_db
from crimemap.schemas.catalog import BarangayOut, CrimeTypeOut
from crimemap.services.filters import BARANGAYS, CASE_STATUSES
from crimemap.services.incident_repository import load_crime_types

router = APIRouter(prefix="/incidents", tags=["incidents"])


@router.get("/crime-types", response_model=list[CrimeTypeOut])
async def list_crime_types(
    db: Annotated[AsyncSession, Depends(get_db)],
) -> list[CrimeTypeOut]:
    """Get list of all crime types usable in crimeTypeIds."""
    crime_types = await load_crime_types(db)
    return [CrimeTypeOut.model_validate(crime_type) for crime_type in crime_types]


@router.get("/statuses", response_model=list[str])
async def list_statuses() -> list[str]:
    """Get list of case statuses usable in statusFilters."""
    return list(CASE_STATUSES)


@router.get("/barangays", response_model=list[BarangayOut])
async def list_barangays() -> list[BarangayOut]:
    """Get list of barangays usable in barangayFilters."""
    return [BarangayOut(id=barangay_id, name=name) for barangay_id, name in BARANGAYS.items()]
