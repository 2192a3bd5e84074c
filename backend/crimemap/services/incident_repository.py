"""Read incident snapshots from the case-management database."""

import logging
from collections.abc import Sequence
from datetime import datetime, time, timedelta

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from crimemap.models import CrimeCase, CrimeType, Location
from crimemap.services.filters import IncidentFilters, IncidentRecord
from crimemap.services.geo import Coordinate, bounding_box
from crimemap.services.perimeter import PERIMETER_RADIUS_M

logger = logging.getLogger(__name__)

PUBLIC_VISIBILITY = "public"


async def load_incidents(
    db: AsyncSession,
    filters: IncidentFilters | None = None,
    around: Sequence[Coordinate] | None = None,
    radius_m: float = PERIMETER_RADIUS_M,
) -> list[IncidentRecord]:
    """
    Load public, located crime cases.

    Filters are pushed into SQL. When ``around`` is given, only cases inside a
    bounding box padded by radius_m are read; the exact distance test is left
    to the risk services.
    """
    query = (
        select(
            CrimeCase.id,
            Location.lat,
            Location.long,
            CrimeCase.crime_type,
            CrimeType.name,
            CrimeCase.case_status,
            Location.barangay,
            CrimeCase.incident_datetime,
        )
        .join(Location, CrimeCase.location_id == Location.id)
        .outerjoin(CrimeType, CrimeCase.crime_type == CrimeType.id)
        .where(
            CrimeCase.visibility == PUBLIC_VISIBILITY,
            Location.lat.isnot(None),
            Location.long.isnot(None),
        )
    )

    if around:
        min_lat, max_lat, min_lng, max_lng = bounding_box(list(around), radius_m)
        query = query.where(
            Location.lat.between(min_lat, max_lat),
            Location.long.between(min_lng, max_lng),
        )

    if filters:
        if filters.crime_type_ids:
            query = query.where(CrimeCase.crime_type.in_(sorted(filters.crime_type_ids)))
        if filters.statuses:
            query = query.where(CrimeCase.case_status.in_(sorted(filters.statuses)))
        if filters.barangay_ids:
            query = query.where(Location.barangay.in_(sorted(filters.barangay_ids)))
        if filters.date_from:
            query = query.where(
                CrimeCase.incident_datetime >= datetime.combine(filters.date_from, time.min)
            )
        if filters.date_to:
            # Inclusive end date
            query = query.where(
                CrimeCase.incident_datetime
                < datetime.combine(filters.date_to + timedelta(days=1), time.min)
            )

    result = await db.execute(query.order_by(CrimeCase.id))
    records = [
        IncidentRecord(
            id=row[0],
            latitude=float(row[1]),
            longitude=float(row[2]),
            crime_type_id=row[3],
            crime_type_name=row[4],
            status=row[5],
            barangay_id=row[6],
            incident_timestamp=row[7],
        )
        for row in result.all()
    ]

    logger.info(f"Loaded {len(records)} incidents")
    return records


async def load_crime_types(db: AsyncSession) -> list[CrimeType]:
    """Named crime types, ordered by id."""
    result = await db.execute(
        select(CrimeType).where(CrimeType.name.isnot(None)).order_by(CrimeType.id)
    )
    return list(result.scalars().all())


async def count_cases(db: AsyncSession) -> tuple[int, int]:
    """(all cases, public located cases) for health reporting."""
    total = await db.execute(select(func.count(CrimeCase.id)))
    located = await db.execute(
        select(func.count(CrimeCase.id))
        .join(Location, CrimeCase.location_id == Location.id)
        .where(
            CrimeCase.visibility == PUBLIC_VISIBILITY,
            Location.lat.isnot(None),
            Location.long.isnot(None),
        )
    )
    return total.scalar() or 0, located.scalar() or 0
