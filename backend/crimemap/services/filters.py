"""Incident records and the filter value type applied before risk computations."""

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date, datetime

from crimemap.services.errors import RiskInputError
from crimemap.services.geo import Coordinate

logger = logging.getLogger(__name__)

CASE_STATUSES: tuple[str, ...] = (
    "open",
    "under investigation",
    "case settled",
    "lupon",
    "direct filing",
    "for record",
    "turn-over",
)

BARANGAYS: dict[int, str] = {
    1: "Poblacion",
    2: "Tunasan",
    3: "Putatan",
    4: "Bayanan",
    5: "Alabang",
    6: "Ayala Alabang",
    7: "Buli",
    8: "Cupang",
    9: "Sucat",
}


@dataclass(frozen=True)
class IncidentRecord:
    """Snapshot of one crime case as seen by the risk computations."""

    id: int
    latitude: float | None = None
    longitude: float | None = None
    crime_type_id: int | None = None
    crime_type_name: str | None = None
    status: str | None = None
    barangay_id: int | None = None
    incident_timestamp: datetime | None = None

    @property
    def coordinate(self) -> Coordinate | None:
        if self.latitude is None or self.longitude is None:
            return None
        return Coordinate(lat=self.latitude, lng=self.longitude)


@dataclass(frozen=True)
class IncidentFilters:
    """
    Optional incident filters, combined with AND.

    An empty or missing dimension imposes no restriction. A record whose value
    is null in a restricted dimension never matches it. Date bounds are
    inclusive and compare the calendar date of the incident timestamp.
    """

    crime_type_ids: frozenset[int] = frozenset()
    statuses: frozenset[str] = frozenset()
    barangay_ids: frozenset[int] = frozenset()
    date_from: date | None = None
    date_to: date | None = None

    def __post_init__(self):
        if self.date_from and self.date_to and self.date_from > self.date_to:
            raise RiskInputError(
                f"dateFrom ({self.date_from}) must not be after dateTo ({self.date_to})"
            )

    @property
    def is_empty(self) -> bool:
        return not (
            self.crime_type_ids
            or self.statuses
            or self.barangay_ids
            or self.date_from
            or self.date_to
        )

    def matches(self, record: IncidentRecord) -> bool:
        if self.crime_type_ids and record.crime_type_id not in self.crime_type_ids:
            return False
        if self.statuses and record.status not in self.statuses:
            return False
        if self.barangay_ids and record.barangay_id not in self.barangay_ids:
            return False
        if self.date_from or self.date_to:
            if record.incident_timestamp is None:
                return False
            incident_date = record.incident_timestamp.date()
            if self.date_from and incident_date < self.date_from:
                return False
            if self.date_to and incident_date > self.date_to:
                return False
        return True

    def apply(self, records: Iterable[IncidentRecord]) -> list[IncidentRecord]:
        if self.is_empty:
            return list(records)
        return [record for record in records if self.matches(record)]

    def signature(self) -> str:
        """Stable string form used in cache keys."""
        return "|".join(
            [
                ",".join(str(i) for i in sorted(self.crime_type_ids)),
                ",".join(sorted(self.statuses)),
                ",".join(str(i) for i in sorted(self.barangay_ids)),
                self.date_from.isoformat() if self.date_from else "",
                self.date_to.isoformat() if self.date_to else "",
            ]
        )

    @classmethod
    def from_params(
        cls,
        crime_type_ids: str | Iterable | None = None,
        statuses: str | Iterable | None = None,
        barangays: str | Iterable | None = None,
        date_from: str | date | None = None,
        date_to: str | date | None = None,
    ) -> "IncidentFilters":
        """Build filters from comma-separated query strings or lists."""
        return cls(
            crime_type_ids=parse_crime_type_ids(crime_type_ids),
            statuses=parse_statuses(statuses),
            barangay_ids=resolve_barangay_ids(barangays),
            date_from=parse_date_bound(date_from, "dateFrom"),
            date_to=parse_date_bound(date_to, "dateTo"),
        )


def _split(values: str | Iterable | None) -> list[str]:
    if values is None:
        return []
    if isinstance(values, str):
        values = values.split(",")
    return [str(value).strip() for value in values if str(value).strip()]


def parse_crime_type_ids(values: str | Iterable | None) -> frozenset[int]:
    ids = set()
    for value in _split(values):
        try:
            ids.add(int(value))
        except ValueError as e:
            raise RiskInputError(f"Invalid crime type id: {value!r}") from e
    return frozenset(ids)


def parse_statuses(values: str | Iterable | None) -> frozenset[str]:
    statuses = set()
    for value in _split(values):
        status = value.lower()
        if status not in CASE_STATUSES:
            raise RiskInputError(
                f"Invalid case status {value!r}; expected one of: {', '.join(CASE_STATUSES)}"
            )
        statuses.add(status)
    return frozenset(statuses)


def resolve_barangay_ids(values: str | Iterable | None) -> frozenset[int]:
    """
    Resolve barangay ids or names to ids.

    Unknown names are dropped; when nothing resolves the dimension is left
    unrestricted.
    """
    by_name = {name.lower(): barangay_id for barangay_id, name in BARANGAYS.items()}
    ids = set()
    for value in _split(values):
        if value.isdigit():
            try:
                ids.add(int(value))
            except ValueError as e:
                raise RiskInputError(f"Invalid barangay id: {value!r}") from e
            continue
        barangay_id = by_name.get(value.lower())
        if barangay_id is None:
            logger.warning(f"Ignoring unknown barangay filter: {value}")
            continue
        ids.add(barangay_id)
    return frozenset(ids)


def parse_date_bound(value: str | date | None, name: str) -> date | None:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return datetime.fromisoformat(value.strip()).date()
    except ValueError as e:
        raise RiskInputError(f"Invalid {name}: expected an ISO date (YYYY-MM-DD)") from e
