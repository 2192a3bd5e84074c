"""CrimeCase model for cases recorded by the case-management system."""

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Index, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column

from crimemap.database import Base


class CrimeCase(Base):
    """
    A reported crime case.

    Only cases with ``visibility = 'public'`` and a located incident feed the
    risk computations. Rows are written by the case-management application;
    this service never mutates them.
    """

    __tablename__ = "crime_case"

    id: Mapped[int] = mapped_column(primary_key=True)
    case_number: Mapped[str | None] = mapped_column(String(50))

    # Classification
    crime_type: Mapped[int | None] = mapped_column(ForeignKey("crime-type.id"), index=True)
    case_status: Mapped[str | None] = mapped_column(String(50))
    description: Mapped[str | None] = mapped_column(Text)

    # Timestamps
    incident_datetime: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    report_datetime: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))

    location_id: Mapped[int | None] = mapped_column(ForeignKey("location.id"))
    visibility: Mapped[str | None] = mapped_column(String(20))

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )

    __table_args__ = (
        Index("idx_crime_case_incident_datetime", incident_datetime.desc()),
    )

    def __repr__(self) -> str:
        return f"<CrimeCase {self.id}: {self.case_number}>"
