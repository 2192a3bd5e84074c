"""Location model for where a crime case happened."""

from datetime import datetime

from sqlalchemy import DateTime, Float, Integer, String, func
from sqlalchemy.orm import Mapped, mapped_column

from crimemap.database import Base


class Location(Base):
    """Geocoded incident location with its barangay."""

    __tablename__ = "location"

    id: Mapped[int] = mapped_column(primary_key=True)
    lat: Mapped[float | None] = mapped_column(Float)
    long: Mapped[float | None] = mapped_column(Float)

    barangay: Mapped[int | None] = mapped_column(Integer, index=True)
    crime_location: Mapped[str | None] = mapped_column(String(255))
    landmark: Mapped[str | None] = mapped_column(String(255))
    pin: Mapped[int | None] = mapped_column(Integer)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )

    def __repr__(self) -> str:
        return f"<Location {self.id}: ({self.lat}, {self.long})>"
