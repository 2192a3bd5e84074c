"""Database models."""

from crimemap.models.crime_case import CrimeCase
from crimemap.models.crime_type import CrimeType
from crimemap.models.location import Location

__all__ = [
    "CrimeCase",
    "CrimeType",
    "Location",
]
