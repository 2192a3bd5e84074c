#!/usr/bin/env python3
"""
Seed a development database with hotspot-clustered sample crime cases.

Usage: python scripts/generate_sample_data.py [seed]

Writes location and crime_case rows with asyncpg. Crime types 1-7 must
already exist in the "crime-type" table.
"""

import asyncio
import os
import sys

import asyncpg
from dotenv import load_dotenv

from crimemap.services.sample_data import CRIME_TYPES, generate_sample_cases

load_dotenv()

DATABASE_URL = os.getenv("DATABASE_URL", "").replace("+asyncpg", "")


def log(msg):
    """Print with flush for immediate output."""
    print(msg, flush=True)


async def seed(seed_value: int):
    """Insert one location and one case per generated sample."""
    log("Connecting to database...")
    conn = await asyncpg.connect(DATABASE_URL)

    try:
        known_types = {
            row["id"] for row in await conn.fetch('SELECT id FROM "crime-type"')
        }
        missing = [crime_type_id for crime_type_id, _, _ in CRIME_TYPES if crime_type_id not in known_types]
        if missing:
            log(f"Error: crime types {missing} are missing from \"crime-type\"")
            sys.exit(1)

        cases = generate_sample_cases(seed=seed_value)
        log(f"Generated {len(cases)} sample cases (seed {seed_value})")

        initial_count = await conn.fetchval("SELECT COUNT(*) FROM crime_case")

        async with conn.transaction():
            for i, case in enumerate(cases, start=1):
                location_id = await conn.fetchval(
                    """
                    INSERT INTO location (lat, long, barangay, crime_location)
                    VALUES ($1, $2, $3, $4)
                    RETURNING id
                    """,
                    case.lat,
                    case.lng,
                    case.barangay_id,
                    case.crime_location,
                )
                await conn.execute(
                    """
                    INSERT INTO crime_case (
                        case_number, crime_type, case_status, description,
                        incident_datetime, report_datetime, location_id, visibility
                    ) VALUES ($1, $2, $3, $4, $5, $6, $7, $8)
                    """,
                    f"SAMPLE-{seed_value}-{i:04d}",
                    case.crime_type_id,
                    case.case_status,
                    f"Sample case near {case.crime_location}",
                    case.incident_datetime,
                    case.report_datetime,
                    location_id,
                    case.visibility,
                )

        final_count = await conn.fetchval("SELECT COUNT(*) FROM crime_case")
        public = sum(1 for case in cases if case.visibility == "public")

        log("\nSeeding complete!")
        log(f"  Inserted: {len(cases):,} ({public:,} public)")
        log(f"  Total in DB: {final_count:,}")
        log(f"  Net new records: {final_count - initial_count:,}")
    finally:
        await conn.close()


if __name__ == "__main__":
    if not DATABASE_URL:
        log("Error: DATABASE_URL is not set")
        sys.exit(1)

    seed_value = int(sys.argv[1]) if len(sys.argv) > 1 else 42
    asyncio.run(seed(seed_value))
