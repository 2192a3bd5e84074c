"""Pytest fixtures for crime risk backend tests."""

import json
from collections.abc import AsyncGenerator
from datetime import datetime
from unittest.mock import AsyncMock

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from crimemap.database import Base, get_db
from crimemap.dependencies import get_prediction_client, get_safety_analyst
from crimemap.main import app
from crimemap.models import CrimeCase, CrimeType, Location
from crimemap.rate_limit import limiter
from crimemap.services.cache import InMemoryTTLCache
from crimemap.services.filters import IncidentRecord
from crimemap.services.grid import GridPredictionCell
from crimemap.services.prediction_client import PredictionClient
from crimemap.services.safety_analyst import SafetyAnalyst

# Test database URL - SQLite keeps tests isolated from the case-management database
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

# Near the New Bilibid Prison hotspot
CENTER_LAT = 14.3850
CENTER_LNG = 121.0420


@pytest_asyncio.fixture
async def async_engine():
    """Create async engine for testing."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(async_engine) -> AsyncGenerator[AsyncSession, None]:
    """Create test database session."""
    async_session = async_sessionmaker(async_engine, class_=AsyncSession, expire_on_commit=False)

    async with async_session() as session:
        yield session
        await session.rollback()


@pytest.fixture
def sample_analysis_json() -> str:
    """Model output in the expected JSON shape."""
    return json.dumps(
        {
            "riskExplanations": [
                {"title": "Theft hotspot", "description": "Most cases are theft.", "severity": "medium"}
            ],
            "safetyTips": [
                {"tip": "Keep bags zipped", "context": "Theft is common", "priority": "essential"}
            ],
            "timePatterns": [],
            "overallSummary": "Moderate risk driven by theft.",
        }
    )


@pytest.fixture
def mock_prediction_client() -> PredictionClient:
    """Prediction client with the HTTP layer mocked out."""
    client = PredictionClient(base_url="http://predict.test", api_key="test", backoff_seconds=0)
    client.fetch_grid_predictions = AsyncMock(return_value=[])
    return client


@pytest.fixture
def mock_safety_analyst(sample_analysis_json) -> SafetyAnalyst:
    """Safety analyst with the Gemini call mocked out."""
    analyst = SafetyAnalyst(cache=InMemoryTTLCache(), api_key="test", model_name="test-model")
    analyst._generate = AsyncMock(return_value=sample_analysis_json)
    return analyst


@pytest_asyncio.fixture
async def client(
    db_session: AsyncSession,
    mock_prediction_client: PredictionClient,
    mock_safety_analyst: SafetyAnalyst,
) -> AsyncGenerator[AsyncClient, None]:
    """Create test HTTP client with database and collaborator overrides."""

    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_prediction_client] = lambda: mock_prediction_client
    app.dependency_overrides[get_safety_analyst] = lambda: mock_safety_analyst
    limiter.enabled = False

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as client:
        yield client

    limiter.enabled = True
    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def seeded_db(db_session: AsyncSession) -> AsyncSession:
    """
    Crime types plus five cases: three public ones within 300m of the center,
    one public case ~1.1km away and one private case at the center.
    """
    db_session.add_all(
        [
            CrimeType(id=1, name="Theft", label="Theft", color="#ef4444"),
            CrimeType(id=2, name="Vandalism", label="Vandalism", color="#f59e0b"),
        ]
    )

    cases = [
        # (lat, lng, crime type, status, barangay, visibility, incident date)
        (CENTER_LAT + 0.0005, CENTER_LNG, 1, "open", 1, "public", datetime(2024, 7, 1, 20, 0)),
        (CENTER_LAT, CENTER_LNG + 0.0005, 1, "case settled", 1, "public", datetime(2024, 8, 15, 21, 0)),
        (CENTER_LAT - 0.0005, CENTER_LNG, 2, "open", 1, "public", datetime(2024, 9, 30, 19, 0)),
        (CENTER_LAT + 0.01, CENTER_LNG, 1, "open", 3, "public", datetime(2024, 7, 1, 20, 0)),
        (CENTER_LAT, CENTER_LNG, 1, "open", 1, "private", datetime(2024, 7, 1, 20, 0)),
    ]
    for i, (lat, lng, crime_type, status, barangay, visibility, incident_at) in enumerate(cases, start=1):
        db_session.add(Location(id=i, lat=lat, long=lng, barangay=barangay))
        db_session.add(
            CrimeCase(
                id=i,
                case_number=f"TEST-{i}",
                crime_type=crime_type,
                case_status=status,
                incident_datetime=incident_at,
                location_id=i,
                visibility=visibility,
            )
        )

    await db_session.commit()
    return db_session


@pytest.fixture
def make_incident():
    """Factory for IncidentRecord snapshots."""

    def _make(id: int, lat: float, lng: float, crime_type_id: int | None = 1, **kwargs) -> IncidentRecord:
        names = {1: "Theft", 2: "Physical Injury", 5: "Vandalism"}
        return IncidentRecord(
            id=id,
            latitude=lat,
            longitude=lng,
            crime_type_id=crime_type_id,
            crime_type_name=names.get(crime_type_id),
            **kwargs,
        )

    return _make


@pytest.fixture
def sample_grid_cells() -> list[GridPredictionCell]:
    """Scored cells including a duplicate and a low-probability cell with history."""
    return [
        GridPredictionCell(14.400, 121.040, True, 0.8, 3),
        GridPredictionCell(14.400, 121.040, True, 0.75, 3),
        GridPredictionCell(14.385, 121.042, False, 0.45, 0),
        GridPredictionCell(14.390, 121.050, False, 0.1, 2),
        GridPredictionCell(14.420, 121.060, False, 0.05, 0),
    ]
