"""Shared test fixtures."""

import datetime as dt
import json
from pathlib import Path

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from issue_dedup.models.base import Base

# Kochi city centre, (longitude, latitude)
BASE_LON = 76.2673
BASE_LAT = 9.9312


@pytest.fixture
def sample_snapshot_json() -> dict:
    """Return a small snapshot with one duplicate pair and one loner."""
    return {
        "reports": [
            {
                "id": "r1",
                "reporterId": "u1",
                "categoryId": "roads",
                "categoryName": "Roads",
                "title": "Pothole on MG Road",
                "status": "REPORTED",
                "location": {"type": "Point", "coordinates": [BASE_LON, BASE_LAT]},
                "createdAt": "2026-03-01T10:00:00",
                "cityId": "kochi",
            },
            {
                "id": "r2",
                "reporterId": "u2",
                "categoryId": "roads",
                "categoryName": "Roads",
                "title": "Big pothole near junction",
                "status": "IN_PROGRESS",
                "location": {"type": "Point", "coordinates": [BASE_LON, BASE_LAT + 0.0002]},
                "createdAt": "2026-03-01T11:00:00",
                "cityId": "kochi",
                "images": ["a.jpg"],
            },
            {
                "id": "r3",
                "reporterId": "u3",
                "categoryId": "garbage",
                "categoryName": "Garbage",
                "status": "REPORTED",
                "location": {"type": "Point", "coordinates": [BASE_LON, BASE_LAT]},
                "cityId": "kochi",
            },
        ],
        "metadata": {"exportedAt": "2026-03-02T00:00:00Z", "cityId": "kochi"},
    }


@pytest.fixture
def sample_snapshot_file(tmp_path: Path, sample_snapshot_json: dict) -> Path:
    """Write the sample snapshot to a temporary JSON file."""
    path = tmp_path / "snapshot.json"
    path.write_text(json.dumps(sample_snapshot_json), encoding="utf-8")
    return path


@pytest.fixture
async def test_engine():
    """Create an async SQLite in-memory engine for tests."""
    engine = create_async_engine("sqlite+aiosqlite:///:memory:")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
async def test_session_factory(test_engine) -> async_sessionmaker[AsyncSession]:
    """Create an async session factory bound to the test engine."""
    return async_sessionmaker(test_engine, expire_on_commit=False)


@pytest.fixture
async def seeded_db(test_session_factory):
    """Seed the test DB with categories and issues in two cities.

    Kochi holds three active Roads reports by different users within a
    few metres of each other, one solved Roads report at the same spot,
    one active Garbage report, and one Roads report without coordinates.
    Delhi holds a single active Roads report.
    """
    from issue_dedup.models.issue import Issue
    from issue_dedup.models.issue_category import IssueCategory

    t0 = dt.datetime(2026, 3, 1, 9, 0)

    async with test_session_factory() as session:
        async with session.begin():
            session.add_all(
                [
                    IssueCategory(id="roads", name="Roads"),
                    IssueCategory(id="garbage", name="Garbage"),
                ]
            )
            await session.flush()

            session.add_all(
                [
                    Issue(
                        id="i1",
                        user_id="u1",
                        category_id="roads",
                        title="Pothole",
                        status="REPORTED",
                        longitude=BASE_LON,
                        latitude=BASE_LAT,
                        city_id="kochi",
                        created_at=t0,
                    ),
                    Issue(
                        id="i2",
                        user_id="u2",
                        category_id="roads",
                        title="Pothole again",
                        status="IN_PROGRESS",
                        longitude=BASE_LON,
                        latitude=BASE_LAT + 0.0001,
                        city_id="kochi",
                        created_at=t0 + dt.timedelta(hours=1),
                    ),
                    Issue(
                        id="i3",
                        user_id="u3",
                        category_id="roads",
                        title="Road damaged",
                        status="REPORTED",
                        longitude=BASE_LON + 0.0001,
                        latitude=BASE_LAT,
                        city_id="kochi",
                        created_at=t0 + dt.timedelta(hours=2),
                    ),
                    Issue(
                        id="i4",
                        user_id="u4",
                        category_id="roads",
                        title="Pothole fixed",
                        status="SOLVED",
                        longitude=BASE_LON,
                        latitude=BASE_LAT,
                        city_id="kochi",
                        created_at=t0 + dt.timedelta(hours=3),
                    ),
                    Issue(
                        id="i5",
                        user_id="u5",
                        category_id="garbage",
                        title="Garbage pile",
                        status="REPORTED",
                        longitude=BASE_LON,
                        latitude=BASE_LAT,
                        city_id="kochi",
                        created_at=t0 + dt.timedelta(hours=4),
                    ),
                    Issue(
                        id="i6",
                        user_id="u6",
                        category_id="roads",
                        title="Somewhere on a road",
                        status="REPORTED",
                        longitude=None,
                        latitude=None,
                        city_id="kochi",
                        created_at=t0 + dt.timedelta(hours=5),
                    ),
                    Issue(
                        id="i7",
                        user_id="u7",
                        category_id="roads",
                        title="Pothole in Delhi",
                        status="REPORTED",
                        longitude=77.2090,
                        latitude=28.6139,
                        city_id="delhi",
                        created_at=t0,
                    ),
                ]
            )
