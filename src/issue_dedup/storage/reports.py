"""Active-report snapshots loaded from the issues table.

Converts ``Issue`` rows into the detector's ``Report`` value objects so
the detector never touches lazy ORM attributes.
"""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from issue_dedup.detection.records import Report, normalize_status
from issue_dedup.models.issue import Issue

# Storage-side spelling of the active statuses
ACTIVE_ISSUE_STATUSES = ("REPORTED", "IN_PROGRESS")


def issue_to_report(issue: Issue) -> Report:
    """Build a fully resolved ``Report`` from an ``Issue`` row.

    The category relationship must already be loaded.  Missing
    coordinates are passed through as ``None`` for the detector to flag.
    """
    if issue.longitude is None or issue.latitude is None:
        coordinates = None
    else:
        coordinates = (issue.longitude, issue.latitude)

    return Report(
        id=issue.id,
        reporter_id=issue.user_id,
        category_id=issue.category_id,
        coordinates=coordinates,
        status=normalize_status(issue.status),
        created_at=issue.created_at,
        category_name=issue.category.name if issue.category is not None else None,
        title=issue.title,
        city_id=issue.city_id,
        is_important=bool(issue.is_important),
    )


async def fetch_active_reports(session: AsyncSession, city_id: str) -> list[Report]:
    """Load the active reports of one city, oldest first.

    Ordering by ``(created_at, id)`` keeps the snapshot order stable, which
    the detector's anchor selection depends on.
    """
    result = await session.execute(
        select(Issue)
        .where(
            Issue.city_id == city_id,
            Issue.status.in_(ACTIVE_ISSUE_STATUSES),
        )
        .options(selectinload(Issue.category))
        .order_by(Issue.created_at, Issue.id)
    )
    return [issue_to_report(issue) for issue in result.scalars().all()]
