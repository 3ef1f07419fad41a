"""Storage-backed entry point: fetch a city's snapshot, then detect."""

from __future__ import annotations

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from issue_dedup.detection.config import DetectionConfig
from issue_dedup.detection.deadline import Deadline
from issue_dedup.detection.detector import detect
from issue_dedup.detection.records import DetectionResult
from issue_dedup.storage.reports import fetch_active_reports

logger = structlog.get_logger()


async def find_duplicates(
    session: AsyncSession,
    city_id: str,
    config: DetectionConfig | None = None,
    deadline: Deadline | None = None,
) -> DetectionResult:
    """Detect duplicate groups among a city's active reports.

    Storage errors propagate to the caller; any returned result, even one
    without groups, means detection ran.

    Args:
        session: Async DB session used for the snapshot query.
        city_id: City whose active reports form the snapshot.
        config: Detection settings.  Defaults to ``DetectionConfig()``.
        deadline: Scan deadline.  When omitted and
            ``config.timeout_seconds`` is set, one is started after the
            snapshot has been fetched.

    Raises:
        ValueError: If ``city_id`` is empty.
    """
    if not city_id:
        raise ValueError("city_id is required")
    if config is None:
        config = DetectionConfig()

    reports = await fetch_active_reports(session, city_id)

    if deadline is None and config.timeout_seconds is not None:
        deadline = Deadline.after(config.timeout_seconds)

    result = detect(reports, config, deadline)

    logger.info(
        "duplicates_detected",
        city_id=city_id,
        reports=len(reports),
        groups=len(result.groups),
        skipped=len(result.skipped),
        partial=result.partial,
    )
    return result
