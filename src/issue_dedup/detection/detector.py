"""Greedy single-anchor duplicate detection.

Walks the snapshot in order.  Each report not yet assigned becomes a
candidate anchor; every other unassigned report in the same category,
filed by a different citizen and within ``max_distance_m`` of the anchor
joins its group.  Membership is decided against the anchor only, so the
grouping is not transitive and depends on snapshot order.

All functions are PURE -- no database access, no state kept between calls.
"""

from __future__ import annotations

from collections.abc import Iterable

import structlog

from issue_dedup.detection.config import DetectionConfig
from issue_dedup.detection.deadline import Deadline
from issue_dedup.detection.errors import DeadlineExceededError, MalformedReportError
from issue_dedup.detection.geo import haversine_m, valid_coordinates
from issue_dedup.detection.records import (
    DetectionResult,
    DuplicateGroup,
    Report,
    SkippedReport,
)

logger = structlog.get_logger()


def validate_report(report: Report) -> None:
    """Raise ``MalformedReportError`` if ``report`` cannot be clustered."""
    if not report.id:
        raise MalformedReportError(report.id, "missing id")
    if not report.reporter_id:
        raise MalformedReportError(report.id, "missing reporter")
    if not report.category_id:
        raise MalformedReportError(report.id, "missing category")
    if report.status is None:
        raise MalformedReportError(report.id, "missing status")
    if report.coordinates is None:
        raise MalformedReportError(report.id, "missing coordinates")
    if not valid_coordinates(report.coordinates):
        raise MalformedReportError(
            report.id, f"invalid coordinates {report.coordinates!r}"
        )


def _eligible_reports(
    reports: Iterable[Report], config: DetectionConfig, result: DetectionResult
) -> list[Report]:
    """Drop inactive and malformed reports, recording why on ``result``."""
    active = set(config.active_statuses)
    eligible: list[Report] = []
    for report in reports:
        if report.status is not None and report.status not in active:
            result.inactive_count += 1
            continue
        try:
            validate_report(report)
        except MalformedReportError as e:
            logger.warning(
                "malformed_report_skipped",
                report_id=e.report_id,
                reason=e.reason,
            )
            result.skipped.append(SkippedReport(report_id=e.report_id, reason=e.reason))
            continue
        eligible.append(report)
    return eligible


def _is_match(anchor: Report, other: Report, max_distance_m: float) -> bool:
    if other.category_id != anchor.category_id:
        return False
    if other.reporter_id == anchor.reporter_id:
        return False
    return haversine_m(anchor.coordinates, other.coordinates) <= max_distance_m  # type: ignore[arg-type]


def rank_groups(groups: list[DuplicateGroup], max_groups: int) -> list[DuplicateGroup]:
    """Order groups largest first and keep the top ``max_groups``.

    ``sorted`` is stable, so equal-sized groups keep the order in which
    their anchors appeared in the snapshot.
    """
    return sorted(groups, key=lambda g: g.count, reverse=True)[:max_groups]


def detect(
    reports: Iterable[Report],
    config: DetectionConfig | None = None,
    deadline: Deadline | None = None,
) -> DetectionResult:
    """Partition a report snapshot into duplicate groups.

    Args:
        reports: Snapshot of reports for one region, in a stable order.
            Inactive reports are ignored; malformed ones are skipped and
            listed on the result.
        config: Distance threshold, group cap and active statuses.
        deadline: Optional deadline, checked before each anchor is
            examined.  When it expires the groups resolved so far are
            returned with ``partial=True``.

    Returns:
        A ``DetectionResult`` whose ``groups`` are sorted by size
        (descending) and capped at ``config.max_groups``.
    """
    if config is None:
        config = DetectionConfig()

    result = DetectionResult()
    snapshot = _eligible_reports(reports, config, result)
    processed = [False] * len(snapshot)
    groups: list[DuplicateGroup] = []

    for i, anchor in enumerate(snapshot):
        if deadline is not None and deadline.expired():
            result.partial = True
            result.error = DeadlineExceededError(
                scanned=result.scanned,
                total=len(snapshot),
                groups_resolved=len(groups),
            )
            logger.warning(
                "detection_deadline_exceeded",
                scanned=result.scanned,
                total=len(snapshot),
                groups_resolved=len(groups),
            )
            break

        result.scanned += 1
        if processed[i]:
            continue

        related_idx = [
            j
            for j, other in enumerate(snapshot)
            if j != i
            and not processed[j]
            and _is_match(anchor, other, config.max_distance_m)
        ]

        processed[i] = True
        if not related_idx:
            continue

        for j in related_idx:
            processed[j] = True
        groups.append(
            DuplicateGroup(
                primary=anchor,
                related=tuple(snapshot[j] for j in related_idx),
            )
        )

    result.groups = rank_groups(groups, config.max_groups)

    logger.debug(
        "detection_complete",
        reports=len(snapshot),
        groups_found=len(groups),
        groups_returned=len(result.groups),
        skipped=len(result.skipped),
        inactive=result.inactive_count,
        partial=result.partial,
    )
    return result
