"""JSON transport schemas for detected duplicate groups.

Field names follow the dashboard's camelCase contract (``primaryIssue``,
``relatedIssues``, ``count``, ``category``, ``location``).
"""

from __future__ import annotations

import datetime as dt
from typing import Annotated

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field

from issue_dedup.detection.records import DetectionResult, DuplicateGroup, Report


def _coerce_to_str(v: object) -> str | None:
    """Coerce datetimes to ISO strings for schema output."""
    if v is None:
        return None
    if isinstance(v, (dt.date, dt.datetime)):
        return v.isoformat()
    return str(v)


OptDateStr = Annotated[str | None, BeforeValidator(_coerce_to_str)]


class ReportOut(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    reporter_id: str = Field(serialization_alias="reporterId")
    category_id: str = Field(serialization_alias="categoryId")
    category: str | None = None
    title: str | None = None
    status: str
    coordinates: tuple[float, float]
    created_at: OptDateStr = Field(default=None, serialization_alias="createdAt")
    is_important: bool = Field(default=False, serialization_alias="isImportant")

    @classmethod
    def from_report(cls, report: Report) -> ReportOut:
        return cls(
            id=report.id,
            reporter_id=report.reporter_id,
            category_id=report.category_id,
            category=report.category_name,
            title=report.title,
            status=report.status,
            coordinates=report.coordinates,
            created_at=report.created_at,
            is_important=report.is_important,
        )


class DuplicateGroupOut(BaseModel):
    primary_issue: ReportOut = Field(serialization_alias="primaryIssue")
    related_issues: list[ReportOut] = Field(serialization_alias="relatedIssues")
    count: int
    category: str
    location: tuple[float, float]

    @classmethod
    def from_group(cls, group: DuplicateGroup) -> DuplicateGroupOut:
        return cls(
            primary_issue=ReportOut.from_report(group.primary),
            related_issues=[ReportOut.from_report(r) for r in group.related],
            count=group.count,
            category=group.category_name,
            location=group.centroid,
        )


class SkippedReportOut(BaseModel):
    report_id: str | None = Field(serialization_alias="reportId")
    reason: str


class DetectionResultOut(BaseModel):
    groups: list[DuplicateGroupOut]
    partial: bool
    skipped: list[SkippedReportOut]
    inactive: int


def groups_to_payload(groups: list[DuplicateGroup]) -> list[dict]:
    """Serialize groups to the dashboard's JSON array format."""
    return [
        DuplicateGroupOut.from_group(g).model_dump(mode="json", by_alias=True)
        for g in groups
    ]


def result_to_payload(result: DetectionResult) -> dict:
    """Serialize a full detection result, including partial/skip metadata."""
    out = DetectionResultOut(
        groups=[DuplicateGroupOut.from_group(g) for g in result.groups],
        partial=result.partial,
        skipped=[
            SkippedReportOut(report_id=s.report_id, reason=s.reason)
            for s in result.skipped
        ],
        inactive=result.inactive_count,
    )
    return out.model_dump(mode="json", by_alias=True)
