"""Exceptions raised by the duplicate detector."""

from __future__ import annotations


class DetectionError(Exception):
    """Base class for duplicate detection errors."""


class MalformedReportError(DetectionError):
    """A report lacks a field required for clustering.

    Raised while validating the snapshot; ``detect`` catches it, logs it
    and skips the report.
    """

    def __init__(self, report_id: str | None, reason: str) -> None:
        self.report_id = report_id
        self.reason = reason
        super().__init__(f"Report {report_id!r} is malformed: {reason}")


class DeadlineExceededError(DetectionError):
    """The scan ran past its deadline before every report was examined."""

    def __init__(self, scanned: int, total: int, groups_resolved: int) -> None:
        self.scanned = scanned
        self.total = total
        self.groups_resolved = groups_resolved
        super().__init__(
            f"Detection deadline exceeded after scanning {scanned}/{total} reports "
            f"({groups_resolved} groups resolved)"
        )
