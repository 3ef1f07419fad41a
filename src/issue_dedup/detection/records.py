"""Value objects flowing in and out of the duplicate detector.

All records are frozen dataclasses: the detector reads a snapshot of
reports and returns groups without mutating anything it was given.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from issue_dedup.detection.errors import DeadlineExceededError

STATUS_OPEN = "open"
STATUS_IN_PROGRESS = "in_progress"
STATUS_SOLVED = "solved"
STATUS_COMPLETED = "completed"
STATUS_REJECTED = "rejected"

ALL_STATUSES = frozenset(
    {STATUS_OPEN, STATUS_IN_PROGRESS, STATUS_SOLVED, STATUS_COMPLETED, STATUS_REJECTED}
)
ACTIVE_STATUSES = frozenset({STATUS_OPEN, STATUS_IN_PROGRESS})

# Storage uses REPORTED for a freshly filed issue
_STATUS_ALIASES = {"reported": STATUS_OPEN}


def normalize_status(status: str | None) -> str | None:
    """Map a storage status (``"REPORTED"``, ``"IN_PROGRESS"``...) to a report status.

    Unknown values are returned lower-cased so they fail the active check
    rather than raising.
    """
    if status is None:
        return None
    key = status.strip().lower().replace("-", "_").replace(" ", "_")
    return _STATUS_ALIASES.get(key, key)


@dataclass(frozen=True)
class Report:
    """A single citizen report as seen by the detector.

    Attributes:
        id: Unique report identifier.
        reporter_id: Citizen who filed the report.
        category_id: Issue category identifier.
        coordinates: ``(longitude, latitude)`` in WGS84 degrees.
        status: One of the ``STATUS_*`` constants, ``None`` when unknown.
        created_at: Filing time, display only.
        category_name: Human-readable category, display only.
        title: Report title, display only.
        city_id: Administrative region the report belongs to.
        is_important: Whether an operator already flagged the report.
    """

    id: str
    reporter_id: str | None
    category_id: str | None
    coordinates: tuple[float, float] | None
    status: str | None = STATUS_OPEN
    created_at: datetime | None = None
    category_name: str | None = None
    title: str | None = None
    city_id: str | None = None
    is_important: bool = False

    @property
    def is_active(self) -> bool:
        return self.status in ACTIVE_STATUSES


@dataclass(frozen=True)
class DuplicateGroup:
    """A primary report and the reports clustered around it.

    Attributes:
        primary: Anchor report; distances are measured from it.
        related: Other members, in snapshot order. Never empty.
    """

    primary: Report
    related: tuple[Report, ...]

    @property
    def count(self) -> int:
        return 1 + len(self.related)

    @property
    def category(self) -> str:
        return self.primary.category_id  # type: ignore[return-value]

    @property
    def category_name(self) -> str:
        return self.primary.category_name or self.category

    @property
    def centroid(self) -> tuple[float, float]:
        return self.primary.coordinates  # type: ignore[return-value]

    @property
    def members(self) -> tuple[Report, ...]:
        return (self.primary, *self.related)


@dataclass(frozen=True)
class SkippedReport:
    """A report left out of detection because it was malformed."""

    report_id: str | None
    reason: str


@dataclass
class DetectionResult:
    """Outcome of one ``detect`` call.

    An empty ``groups`` list with ``partial=False`` means the snapshot was
    fully scanned and holds no duplicates.

    Attributes:
        groups: Duplicate groups, largest first, capped.
        skipped: Malformed reports left out of the scan.
        inactive_count: Reports ignored because their status is not active.
        scanned: Top-level reports examined before the scan ended.
        partial: ``True`` when a deadline cut the scan short.
        error: The deadline error when ``partial`` is set.
    """

    groups: list[DuplicateGroup] = field(default_factory=list)
    skipped: list[SkippedReport] = field(default_factory=list)
    inactive_count: int = 0
    scanned: int = 0
    partial: bool = False
    error: DeadlineExceededError | None = None

    def raise_for_partial(self) -> None:
        """Raise the deadline error if the scan did not complete."""
        if self.error is not None:
            raise self.error
