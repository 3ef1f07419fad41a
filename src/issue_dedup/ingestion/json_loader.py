"""JSON snapshot loader for offline duplicate detection runs."""

import json
from datetime import datetime
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from issue_dedup.detection.records import Report, normalize_status


class LocationData(BaseModel):
    type: str = "Point"
    # Per-record garbage is rejected by the detector, not the whole file
    coordinates: list[Any] | None = None


class ReportData(BaseModel):
    id: str
    reporter_id: str | None = Field(None, alias="reporterId")
    category_id: str | None = Field(None, alias="categoryId")
    category_name: str | None = Field(None, alias="categoryName")
    title: str | None = None
    status: str | None = "REPORTED"
    location: LocationData | None = None
    created_at: datetime | None = Field(None, alias="createdAt")
    city_id: str | None = Field(None, alias="cityId")
    is_important: bool = Field(False, alias="isImportant")
    # Allow extra fields we explicitly ignore (description, images, timeline...)
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    def to_report(self) -> Report:
        coords = self.location.coordinates if self.location else None
        return Report(
            id=self.id,
            reporter_id=self.reporter_id,
            category_id=self.category_id,
            # Anything but a [lon, lat] pair is left for the detector to reject
            coordinates=(coords[0], coords[1]) if coords and len(coords) == 2 else None,
            status=normalize_status(self.status),
            created_at=self.created_at,
            category_name=self.category_name,
            title=self.title,
            city_id=self.city_id,
            is_important=self.is_important,
        )


class SnapshotMetadata(BaseModel):
    exportedAt: str | None = None
    cityId: str | None = None
    # Allow all other metadata fields
    model_config = ConfigDict(extra="allow")


class SnapshotFileData(BaseModel):
    reports: list[ReportData]
    metadata: SnapshotMetadata | None = None


def load_snapshot_file(file_path: Path) -> SnapshotFileData:
    """Read and validate a JSON report snapshot.

    Raises:
        ValueError: If the file contains invalid JSON or fails validation.
    """
    try:
        with open(file_path, encoding="utf-8") as f:
            raw_data = json.load(f)
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON in {file_path}: {e}") from e

    try:
        return SnapshotFileData.model_validate(raw_data)
    except Exception as e:
        raise ValueError(f"Validation error for {file_path}: {e}") from e


def load_report_snapshot(file_path: Path, city_id: str | None = None) -> list[Report]:
    """Load a snapshot file as ``Report`` objects, in file order.

    Args:
        file_path: Path to the JSON snapshot.
        city_id: When given, keep only reports from this city.
    """
    data = load_snapshot_file(file_path)
    reports = [r.to_report() for r in data.reports]
    if city_id is not None:
        reports = [r for r in reports if r.city_id == city_id]
    return reports
