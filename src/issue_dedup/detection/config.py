"""Duplicate detection configuration with sensible defaults.

All parameters can be overridden via ``config/detection.yaml``.
If the file does not exist, defaults are used.
"""

from __future__ import annotations

from pathlib import Path

import structlog
import yaml
from pydantic import BaseModel, Field, field_validator

from issue_dedup.detection.records import ALL_STATUSES, STATUS_IN_PROGRESS, STATUS_OPEN


class DetectionConfig(BaseModel):
    """Tuning knobs for the duplicate detector."""

    max_distance_m: float = Field(default=500.0, gt=0)
    max_groups: int = Field(default=50, ge=1)
    active_statuses: list[str] = [STATUS_OPEN, STATUS_IN_PROGRESS]
    timeout_seconds: float | None = Field(default=None, gt=0)

    @field_validator("active_statuses")
    @classmethod
    def warn_on_unknown_statuses(cls, value: list[str]) -> list[str]:
        """Log a warning for statuses no report can have."""
        unknown = sorted(set(value) - ALL_STATUSES)
        if unknown:
            structlog.get_logger().warning(
                "detection_config_unknown_statuses",
                unknown=unknown,
            )
        return value


def load_detection_config(path: Path) -> DetectionConfig:
    """Load detection configuration from a YAML file.

    If the file does not exist, returns a ``DetectionConfig`` with all
    default values.  Partial overrides are supported -- only the keys
    present in the YAML file will override defaults.
    """
    if not path.exists():
        return DetectionConfig()

    with open(path) as f:
        data = yaml.safe_load(f) or {}

    return DetectionConfig(**data)
