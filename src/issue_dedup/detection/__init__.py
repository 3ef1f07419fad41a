"""Duplicate report detection.

Groups active reports that share a category, were filed by different
citizens and lie within a distance threshold of an anchor report.
"""

from .config import DetectionConfig, load_detection_config
from .deadline import Deadline
from .detector import detect
from .errors import DeadlineExceededError, DetectionError, MalformedReportError
from .records import DetectionResult, DuplicateGroup, Report, SkippedReport

__all__ = [
    "Deadline",
    "DeadlineExceededError",
    "DetectionConfig",
    "DetectionError",
    "DetectionResult",
    "DuplicateGroup",
    "MalformedReportError",
    "Report",
    "SkippedReport",
    "detect",
    "load_detection_config",
]
