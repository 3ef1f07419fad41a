from issue_dedup.models.audit_log import AuditLog
from issue_dedup.models.base import Base
from issue_dedup.models.issue import Issue
from issue_dedup.models.issue_category import IssueCategory

__all__ = [
    "AuditLog",
    "Base",
    "Issue",
    "IssueCategory",
]
