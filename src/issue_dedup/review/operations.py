"""Review operations: flag reports as important after reviewing duplicates."""

from __future__ import annotations

import sqlalchemy as sa
import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from issue_dedup.detection.records import DuplicateGroup
from issue_dedup.models.audit_log import AuditLog
from issue_dedup.models.issue import Issue

logger = structlog.get_logger()

ACTION_IMPORTANT_FLAG = "important_flag"


def _flag_note(is_important: bool) -> str:
    return f"Marked as {'Important' if is_important else 'Normal'}"


async def toggle_important(
    session: AsyncSession,
    issue_id: str,
    operator: str = "anonymous",
) -> dict:
    """Flip the important flag of one issue and record it in the audit log.

    All work is done within a single transaction.

    Returns:
        Dict with issue_id, is_important and a human-readable message.

    Raises:
        LookupError: If no issue has ``issue_id``.
    """
    async with session.begin():
        result = await session.execute(sa.select(Issue).where(Issue.id == issue_id))
        issue = result.scalar_one_or_none()
        if issue is None:
            raise LookupError(f"Issue {issue_id} not found")

        issue.is_important = not issue.is_important
        note = _flag_note(issue.is_important)

        session.add(
            AuditLog(
                action_type=ACTION_IMPORTANT_FLAG,
                issue_id=issue_id,
                operator=operator,
                note=note,
                details={"is_important": issue.is_important},
            )
        )
        is_important = issue.is_important

    logger.info(
        "issue_important_toggled",
        issue_id=issue_id,
        is_important=is_important,
        operator=operator,
    )
    return {
        "issue_id": issue_id,
        "is_important": is_important,
        "message": f"Issue marked as {'important' if is_important else 'normal'}",
    }


async def flag_group(
    session: AsyncSession,
    group: DuplicateGroup,
    operator: str = "anonymous",
) -> int:
    """Mark every member of a detected group as important.

    Members that are already flagged, or no longer exist, are left alone.
    One audit row is written per issue that changed.

    Returns:
        Number of issues whose flag changed.
    """
    member_ids = [r.id for r in group.members]

    async with session.begin():
        result = await session.execute(
            sa.select(Issue).where(
                Issue.id.in_(member_ids),
                Issue.is_important == False,  # noqa: E712
            )
        )
        issues = result.scalars().all()

        for issue in issues:
            issue.is_important = True
            session.add(
                AuditLog(
                    action_type=ACTION_IMPORTANT_FLAG,
                    issue_id=issue.id,
                    operator=operator,
                    note=_flag_note(True),
                    details={
                        "is_important": True,
                        "primary_issue_id": group.primary.id,
                        "group_count": group.count,
                    },
                )
            )
        changed = len(issues)

    logger.info(
        "duplicate_group_flagged",
        primary_issue_id=group.primary.id,
        members=len(member_ids),
        changed=changed,
        operator=operator,
    )
    return changed
