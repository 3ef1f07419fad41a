"""Tests for important-flag review operations."""

import pytest
from sqlalchemy import select

from issue_dedup.detection.records import DuplicateGroup, Report
from issue_dedup.models.audit_log import AuditLog
from issue_dedup.models.issue import Issue
from issue_dedup.review.operations import flag_group, toggle_important


def _ref(issue_id: str) -> Report:
    return Report(
        id=issue_id,
        reporter_id=f"u-{issue_id}",
        category_id="roads",
        coordinates=(76.2673, 9.9312),
    )


async def _issue(session_factory, issue_id: str) -> Issue:
    async with session_factory() as session:
        result = await session.execute(select(Issue).where(Issue.id == issue_id))
        return result.scalar_one()


async def _audit_rows(session_factory) -> list[AuditLog]:
    async with session_factory() as session:
        result = await session.execute(select(AuditLog).order_by(AuditLog.id))
        return list(result.scalars().all())


class TestToggleImportant:
    async def test_toggle_on(self, test_session_factory, seeded_db):
        async with test_session_factory() as session:
            outcome = await toggle_important(session, "i1", operator="alice")

        assert outcome == {
            "issue_id": "i1",
            "is_important": True,
            "message": "Issue marked as important",
        }
        assert (await _issue(test_session_factory, "i1")).is_important is True

        rows = await _audit_rows(test_session_factory)
        assert len(rows) == 1
        assert rows[0].action_type == "important_flag"
        assert rows[0].issue_id == "i1"
        assert rows[0].operator == "alice"
        assert rows[0].note == "Marked as Important"

    async def test_toggle_twice_restores(self, test_session_factory, seeded_db):
        async with test_session_factory() as session:
            await toggle_important(session, "i1")
        async with test_session_factory() as session:
            outcome = await toggle_important(session, "i1")

        assert outcome["is_important"] is False
        assert outcome["message"] == "Issue marked as normal"
        assert (await _issue(test_session_factory, "i1")).is_important is False

        rows = await _audit_rows(test_session_factory)
        assert [r.note for r in rows] == ["Marked as Important", "Marked as Normal"]
        assert rows[0].operator == "anonymous"

    async def test_unknown_issue(self, test_session_factory, seeded_db):
        async with test_session_factory() as session:
            with pytest.raises(LookupError):
                await toggle_important(session, "missing")

        assert await _audit_rows(test_session_factory) == []


class TestFlagGroup:
    async def test_flags_all_members(self, test_session_factory, seeded_db):
        group = DuplicateGroup(primary=_ref("i1"), related=(_ref("i2"), _ref("i3")))
        async with test_session_factory() as session:
            changed = await flag_group(session, group, operator="bob")

        assert changed == 3
        for issue_id in ("i1", "i2", "i3"):
            assert (await _issue(test_session_factory, issue_id)).is_important is True

        rows = await _audit_rows(test_session_factory)
        assert sorted(r.issue_id for r in rows) == ["i1", "i2", "i3"]
        assert all(r.details["primary_issue_id"] == "i1" for r in rows)
        assert all(r.details["group_count"] == 3 for r in rows)

    async def test_already_flagged_untouched(self, test_session_factory, seeded_db):
        async with test_session_factory() as session:
            await toggle_important(session, "i2")

        group = DuplicateGroup(primary=_ref("i1"), related=(_ref("i2"),))
        async with test_session_factory() as session:
            changed = await flag_group(session, group)

        assert changed == 1
        rows = await _audit_rows(test_session_factory)
        assert [r.issue_id for r in rows] == ["i2", "i1"]

    async def test_missing_members_ignored(self, test_session_factory, seeded_db):
        group = DuplicateGroup(primary=_ref("i1"), related=(_ref("gone"),))
        async with test_session_factory() as session:
            changed = await flag_group(session, group)

        assert changed == 1
