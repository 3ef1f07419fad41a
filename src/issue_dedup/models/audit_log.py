"""Audit log model for tracking operator flagging actions."""

from __future__ import annotations

from datetime import datetime

import sqlalchemy as sa
from sqlalchemy.orm import Mapped, mapped_column

from issue_dedup.models.base import Base


class AuditLog(Base):
    __tablename__ = "audit_log"

    id: Mapped[int] = mapped_column(sa.Integer, primary_key=True, autoincrement=True)
    action_type: Mapped[str] = mapped_column(sa.String)  # "important_flag"
    issue_id: Mapped[str | None] = mapped_column(
        sa.String, sa.ForeignKey("issues.id", ondelete="SET NULL"), nullable=True
    )
    operator: Mapped[str] = mapped_column(sa.String, default="anonymous")
    note: Mapped[str | None] = mapped_column(sa.String, nullable=True)
    details: Mapped[dict | None] = mapped_column(sa.JSON, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        sa.DateTime, server_default=sa.text("CURRENT_TIMESTAMP")
    )
