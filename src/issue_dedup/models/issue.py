from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

import sqlalchemy as sa
from sqlalchemy.orm import Mapped, mapped_column, relationship

from issue_dedup.models.base import Base

if TYPE_CHECKING:
    from issue_dedup.models.issue_category import IssueCategory


class Issue(Base):
    __tablename__ = "issues"
    __table_args__ = (
        sa.Index("ix_issues_city_status", "city_id", "status"),
        sa.Index("ix_issues_category_created", "category_id", "created_at"),
    )

    id: Mapped[str] = mapped_column(sa.String, primary_key=True)

    # Reporter and category (required for duplicate detection)
    user_id: Mapped[str | None] = mapped_column(sa.String, nullable=True)
    category_id: Mapped[str | None] = mapped_column(
        sa.ForeignKey("issue_categories.id"), nullable=True
    )

    title: Mapped[str] = mapped_column(sa.String)
    description: Mapped[str | None] = mapped_column(sa.Text, nullable=True)

    # REPORTED, IN_PROGRESS, SOLVED, COMPLETED, REJECTED
    status: Mapped[str] = mapped_column(sa.String, default="REPORTED", index=True)

    # Point location
    longitude: Mapped[float | None] = mapped_column(sa.Float, nullable=True)
    latitude: Mapped[float | None] = mapped_column(sa.Float, nullable=True)

    # Administrative region
    state_id: Mapped[str | None] = mapped_column(sa.String, nullable=True)
    city_id: Mapped[str | None] = mapped_column(sa.String, nullable=True)
    area_id: Mapped[str | None] = mapped_column(sa.String, nullable=True)

    images: Mapped[list | None] = mapped_column(sa.JSON, nullable=True)
    is_important: Mapped[bool] = mapped_column(sa.Boolean, default=False)

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(
        sa.DateTime, server_default=sa.text("CURRENT_TIMESTAMP")
    )
    updated_at: Mapped[datetime | None] = mapped_column(
        sa.DateTime, nullable=True, onupdate=sa.func.now()
    )

    # Relationships
    category: Mapped[IssueCategory | None] = relationship("IssueCategory")
