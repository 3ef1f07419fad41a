from __future__ import annotations

import sqlalchemy as sa
from sqlalchemy.orm import Mapped, mapped_column

from issue_dedup.models.base import Base


class IssueCategory(Base):
    __tablename__ = "issue_categories"

    id: Mapped[str] = mapped_column(sa.String, primary_key=True)
    name: Mapped[str] = mapped_column(sa.String)
    description: Mapped[str | None] = mapped_column(sa.String, nullable=True)
