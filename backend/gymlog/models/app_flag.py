"""Persisted application flags (one-time setup markers)."""

from sqlalchemy import Boolean, String
from sqlalchemy.orm import Mapped, mapped_column

from gymlog.models.base import Base, TimestampMixin


class AppFlag(TimestampMixin, Base):
    """Boolean flag keyed by name, e.g. whether the catalog was seeded."""

    __tablename__ = "app_flags"

    key: Mapped[str] = mapped_column(String(100), primary_key=True)
    value: Mapped[bool] = mapped_column(Boolean, default=False)

    def __repr__(self) -> str:
        return f"<AppFlag(key={self.key}, value={self.value})>"
