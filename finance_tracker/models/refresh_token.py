"""
Refresh token model.

Only the SHA-256 digest of an issued refresh token is stored.
A token can be exchanged exactly once before it expires; the
exchange marks it used and issues a replacement.
"""

from datetime import datetime

from sqlalchemy import String, DateTime, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column

from finance_tracker.models.base import Base


class RefreshToken(Base):
    __tablename__ = "refresh_tokens"

    id: Mapped[int] = mapped_column(primary_key=True)
    account_id: Mapped[int] = mapped_column(
        ForeignKey("accounts.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    token_hash: Mapped[str] = mapped_column(
        String(64), unique=True, nullable=False, index=True
    )
    expires_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    used_at: Mapped[datetime | None] = mapped_column(
        DateTime, nullable=True, default=None
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=datetime.utcnow
    )

    def is_usable(self, now: datetime) -> bool:
        """A token is usable until it is consumed or expires."""
        return self.used_at is None and now < self.expires_at

    def __repr__(self) -> str:
        state = "used" if self.used_at else "active"
        return f"<RefreshToken account={self.account_id} ({state})>"
