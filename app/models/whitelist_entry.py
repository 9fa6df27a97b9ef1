from datetime import datetime, timezone
from uuid import uuid4

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, String

from app.db.base import Base


class WhitelistEntry(Base):
    __tablename__ = "whitelist_entries"

    id = Column(String, primary_key=True, default=lambda: str(uuid4()))
    script_id = Column(String, ForeignKey("scripts.id", ondelete="CASCADE"), nullable=False, index=True)
    # Хотя бы один из идентификаторов обязателен (проверяется в WhitelistService.grant)
    roblox_id = Column(String, nullable=True, index=True)
    discord_id = Column(String, nullable=True, index=True)
    access_tier = Column(String(16), nullable=False, default="premium")  # standard | premium
    duration_type = Column(String(16), nullable=False, default="unlimited")  # hourly | daily | weekly | monthly | unlimited
    expires_at = Column(DateTime(timezone=True), nullable=True)  # NULL тогда и только тогда, когда duration_type = unlimited
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))
    updated_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc), onupdate=lambda: datetime.now(timezone.utc))
