from datetime import datetime, timezone
from uuid import uuid4

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, String, Text

from app.db.base import Base


class ExecutionLog(Base):
    __tablename__ = "execution_logs"

    id = Column(String, primary_key=True, default=lambda: str(uuid4()))
    script_id = Column(String, ForeignKey("scripts.id", ondelete="CASCADE"), nullable=False, index=True)
    whitelist_entry_id = Column(String, ForeignKey("whitelist_entries.id", ondelete="SET NULL"), nullable=True)  # только для premium
    roblox_player_id = Column(String, nullable=True)
    success = Column(Boolean, nullable=False, default=True)
    error_message = Column(Text, nullable=True)
    executed_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc), index=True)
