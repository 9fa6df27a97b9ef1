from datetime import datetime, timezone
from uuid import uuid4

from sqlalchemy import Boolean, Column, DateTime, Integer, String, Text

from app.db.base import Base


class Script(Base):
    __tablename__ = "scripts"

    id = Column(String, primary_key=True, default=lambda: str(uuid4()))
    user_id = Column(String, nullable=False, index=True)  # владелец (id из внешнего auth-провайдера)
    name = Column(String(100), nullable=False)
    description = Column(String(500), nullable=True)
    script_content = Column(Text, nullable=False)
    access_tier = Column(String(16), nullable=False, default="standard")  # standard | premium
    is_active = Column(Boolean, nullable=False, default=True)
    # Счётчик успешных выдач; инкремент только атомарным UPDATE (ScriptService.increment_executions)
    total_executions = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))
    updated_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc), onupdate=lambda: datetime.now(timezone.utc))
