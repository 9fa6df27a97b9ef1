"""
DTO loader: AccessDecision (результат authorize / evaluate_access), типы tier и duration.
"""
from __future__ import annotations

from enum import Enum
from typing import Literal

from pydantic import BaseModel, Field

AccessTier = Literal["standard", "premium"]
DurationType = Literal["hourly", "daily", "weekly", "monthly", "unlimited"]

ACCESS_TIERS: tuple[str, ...] = ("standard", "premium")
DURATION_TYPES: tuple[str, ...] = ("hourly", "daily", "weekly", "monthly", "unlimited")


class DecisionKind(str, Enum):
    ALLOW = "allow"
    DENY_NOT_FOUND = "deny_not_found"
    DENY_INACTIVE = "deny_inactive"
    DENY_IDENTITY_REQUIRED = "deny_identity_required"
    DENY_NOT_ENTITLED = "deny_not_entitled"
    DENY_EXPIRED = "deny_expired"
    STORE_ERROR = "store_error"


# ----- Решение доступа (evaluate: чистая логика; reconcile: отдельный шаг) -----


class AccessDecision(BaseModel):
    """Результат проверки доступа к скрипту для конкретного игрока."""

    kind: DecisionKind
    entry_id: str | None = Field(
        None,
        description="id записи whitelist, давшей доступ (только premium); пишется в execution_logs",
    )
    expired_entry_id: str | None = Field(
        None,
        description="id истёкшей записи, которую надо деактивировать (фаза reconcile)",
    )

    model_config = {"frozen": True}

    @property
    def allowed(self) -> bool:
        return self.kind is DecisionKind.ALLOW


# ----- Результат выдачи (тело + токен для заголовка) -----


class DeliveryResult(BaseModel):
    """Результат ScriptLoaderService.deliver: обёрнутый скрипт и метаданные для ответа."""

    script_id: str
    body: str = Field(..., description="Lua payload после wrap_script")
    timestamp: int = Field(..., description="Секунда, зашитая в payload вместе с токеном")
    entry_id: str | None = Field(None, description="Запись whitelist (только premium)")
    player_id: str | None = None

    model_config = {"frozen": True}
