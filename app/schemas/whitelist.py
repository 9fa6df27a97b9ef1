from datetime import datetime

from pydantic import BaseModel, ConfigDict

from app.loader.models import AccessTier, DurationType


class WhitelistEntryOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    script_id: str
    roblox_id: str | None = None
    discord_id: str | None = None
    access_tier: AccessTier
    duration_type: DurationType
    expires_at: datetime | None = None
    is_active: bool
    created_at: datetime


class WhitelistGrantIn(BaseModel):
    """Discord ID или Roblox ID обязателен (проверка в WhitelistService.grant)."""
    model_config = ConfigDict(extra="ignore")

    roblox_id: str | None = None
    discord_id: str | None = None
    access_tier: AccessTier = "premium"
    duration_type: DurationType = "unlimited"


class ExecutionLogOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    script_id: str
    whitelist_entry_id: str | None = None
    roblox_player_id: str | None = None
    success: bool
    error_message: str | None = None
    executed_at: datetime
