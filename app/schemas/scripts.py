from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from app.loader.generator import ThemeColor
from app.loader.models import AccessTier


class ScriptOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    user_id: str
    name: str
    description: str | None = None
    access_tier: AccessTier
    is_active: bool
    total_executions: int
    created_at: datetime
    updated_at: datetime


class ScriptDetailOut(ScriptOut):
    script_content: str
    loader_url: str | None = None


class ScriptCreateIn(BaseModel):
    model_config = ConfigDict(extra="ignore")

    owner_id: str
    name: str
    description: str | None = None
    script_content: str
    access_tier: AccessTier = "standard"


class ScriptUpdateIn(BaseModel):
    """Все поля опциональны: обновляются только переданные."""
    model_config = ConfigDict(extra="ignore")

    name: str | None = None
    description: str | None = None
    script_content: str | None = None
    access_tier: AccessTier | None = None
    is_active: bool | None = None


class LoaderIn(BaseModel):
    theme_color: ThemeColor = Field(default_factory=ThemeColor)
    filename: str | None = None


class DashboardStatsOut(BaseModel):
    total_scripts: int
    total_executions: int
    active_whitelists: int
