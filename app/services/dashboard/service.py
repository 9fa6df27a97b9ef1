from sqlalchemy import func
from sqlalchemy.orm import Session

from app.models.script import Script
from app.models.whitelist_entry import WhitelistEntry
from app.services.store import store_operation


class DashboardService:
    def __init__(self, db: Session):
        self.db = db

    @store_operation("dashboard.stats")
    def stats(self, owner_id: str) -> dict:
        """Плитки дашборда владельца: скрипты, суммарные выдачи, активные whitelist."""
        total_scripts, total_executions = (
            self.db.query(
                func.count(Script.id),
                func.coalesce(func.sum(Script.total_executions), 0),
            )
            .filter(Script.user_id == owner_id)
            .one()
        )
        active_whitelists = (
            self.db.query(func.count(WhitelistEntry.id))
            .join(Script, WhitelistEntry.script_id == Script.id)
            .filter(Script.user_id == owner_id, WhitelistEntry.is_active.is_(True))
            .scalar()
        )
        return {
            "total_scripts": int(total_scripts or 0),
            "total_executions": int(total_executions or 0),
            "active_whitelists": int(active_whitelists or 0),
        }
