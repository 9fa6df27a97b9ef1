import logging
from datetime import datetime

from sqlalchemy import or_, update
from sqlalchemy.orm import Session

from app.loader.errors import NotFoundError, ValidationError
from app.loader.expiry import compute_expires_at, utcnow
from app.loader.models import ACCESS_TIERS, DURATION_TYPES
from app.models.whitelist_entry import WhitelistEntry
from app.services.store import store_operation


logger = logging.getLogger(__name__)


class WhitelistService:
    def __init__(self, db: Session):
        self.db = db

    @store_operation("whitelist.find_active_match")
    def find_active_match(self, script_id: str, player_id: str) -> WhitelistEntry | None:
        """
        Активная запись для скрипта, где roblox_id ИЛИ discord_id совпадает с player_id.
        При нескольких совпадениях берём самую свежую.
        """
        return (
            self.db.query(WhitelistEntry)
            .filter(
                WhitelistEntry.script_id == script_id,
                WhitelistEntry.is_active.is_(True),
                or_(WhitelistEntry.roblox_id == player_id, WhitelistEntry.discord_id == player_id),
            )
            .order_by(WhitelistEntry.created_at.desc())
            .first()
        )

    @store_operation("whitelist.deactivate")
    def deactivate(self, entry_id: str) -> None:
        """Идемпотентно: повторный вызов для уже неактивной записи ничего не меняет."""
        self.db.execute(
            update(WhitelistEntry)
            .where(WhitelistEntry.id == entry_id, WhitelistEntry.is_active.is_(True))
            .values(is_active=False, updated_at=utcnow())
            .execution_options(synchronize_session=False)
        )
        self.db.commit()

    @store_operation("whitelist.get")
    def get(self, entry_id: str) -> WhitelistEntry | None:
        return self.db.query(WhitelistEntry).filter(WhitelistEntry.id == entry_id).one_or_none()

    @store_operation("whitelist.list_for_script")
    def list_for_script(self, script_id: str) -> list[WhitelistEntry]:
        return (
            self.db.query(WhitelistEntry)
            .filter(WhitelistEntry.script_id == script_id)
            .order_by(WhitelistEntry.created_at.desc())
            .all()
        )

    def grant(
        self,
        script_id: str,
        *,
        roblox_id: str | None = None,
        discord_id: str | None = None,
        access_tier: str = "premium",
        duration_type: str = "unlimited",
        now: datetime | None = None,
    ) -> WhitelistEntry:
        """Выдать доступ: нужен roblox_id или discord_id; expires_at считается из duration_type."""
        roblox_id = (roblox_id or "").strip() or None
        discord_id = (discord_id or "").strip() or None
        if roblox_id is None and discord_id is None:
            raise ValidationError("Discord ID or Roblox ID is required")
        if access_tier not in ACCESS_TIERS:
            raise ValidationError(f"Unknown access tier: {access_tier}")
        if duration_type not in DURATION_TYPES:
            raise ValidationError(f"Unknown duration type: {duration_type}")

        entry = WhitelistEntry(
            script_id=script_id,
            roblox_id=roblox_id,
            discord_id=discord_id,
            access_tier=access_tier,
            duration_type=duration_type,
            expires_at=compute_expires_at(duration_type, now),
            is_active=True,
        )
        entry = self._insert(entry)
        logger.info(
            "whitelist_granted",
            extra={"script_id": script_id, "entry_id": entry.id},
        )
        return entry

    def revoke(self, entry_id: str) -> None:
        entry = self.get(entry_id)
        if entry is None:
            raise NotFoundError(f"whitelist entry {entry_id} not found")
        script_id = entry.script_id
        self._delete(entry)
        logger.info("whitelist_revoked", extra={"script_id": script_id, "entry_id": entry_id})

    @store_operation("whitelist.grant")
    def _insert(self, entry: WhitelistEntry) -> WhitelistEntry:
        self.db.add(entry)
        self.db.commit()
        self.db.refresh(entry)
        return entry

    @store_operation("whitelist.revoke")
    def _delete(self, entry: WhitelistEntry) -> None:
        self.db.delete(entry)
        self.db.commit()
