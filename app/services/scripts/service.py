from typing import Any

from sqlalchemy import func, update
from sqlalchemy.orm import Session

from app.loader.errors import NotFoundError, ValidationError
from app.loader.models import ACCESS_TIERS
from app.models.script import Script
from app.services.store import store_operation


NAME_MAX_LENGTH = 100
DESCRIPTION_MAX_LENGTH = 500

_EDITABLE_FIELDS = ("name", "description", "script_content", "access_tier", "is_active")


class ScriptService:
    def __init__(self, db: Session):
        self.db = db

    @store_operation("scripts.get_active")
    def get_active(self, script_id: str) -> Script | None:
        return (
            self.db.query(Script)
            .filter(Script.id == script_id, Script.is_active.is_(True))
            .one_or_none()
        )

    @store_operation("scripts.get")
    def get(self, script_id: str) -> Script | None:
        return self.db.query(Script).filter(Script.id == script_id).one_or_none()

    @store_operation("scripts.list_for_owner")
    def list_for_owner(self, owner_id: str) -> list[Script]:
        return (
            self.db.query(Script)
            .filter(Script.user_id == owner_id)
            .order_by(Script.created_at.desc())
            .all()
        )

    @store_operation("scripts.increment_executions")
    def increment_executions(self, script_id: str, *, commit: bool = True) -> None:
        """Атомарный инкремент на стороне БД (без read-modify-write в приложении)."""
        self.db.execute(
            update(Script)
            .where(Script.id == script_id)
            .values(total_executions=func.coalesce(Script.total_executions, 0) + 1)
            .execution_options(synchronize_session=False)
        )
        if commit:
            self.db.commit()

    def create(self, owner_id: str, data: dict[str, Any]) -> Script:
        """Создать скрипт. Поля: name, script_content обязательны; description, access_tier опционально."""
        if not str(owner_id or "").strip():
            raise ValidationError("owner_id is required")
        fields = _validated(data, partial=False)
        return self._insert(Script(user_id=owner_id, **fields))

    def update(self, script_id: str, data: dict[str, Any]) -> Script:
        fields = _validated(data, partial=True)
        script = self.get(script_id)
        if script is None:
            raise NotFoundError(f"script {script_id} not found")
        return self._apply(script, fields)

    def delete(self, script_id: str) -> None:
        script = self.get(script_id)
        if script is None:
            raise NotFoundError(f"script {script_id} not found")
        self._delete(script)

    @store_operation("scripts.create")
    def _insert(self, script: Script) -> Script:
        self.db.add(script)
        self.db.commit()
        self.db.refresh(script)
        return script

    @store_operation("scripts.update")
    def _apply(self, script: Script, fields: dict[str, Any]) -> Script:
        for key, value in fields.items():
            setattr(script, key, value)
        self.db.add(script)
        self.db.commit()
        self.db.refresh(script)
        return script

    @store_operation("scripts.delete")
    def _delete(self, script: Script) -> None:
        self.db.delete(script)
        self.db.commit()


def _validated(data: dict[str, Any], *, partial: bool) -> dict[str, Any]:
    """Валидация полей как в форме создания/редактирования: name <= 100, description <= 500."""
    fields = {k: v for k, v in data.items() if k in _EDITABLE_FIELDS}

    if "name" in fields or not partial:
        name = (fields.get("name") or "").strip()
        if not name:
            raise ValidationError("Script name is required")
        if len(name) > NAME_MAX_LENGTH:
            raise ValidationError(f"Script name must be at most {NAME_MAX_LENGTH} characters")
        fields["name"] = name

    if "script_content" in fields or not partial:
        content = fields.get("script_content") or ""
        if not content.strip():
            raise ValidationError("Script content is required")
        fields["script_content"] = content

    if "description" in fields:
        description = (fields["description"] or "").strip()
        if len(description) > DESCRIPTION_MAX_LENGTH:
            raise ValidationError(f"Description must be at most {DESCRIPTION_MAX_LENGTH} characters")
        fields["description"] = description or None

    if "access_tier" in fields:
        if fields["access_tier"] not in ACCESS_TIERS:
            raise ValidationError(f"Unknown access tier: {fields['access_tier']}")
    elif not partial:
        fields["access_tier"] = "standard"

    return fields
