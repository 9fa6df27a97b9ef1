from sqlalchemy.orm import Session

from app.models.execution_log import ExecutionLog
from app.services.store import store_operation


class ExecutionLogService:
    """Append-only журнал выдач скриптов."""

    def __init__(self, db: Session) -> None:
        self.db = db

    @store_operation("execution_logs.record")
    def record(
        self,
        script_id: str,
        *,
        whitelist_entry_id: str | None = None,
        player_id: str | None = None,
        success: bool = True,
        error_message: str | None = None,
        commit: bool = True,
    ) -> ExecutionLog:
        """commit=False: только flush, транзакцию завершает вызывающий."""
        entry = ExecutionLog(
            script_id=script_id,
            whitelist_entry_id=whitelist_entry_id,
            roblox_player_id=player_id,
            success=success,
            error_message=error_message,
        )
        self.db.add(entry)
        if not commit:
            self.db.flush()
            return entry
        self.db.commit()
        self.db.refresh(entry)
        return entry

    @store_operation("execution_logs.list_for_script")
    def list_for_script(self, script_id: str, limit: int = 100) -> list[ExecutionLog]:
        return (
            self.db.query(ExecutionLog)
            .filter(ExecutionLog.script_id == script_id)
            .order_by(ExecutionLog.executed_at.desc())
            .limit(limit)
            .all()
        )
