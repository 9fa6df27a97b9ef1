"""
Оркестратор выдачи скрипта: поиск -> authorize -> execution log -> счётчик -> wrap.
Отказы выбрасываются как ScriptLoaderError; HTTP-ответ собирает роут.
"""
import logging

from sqlalchemy.orm import Session

from app.loader.access import authorize, evaluate_script
from app.loader.errors import (
    AuthorizationError,
    NotFoundError,
    ScriptLoaderError,
    StoreError,
    ValidationError,
)
from app.loader.models import AccessDecision, DecisionKind, DeliveryResult
from app.loader.token import current_timestamp, generate_token
from app.loader.wrapper import wrap_script
from app.services.execution_logs.service import ExecutionLogService
from app.services.scripts.service import ScriptService
from app.services.store import store_operation
from app.services.whitelist.service import WhitelistService


logger = logging.getLogger(__name__)

# Последний сегмент пути, когда id не передан (/script-loader)
NO_ID_SENTINEL = "script-loader"


class ScriptLoaderService:
    def __init__(self, db: Session) -> None:
        self.db = db
        self.scripts = ScriptService(db)
        self.whitelist = WhitelistService(db)
        self.execution_logs = ExecutionLogService(db)

    def deliver(self, script_id: str | None, player_id: str | None) -> DeliveryResult:
        if not script_id or script_id == NO_ID_SENTINEL:
            raise ValidationError("missing script id")

        script = self.scripts.get_active(script_id)
        missing = evaluate_script(script)
        if missing is not None:
            raise decision_error(missing, script_id)

        decision = authorize(
            script_id,
            script.access_tier,
            player_id,
            whitelist=self.whitelist,
        )
        if not decision.allowed:
            raise decision_error(decision, script_id)

        self._record_delivery(script_id, decision.entry_id, player_id)

        timestamp = current_timestamp()
        body = wrap_script(
            script.script_content,
            script_id,
            generate_token(script_id, timestamp),
            timestamp,
        )
        logger.info(
            "script_delivered",
            extra={"script_id": script_id, "player_id": player_id, "entry_id": decision.entry_id},
        )
        return DeliveryResult(
            script_id=script_id,
            body=body,
            timestamp=timestamp,
            entry_id=decision.entry_id,
            player_id=player_id,
        )

    def _record_delivery(self, script_id: str, entry_id: str | None, player_id: str | None) -> None:
        """Лог выдачи и инкремент счётчика: одна транзакция, при сбое откатываются оба."""
        try:
            self.execution_logs.record(
                script_id,
                whitelist_entry_id=entry_id,
                player_id=player_id,
                success=True,
                commit=False,
            )
            self.scripts.increment_executions(script_id, commit=False)
            self._commit()
        except StoreError:
            self.db.rollback()
            raise

    @store_operation("script_loader.commit_delivery")
    def _commit(self) -> None:
        self.db.commit()


def decision_error(decision: AccessDecision, script_id: str) -> ScriptLoaderError:
    kind = decision.kind
    if kind in (DecisionKind.DENY_NOT_FOUND, DecisionKind.DENY_INACTIVE):
        return NotFoundError(f"script {script_id} not found or inactive")
    if kind is DecisionKind.DENY_IDENTITY_REQUIRED:
        return AuthorizationError(
            "premium script requires player id",
            denial="Player identification required",
            outcome="identity_required",
        )
    if kind is DecisionKind.DENY_NOT_ENTITLED:
        return AuthorizationError("player not whitelisted", outcome="not_whitelisted")
    if kind is DecisionKind.DENY_EXPIRED:
        # наружу тот же текст, что и для "нет в whitelist"
        return AuthorizationError("whitelist expired", outcome="expired")
    if kind is DecisionKind.STORE_ERROR:
        return StoreError("whitelist.find_active_match")
    raise ValueError(f"decision {kind} is not a denial")
