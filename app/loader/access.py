"""
Decision: evaluate_access(...) -> AccessDecision: чистая функция, без I/O.
authorize(...): оркестрация в две фазы: запрос whitelist + evaluate, затем
reconcile (деактивация истёкшей записи). Сбой reconcile только логируется и не
меняет решение DENY_EXPIRED.
"""
from __future__ import annotations

import logging
from datetime import datetime
from typing import Protocol

from app.loader.errors import StoreError
from app.loader.expiry import is_expired, utcnow
from app.loader.models import AccessDecision, DecisionKind
from app.utils.metrics import whitelist_deactivations_total

logger = logging.getLogger(__name__)


class WhitelistLookup(Protocol):
    def find_active_match(self, script_id: str, player_id: str): ...

    def deactivate(self, entry_id: str) -> None: ...


def evaluate_script(script) -> AccessDecision | None:
    """None -> DENY_NOT_FOUND, is_active=False -> DENY_INACTIVE, иначе None (продолжаем)."""
    if script is None:
        return AccessDecision(kind=DecisionKind.DENY_NOT_FOUND)
    if not script.is_active:
        return AccessDecision(kind=DecisionKind.DENY_INACTIVE)
    return None


def evaluate_access(
    access_tier: str,
    player_id: str | None,
    entry=None,
    now: datetime | None = None,
) -> AccessDecision:
    """
    Правила:
    - standard -> доступ всем, идентификатор не нужен
    - premium без player_id -> DENY_IDENTITY_REQUIRED
    - premium без совпавшей активной записи -> DENY_NOT_ENTITLED
    - запись с истёкшим expires_at (и duration != unlimited) -> DENY_EXPIRED + expired_entry_id
    - иначе ALLOW с entry_id для execution_logs
    """
    if access_tier != "premium":
        return AccessDecision(kind=DecisionKind.ALLOW)

    if not player_id:
        return AccessDecision(kind=DecisionKind.DENY_IDENTITY_REQUIRED)

    if entry is None:
        return AccessDecision(kind=DecisionKind.DENY_NOT_ENTITLED)

    if is_expired(entry.duration_type, entry.expires_at, now):
        return AccessDecision(kind=DecisionKind.DENY_EXPIRED, expired_entry_id=entry.id)

    return AccessDecision(kind=DecisionKind.ALLOW, entry_id=entry.id)


def authorize(
    script_id: str,
    access_tier: str,
    player_id: str | None,
    *,
    whitelist: WhitelistLookup,
    now: datetime | None = None,
) -> AccessDecision:
    """Проверка доступа к скрипту; ошибки БД возвращаются как STORE_ERROR, а не как отказ."""
    if access_tier != "premium" or not player_id:
        # whitelist не нужен: standard или нет идентификатора
        return evaluate_access(access_tier, player_id, None, now)

    try:
        entry = whitelist.find_active_match(script_id, player_id)
    except StoreError:
        logger.error(
            "whitelist_lookup_failed",
            extra={"script_id": script_id, "player_id": player_id, "operation": "whitelist.find_active_match"},
        )
        return AccessDecision(kind=DecisionKind.STORE_ERROR)

    decision = evaluate_access(access_tier, player_id, entry, now or utcnow())
    if decision.expired_entry_id:
        reconcile_expired(whitelist, decision.expired_entry_id, script_id=script_id, player_id=player_id)
    return decision


def reconcile_expired(
    whitelist: WhitelistLookup,
    entry_id: str,
    *,
    script_id: str | None = None,
    player_id: str | None = None,
) -> bool:
    """Best-effort деактивация истёкшей записи. True если запись обновлена без ошибок."""
    logger.info(
        "whitelist_expired",
        extra={"script_id": script_id, "player_id": player_id, "entry_id": entry_id},
    )
    try:
        whitelist.deactivate(entry_id)
    except StoreError:
        logger.warning(
            "whitelist_deactivate_failed",
            extra={"script_id": script_id, "entry_id": entry_id, "operation": "whitelist.deactivate"},
        )
        return False
    whitelist_deactivations_total.inc()
    return True
