"""
Ошибки выдачи скриптов. Каждая несёт HTTP-статус и грубую причину отказа
(текст после "-- Access Denied: "), чтобы не раскрывать детали whitelist.
"""
from __future__ import annotations

DENIAL_PREFIX = "-- Access Denied: "


class ScriptLoaderError(Exception):
    status_code = 500
    denial = "Server error"
    outcome = "error"  # label для script_deliveries_total

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.denial)


class ValidationError(ScriptLoaderError):
    """Нет script_id или некорректные поля при создании/редактировании."""

    status_code = 400
    denial = "Invalid request"
    outcome = "invalid"


class NotFoundError(ScriptLoaderError):
    """Скрипт (или запись whitelist) не найден либо неактивен."""

    status_code = 404
    denial = "Script not found"
    outcome = "not_found"


class AuthorizationError(ScriptLoaderError):
    """Нужен идентификатор игрока / нет в whitelist / whitelist истёк."""

    status_code = 403
    denial = "Not whitelisted"
    outcome = "not_whitelisted"

    def __init__(
        self,
        message: str | None = None,
        *,
        denial: str | None = None,
        outcome: str | None = None,
    ) -> None:
        if denial is not None:
            self.denial = denial
        if outcome is not None:
            self.outcome = outcome
        super().__init__(message)


class StoreError(ScriptLoaderError):
    """Любой сбой обращения к БД. Не ретраится внутри сервиса."""

    status_code = 500
    denial = "Database error"
    outcome = "store_error"

    def __init__(self, operation: str, message: str | None = None) -> None:
        self.operation = operation
        super().__init__(message or f"store operation failed: {operation}")


class InternalError(ScriptLoaderError):
    status_code = 500
    denial = "Server error"


def denial_line(denial: str) -> str:
    """Единственная строка тела ответа при отказе (Lua-комментарий, безвреден при исполнении)."""
    return f"{DENIAL_PREFIX}{denial}"
