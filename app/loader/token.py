"""
X-Script-Token: короткий токен от (script_id, секунда, секрет).
Это обфускация против повторного использования дампа, НЕ аутентификация:
токен не участвует ни в одном решении о доступе.
"""
from __future__ import annotations

import functools
import logging
import time

from app.loader.config import get_token_secret

logger = logging.getLogger(__name__)

_BASE36 = "0123456789abcdefghijklmnopqrstuvwxyz"


def current_timestamp() -> int:
    """Текущая секунда (бакет токена)."""
    return int(time.time())


def generate_token(script_id: str, timestamp: int, secret: str | None = None) -> str:
    """
    Rolling hash h = h * 31 + code_unit по UTF-16 кодам строки "id:ts:secret",
    с переполнением int32 на каждом шаге; результат abs(h) в base36.
    """
    if secret is None:
        secret = get_token_secret()
        if not secret:
            _warn_empty_secret()
    data = f"{script_id}:{timestamp}:{secret}"
    h = 0
    for unit in _utf16_units(data):
        h = _to_int32((h << 5) - h + unit)
    return _to_base36(abs(h))


@functools.lru_cache(maxsize=1)
def _warn_empty_secret() -> None:
    logger.warning("script_token_secret_missing")


def _utf16_units(data: str):
    raw = data.encode("utf-16-le")
    for i in range(0, len(raw), 2):
        yield raw[i] | (raw[i + 1] << 8)


def _to_int32(value: int) -> int:
    value &= 0xFFFFFFFF
    return value - 0x100000000 if value & 0x80000000 else value


def _to_base36(value: int) -> str:
    if value == 0:
        return "0"
    digits = []
    while value:
        value, rem = divmod(value, 36)
        digits.append(_BASE36[rem])
    return "".join(reversed(digits))
