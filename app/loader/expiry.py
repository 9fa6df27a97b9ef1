"""
Сроки действия записей whitelist: duration_type -> expires_at и проверка истечения.
"""
from __future__ import annotations

from datetime import datetime, timedelta, timezone

DURATION_DELTAS: dict[str, timedelta] = {
    "hourly": timedelta(hours=1),
    "daily": timedelta(days=1),
    "weekly": timedelta(days=7),
    "monthly": timedelta(days=30),
}


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: datetime) -> datetime:
    """Naive значения (SQLite отдаёт DateTime без tz) считаются UTC; aware переводятся в UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def compute_expires_at(duration_type: str, now: datetime | None = None) -> datetime | None:
    """None для unlimited, иначе now + длительность. Неизвестный тип -> ValueError."""
    if duration_type == "unlimited":
        return None
    try:
        delta = DURATION_DELTAS[duration_type]
    except KeyError:
        raise ValueError(f"Unknown duration type: {duration_type}") from None
    return as_utc(now or utcnow()) + delta


def is_expired(duration_type: str, expires_at: datetime | None, now: datetime | None = None) -> bool:
    if duration_type == "unlimited" or expires_at is None:
        return False
    return as_utc(expires_at) < as_utc(now or utcnow())
