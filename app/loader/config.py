"""
Loader config: типизированная обёртка над app.core.config для токена, кеша и loader URL.
"""
from __future__ import annotations

from app.core.config import settings


def get_token_secret() -> str:
    return settings.script_token_secret or ""


def get_cache_control() -> str:
    return settings.loader_cache_control


def get_loader_base_url() -> str:
    return settings.loader_base_url
