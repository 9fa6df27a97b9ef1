"""
Выдача скриптов с whitelist (внутренняя библиотека).
Decision (access) и execution (wrapper) разделены; контракт через AccessDecision.
"""
from app.loader.access import authorize, evaluate_access, evaluate_script, reconcile_expired
from app.loader.errors import (
    AuthorizationError,
    InternalError,
    NotFoundError,
    ScriptLoaderError,
    StoreError,
    ValidationError,
)
from app.loader.generator import ThemeColor, generate_loader_script, loader_filename
from app.loader.models import AccessDecision, DecisionKind, DeliveryResult
from app.loader.token import current_timestamp, generate_token
from app.loader.wrapper import wrap_script

__all__ = [
    "AccessDecision",
    "DecisionKind",
    "DeliveryResult",
    "ThemeColor",
    "authorize",
    "evaluate_access",
    "evaluate_script",
    "reconcile_expired",
    "generate_token",
    "current_timestamp",
    "wrap_script",
    "generate_loader_script",
    "loader_filename",
    "ScriptLoaderError",
    "ValidationError",
    "NotFoundError",
    "AuthorizationError",
    "StoreError",
    "InternalError",
]
