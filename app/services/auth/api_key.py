"""
Admin API key check for the management routes (header X-Admin-Key).
"""
import hmac
import logging

from fastapi import Header, HTTPException, status

from app.core.config import settings

logger = logging.getLogger("auth")


def require_admin_api_key(x_admin_key: str | None = Header(None)) -> None:
    """503 if ADMIN_API_KEY is not configured, 401 on missing/wrong key."""
    expected = settings.admin_api_key
    if not expected:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Admin API is not configured",
        )
    if not x_admin_key or not hmac.compare_digest(x_admin_key, expected):
        logger.warning("admin_api_key_rejected")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid admin key",
        )
