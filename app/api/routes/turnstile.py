"""
Public Turnstile site key for the captcha widget (verification itself is external).
"""
from fastapi import APIRouter
from fastapi.responses import JSONResponse

from app.core.config import settings


router = APIRouter(tags=["captcha"])


@router.get("/turnstile-key")
def get_turnstile_key() -> JSONResponse:
    site_key = (settings.turnstile_site_key or "").strip()
    if not site_key:
        return JSONResponse({"error": "Turnstile not configured"}, status_code=500)
    return JSONResponse({"siteKey": site_key})
