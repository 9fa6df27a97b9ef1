"""
Main FastAPI application for the Script Loader API.
Serves health, script loader, captcha key, admin API and metrics.
"""
import logging
import time
from uuid import uuid4

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from app.core.config import settings
from app.core.logging import configure_logging
from app.api.routes import admin, health, script_loader, turnstile
from app.utils.metrics import router as metrics_router


configure_logging()
logger = logging.getLogger("http")

app = FastAPI(
    title="Script Loader API",
    description="Whitelist-gated script delivery and management API",
    version="1.0.0",
)

# CORS: loader вызывается из игрового клиента, поэтому по умолчанию "*"
origins = settings.cors_origins_list or ["*"]
app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials="*" not in origins,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def request_id_and_access_log(request: Request, call_next):
    """Request id from the incoming header (or a new uuid4), echoed back; one access line per request."""
    header = settings.request_id_header
    request_id = request.headers.get(header) or str(uuid4())
    started = time.perf_counter()
    response = await call_next(request)
    response.headers[header] = request_id
    logger.info(
        "http_request",
        extra={
            "request_id": request_id,
            "method": request.method,
            "path": request.url.path,
            "status_code": response.status_code,
            "latency_ms": round((time.perf_counter() - started) * 1000, 2),
        },
    )
    return response


# Routers
app.include_router(health.router, tags=["health"])
app.include_router(script_loader.router)
app.include_router(turnstile.router)
app.include_router(admin.router)
app.include_router(metrics_router)
