"""
Script loader endpoint: GET /script-loader/{script_id}; the last path segment is the id.
Every response is text/plain; failures are a single "-- Access Denied: ..." line.
"""
import logging
import time

from fastapi import APIRouter, Depends, Request, Response
from fastapi.responses import PlainTextResponse
from sqlalchemy.orm import Session

from app.db.session import get_db
from app.loader.config import get_cache_control
from app.loader.errors import InternalError, ScriptLoaderError, StoreError, ValidationError, denial_line
from app.loader.token import current_timestamp, generate_token
from app.services.script_loader.service import ScriptLoaderService
from app.utils.metrics import script_deliveries_total, script_delivery_duration_seconds


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/script-loader", tags=["script-loader"])

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": (
        "authorization, x-client-info, apikey, content-type, x-roblox-player-id, roblox-id, x-heartbeat-token"
    ),
    "Access-Control-Allow-Methods": "GET, OPTIONS",
}

# Порядок важен: первый непустой источник побеждает
PLAYER_ID_HEADERS = ("x-roblox-player-id", "roblox-id")
PLAYER_ID_QUERY_PARAM = "player_id"


def get_player_id(request: Request) -> str | None:
    """Caller identity: headers first, then ?player_id=. Empty values mean anonymous."""
    for header in PLAYER_ID_HEADERS:
        value = (request.headers.get(header) or "").strip()
        if value:
            return value
    value = (request.query_params.get(PLAYER_ID_QUERY_PARAM) or "").strip()
    return value or None


def denied_response(exc: ScriptLoaderError) -> PlainTextResponse:
    return PlainTextResponse(
        denial_line(exc.denial),
        status_code=exc.status_code,
        headers=CORS_HEADERS,
    )


# Как и у исходного эндпоинта, любой метод кроме OPTIONS обрабатывается как выдача
DELIVERY_METHODS = ["GET", "POST", "PUT", "PATCH", "DELETE"]


def script_id_from_path(script_path: str) -> str:
    """script_id is the last path segment; "a/b" -> "b", "a/" -> ""."""
    return script_path.rsplit("/", 1)[-1].strip()


@router.options("")
@router.options("/{script_path:path}")
def script_loader_preflight() -> Response:
    """CORS preflight: empty body, permissive headers."""
    return Response(status_code=200, headers=CORS_HEADERS)


@router.api_route("", methods=DELIVERY_METHODS, response_class=PlainTextResponse)
def load_script_without_id() -> PlainTextResponse:
    logger.info("script_loader_missing_id", extra={"status_code": 400})
    script_deliveries_total.labels(outcome=ValidationError.outcome).inc()
    return denied_response(ValidationError("missing script id"))


@router.api_route("/{script_path:path}", methods=DELIVERY_METHODS, response_class=PlainTextResponse)
def load_script(script_path: str, request: Request, db: Session = Depends(get_db)) -> PlainTextResponse:
    script_id = script_id_from_path(script_path)
    player_id = get_player_id(request)
    logger.info(
        "script_loader_request",
        extra={"script_id": script_id, "player_id": player_id or "anonymous"},
    )
    started = time.perf_counter()
    try:
        result = ScriptLoaderService(db).deliver(script_id, player_id)
    except StoreError as exc:
        logger.error(
            "script_loader_store_error",
            extra={
                "script_id": script_id,
                "player_id": player_id,
                "operation": exc.operation,
                "status_code": exc.status_code,
            },
        )
        script_deliveries_total.labels(outcome=exc.outcome).inc()
        return denied_response(exc)
    except ScriptLoaderError as exc:
        logger.info(
            "script_loader_denied",
            extra={
                "script_id": script_id,
                "player_id": player_id,
                "decision": exc.outcome,
                "status_code": exc.status_code,
            },
        )
        script_deliveries_total.labels(outcome=exc.outcome).inc()
        return denied_response(exc)
    except Exception:
        logger.exception("script_loader_error", extra={"script_id": script_id, "player_id": player_id})
        exc = InternalError()
        script_deliveries_total.labels(outcome=exc.outcome).inc()
        return denied_response(exc)
    finally:
        script_delivery_duration_seconds.observe(time.perf_counter() - started)

    script_deliveries_total.labels(outcome="delivered").inc()
    return PlainTextResponse(
        result.body,
        status_code=200,
        headers={
            **CORS_HEADERS,
            "Cache-Control": get_cache_control(),
            # пересчитывается в момент ответа: может отличаться от зашитого в тело на одну секунду
            "X-Script-Token": generate_token(script_id, current_timestamp()),
        },
    )
