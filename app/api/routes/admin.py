"""
Admin API: scripts, whitelist, execution logs, dashboard stats, loader download.
Owner identity comes from the external auth provider and is passed as owner_id.
"""
from fastapi import APIRouter, Body, Depends, HTTPException, Query, Response
from sqlalchemy.orm import Session

from app.db.session import get_db
from app.loader.errors import NotFoundError, StoreError, ValidationError
from app.loader.generator import generate_loader_script, loader_filename, loader_url
from app.schemas.scripts import (
    DashboardStatsOut,
    LoaderIn,
    ScriptCreateIn,
    ScriptDetailOut,
    ScriptOut,
    ScriptUpdateIn,
)
from app.schemas.whitelist import ExecutionLogOut, WhitelistEntryOut, WhitelistGrantIn
from app.services.auth.api_key import require_admin_api_key
from app.services.dashboard.service import DashboardService
from app.services.execution_logs.service import ExecutionLogService
from app.services.scripts.service import ScriptService
from app.services.whitelist.service import WhitelistService

router = APIRouter(prefix="/admin", tags=["admin"], dependencies=[Depends(require_admin_api_key)])


def _http_error(exc: Exception) -> HTTPException:
    if isinstance(exc, ValidationError):
        return HTTPException(status_code=400, detail=str(exc))
    if isinstance(exc, NotFoundError):
        return HTTPException(status_code=404, detail=str(exc))
    return HTTPException(status_code=500, detail="Database error")


def _get_script_or_404(svc: ScriptService, script_id: str):
    script = svc.get(script_id)
    if script is None:
        raise HTTPException(status_code=404, detail="Script not found")
    return script


# ---------- Scripts ----------
@router.get("/scripts", response_model=list[ScriptOut])
def scripts_list(owner_id: str = Query(..., min_length=1), db: Session = Depends(get_db)):
    try:
        return ScriptService(db).list_for_owner(owner_id)
    except StoreError as e:
        raise _http_error(e)


@router.post("/scripts", response_model=ScriptDetailOut, status_code=201)
def scripts_create(payload: ScriptCreateIn = Body(...), db: Session = Depends(get_db)):
    data = payload.model_dump(exclude={"owner_id"})
    try:
        script = ScriptService(db).create(payload.owner_id, data)
    except (ValidationError, StoreError) as e:
        raise _http_error(e)
    out = ScriptDetailOut.model_validate(script)
    return out.model_copy(update={"loader_url": loader_url(script.id)})


@router.get("/scripts/{script_id}", response_model=ScriptDetailOut)
def scripts_get(script_id: str, db: Session = Depends(get_db)):
    try:
        script = _get_script_or_404(ScriptService(db), script_id)
    except StoreError as e:
        raise _http_error(e)
    out = ScriptDetailOut.model_validate(script)
    return out.model_copy(update={"loader_url": loader_url(script.id)})


@router.put("/scripts/{script_id}", response_model=ScriptDetailOut)
def scripts_update(script_id: str, payload: ScriptUpdateIn = Body(...), db: Session = Depends(get_db)):
    try:
        script = ScriptService(db).update(script_id, payload.model_dump(exclude_unset=True))
    except (ValidationError, NotFoundError, StoreError) as e:
        raise _http_error(e)
    out = ScriptDetailOut.model_validate(script)
    return out.model_copy(update={"loader_url": loader_url(script.id)})


@router.delete("/scripts/{script_id}", status_code=204)
def scripts_delete(script_id: str, db: Session = Depends(get_db)):
    try:
        ScriptService(db).delete(script_id)
    except (NotFoundError, StoreError) as e:
        raise _http_error(e)
    return Response(status_code=204)


@router.post("/scripts/{script_id}/loader")
def scripts_loader(script_id: str, payload: LoaderIn | None = Body(None), db: Session = Depends(get_db)):
    """Скачать .lua loader для скрипта (цвет темы из тела запроса)."""
    payload = payload or LoaderIn()
    try:
        script = _get_script_or_404(ScriptService(db), script_id)
    except StoreError as e:
        raise _http_error(e)
    content = generate_loader_script(script.name, script.id, theme_color=payload.theme_color)
    filename = loader_filename(payload.filename or script.name)
    return Response(
        content=content,
        media_type="text/plain",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.get("/scripts/{script_id}/executions", response_model=list[ExecutionLogOut])
def scripts_executions(
    script_id: str,
    limit: int = Query(100, ge=1, le=1000),
    db: Session = Depends(get_db),
):
    try:
        _get_script_or_404(ScriptService(db), script_id)
        return ExecutionLogService(db).list_for_script(script_id, limit=limit)
    except StoreError as e:
        raise _http_error(e)


# ---------- Whitelist ----------
@router.get("/scripts/{script_id}/whitelist", response_model=list[WhitelistEntryOut])
def whitelist_list(script_id: str, db: Session = Depends(get_db)):
    try:
        _get_script_or_404(ScriptService(db), script_id)
        return WhitelistService(db).list_for_script(script_id)
    except StoreError as e:
        raise _http_error(e)


@router.post("/scripts/{script_id}/whitelist", response_model=WhitelistEntryOut, status_code=201)
def whitelist_grant(script_id: str, payload: WhitelistGrantIn = Body(...), db: Session = Depends(get_db)):
    try:
        _get_script_or_404(ScriptService(db), script_id)
        return WhitelistService(db).grant(script_id, **payload.model_dump())
    except (ValidationError, StoreError) as e:
        raise _http_error(e)


@router.delete("/whitelist/{entry_id}", status_code=204)
def whitelist_revoke(entry_id: str, db: Session = Depends(get_db)):
    try:
        WhitelistService(db).revoke(entry_id)
    except (NotFoundError, StoreError) as e:
        raise _http_error(e)
    return Response(status_code=204)


# ---------- Dashboard ----------
@router.get("/stats", response_model=DashboardStatsOut)
def dashboard_stats(owner_id: str = Query(..., min_length=1), db: Session = Depends(get_db)):
    try:
        return DashboardService(db).stats(owner_id)
    except StoreError as e:
        raise _http_error(e)
