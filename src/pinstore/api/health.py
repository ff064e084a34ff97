from __future__ import annotations

from fastapi import APIRouter, Request, Response
from fastapi.responses import JSONResponse

router = APIRouter(tags=["internal"])


@router.get("/ping", include_in_schema=False)
async def ping():
    return {"status": "ok"}


@router.get("/_db/health", include_in_schema=False)
async def db_health(request: Request, verbose: int = 0):
    connection = request.app.state.mongo  # type: ignore[attr-defined]
    ok = await connection.ping()
    if not verbose:
        return Response(status_code=200 if ok else 503)
    return JSONResponse(status_code=200 if ok else 503, content={"ok": ok, "database": connection.db_name})
