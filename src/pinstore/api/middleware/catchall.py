import logging
import traceback
from datetime import datetime, timezone

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import JSONResponse

from pinstore.app.env import is_prod

logger = logging.getLogger(__name__)


class CatchAllExceptionMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request, call_next):
        try:
            return await call_next(request)
        except Exception as exc:
            logger.error(f"{type(exc).__name__} on {request.url.path} (500): {exc}", exc_info=True)
            content = {
                "error": str(exc) or type(exc).__name__,
                "timestamp": datetime.now(timezone.utc).isoformat(),
            }
            if not is_prod():
                content["details"] = "".join(traceback.format_exception(exc))
            return JSONResponse(status_code=500, content=content)
