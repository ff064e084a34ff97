from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from starlette.datastructures import UploadFile

from pinstore.exceptions import InvalidRequestError

from .client import UploadProxy

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Upload proxy"])


def get_upload_proxy(request: Request) -> UploadProxy:
    return request.app.state.upload_proxy


@router.post(
    "/proxy-upload",
    summary="Forward a multipart upload to WebHash",
    responses={
        400: {"description": "No file found in request"},
        500: {"description": "Missing API key, transport failure or unparsable upstream response"},
    },
)
async def proxy_upload(request: Request, proxy: UploadProxy = Depends(get_upload_proxy)):
    """Relay a ``multipart/form-data`` body with a ``file`` field to the WebHash API.

    Example:
        ```bash
        curl -X POST http://localhost:8000/api/proxy-upload -F "file=@photo.png"
        ```
    """
    proxy.require_api_key()

    body = await request.body()
    form = await request.form()
    try:
        file = form.get("file")
        if not isinstance(file, UploadFile):
            logger.error("No file found in request")
            raise InvalidRequestError("No file found in request")
        logger.info(
            "Uploading file: name=%s type=%s size=%s", file.filename, file.content_type, file.size
        )
    finally:
        await form.close()

    data = await proxy.forward(body, request.headers.get("content-type", ""))
    return JSONResponse(content=data)
