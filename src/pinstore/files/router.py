from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Request

from .models import FileCreateRequest
from .service import FileMetadataService

router = APIRouter(prefix="/api", tags=["Files"])


def get_file_service(request: Request) -> FileMetadataService:
    return request.app.state.file_service


@router.post(
    "/upload",
    summary="Store metadata for a pinned file",
    responses={
        400: {"description": "Missing wallet address, missing fields or invalid size"},
        503: {"description": "Database unavailable"},
    },
)
async def create_file(
    payload: FileCreateRequest,
    service: FileMetadataService = Depends(get_file_service),
):
    """Persist a file record and add its size to the wallet's storage usage.

    Example:
        ```bash
        curl -X POST http://localhost:8000/api/upload \\
          -H "Content-Type: application/json" \\
          -d '{"fileName": "a.pdf", "cid": "Qm...", "size": "2048",
               "mimeType": "application/pdf", "walletAddress": "0xabc"}'
        ```
    """
    file = await service.create(payload)
    return {"success": True, "file": file}


@router.get("/upload", summary="List files stored by a wallet")
async def list_files(
    walletAddress: Optional[str] = None,
    service: FileMetadataService = Depends(get_file_service),
):
    files = await service.list(walletAddress)
    return {"success": True, "files": files}


@router.delete(
    "/upload",
    summary="Delete a file record",
    responses={404: {"description": "File not found or unauthorized"}},
)
async def delete_file(
    cid: Optional[str] = None,
    walletAddress: Optional[str] = None,
    service: FileMetadataService = Depends(get_file_service),
):
    await service.delete(cid, walletAddress)
    return {"success": True}


@router.get("/storage-usage", summary="Total bytes recorded for a wallet")
async def storage_usage(
    walletAddress: Optional[str] = None,
    service: FileMetadataService = Depends(get_file_service),
):
    total = await service.usage(walletAddress)
    return {"success": True, "walletAddress": walletAddress, "totalStorageUsed": total}
