"""
Blob APIs.

GET /blobs/{path}: public download (the stable URL returned by uploads).
GET /api/blobs?prefix=...: list the caller's blobs under a folder.
DELETE /api/blobs/{path}: delete one of the caller's blobs.

User blobs live under "<folder>/<user id>/...", so ownership is a check on
the second path segment.
"""

import logging
from typing import Annotated, List

from fastapi import APIRouter, Depends, HTTPException, Response, status

from dreamdesk.api.auth import require_authenticated
from dreamdesk.api.deps import get_blob_store
from dreamdesk.services.blob_store import BlobInfo, BlobStore, normalize_path

logger = logging.getLogger(__name__)
public_router = APIRouter()
router = APIRouter()


def _owned_path(path: str, user_id: str) -> str:
    try:
        normalized = normalize_path(path)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    if normalized.split("/")[1:2] != [user_id]:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Blob not found")
    return normalized


@public_router.get("/blobs/{path:path}", summary="Download a blob")
async def download_blob(path: str, blobs: Annotated[BlobStore, Depends(get_blob_store)]) -> Response:
    try:
        data, content_type = await blobs.read(path)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except FileNotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Blob not found")
    return Response(content=data, media_type=content_type or "application/octet-stream")


@router.get("", response_model=List[BlobInfo], summary="List my blobs")
async def list_blobs(
    prefix: str,
    user_id: Annotated[str, Depends(require_authenticated)],
    blobs: Annotated[BlobStore, Depends(get_blob_store)],
) -> List[BlobInfo]:
    return await blobs.list(_owned_path(prefix, user_id))


@router.delete("/{path:path}", status_code=status.HTTP_204_NO_CONTENT, summary="Delete one of my blobs")
async def delete_blob(
    path: str,
    user_id: Annotated[str, Depends(require_authenticated)],
    blobs: Annotated[BlobStore, Depends(get_blob_store)],
) -> Response:
    try:
        await blobs.delete(_owned_path(path, user_id))
    except FileNotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Blob not found")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
