"""
Content APIs: notes, business ideas and library resources.

The three collections share one route layout, built by build_router:
GET "" (list), POST "" (create), GET/PATCH/DELETE "/{item_id}".
Fixed-path GET routes go in through collection_routes so "/{item_id}" does
not shadow them.
All routes act on the authenticated user's own items only.
"""

import logging
from datetime import datetime, timezone
from typing import Annotated, Callable, List, Optional, Type

from fastapi import APIRouter, Depends, File, Form, HTTPException, Response, UploadFile, status
from pydantic import BaseModel

from dreamdesk.api.auth import require_authenticated
from dreamdesk.api.deps import get_blob_store, get_ideas_service, get_notes_service, get_resources_service
from dreamdesk.config import get_settings
from dreamdesk.models.content import (
    BusinessIdea,
    BusinessIdeaCreate,
    BusinessIdeaUpdate,
    LibraryResource,
    LibraryResourceCreate,
    LibraryResourceUpdate,
    Note,
    NoteCreate,
    NoteUpdate,
)
from dreamdesk.services.blob_store import BlobStore
from dreamdesk.services.content_service import ContentNotFoundError, ContentService
from dreamdesk.services.idea_templates import suggest_idea

logger = logging.getLogger(__name__)


def build_router(
    item_model: Type[BaseModel],
    create_model: Type[BaseModel],
    update_model: Type[BaseModel],
    get_service: Callable[..., ContentService],
    collection_routes: Optional[Callable[[APIRouter], None]] = None,
) -> APIRouter:
    router = APIRouter()

    @router.get("", response_model=List[item_model], summary="List items")
    async def list_items(
        user_id: Annotated[str, Depends(require_authenticated)],
        service: Annotated[ContentService, Depends(get_service)],
        category: Optional[str] = None,
        q: Optional[str] = None,
    ):
        """Items owned by the user, newest update first. Optional category filter and text search."""
        return await service.list(user_id, category=category, search=q)

    @router.post("", status_code=status.HTTP_201_CREATED, response_model=item_model, summary="Create item")
    async def create_item(
        body: create_model,
        user_id: Annotated[str, Depends(require_authenticated)],
        service: Annotated[ContentService, Depends(get_service)],
    ):
        return await service.create(user_id, body)

    if collection_routes:
        collection_routes(router)

    @router.get("/{item_id}", response_model=item_model, summary="Get item")
    async def get_item(
        item_id: str,
        user_id: Annotated[str, Depends(require_authenticated)],
        service: Annotated[ContentService, Depends(get_service)],
    ):
        try:
            return await service.get(user_id, item_id)
        except ContentNotFoundError as e:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))

    @router.patch("/{item_id}", response_model=item_model, summary="Update item")
    async def update_item(
        item_id: str,
        body: update_model,
        user_id: Annotated[str, Depends(require_authenticated)],
        service: Annotated[ContentService, Depends(get_service)],
    ):
        try:
            return await service.update(user_id, item_id, body)
        except ContentNotFoundError as e:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))

    @router.delete("/{item_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Delete item")
    async def delete_item(
        item_id: str,
        user_id: Annotated[str, Depends(require_authenticated)],
        service: Annotated[ContentService, Depends(get_service)],
    ) -> Response:
        try:
            await service.delete(user_id, item_id)
        except ContentNotFoundError as e:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
        return Response(status_code=status.HTTP_204_NO_CONTENT)

    return router


def _idea_suggestion_route(router: APIRouter) -> None:
    @router.get("/suggestion", response_model=BusinessIdeaCreate, summary="Suggest a business idea")
    async def suggest(user_id: Annotated[str, Depends(require_authenticated)]):
        """A random starter idea, ready to POST back to the collection. Nothing is saved."""
        return suggest_idea()


notes_router = build_router(Note, NoteCreate, NoteUpdate, get_notes_service)
ideas_router = build_router(
    BusinessIdea, BusinessIdeaCreate, BusinessIdeaUpdate, get_ideas_service, collection_routes=_idea_suggestion_route
)
library_router = build_router(LibraryResource, LibraryResourceCreate, LibraryResourceUpdate, get_resources_service)


def _parse_tags(raw: str) -> List[str]:
    return [t.strip() for t in raw.split(",") if t.strip()]


@notes_router.post(
    "/voice",
    status_code=status.HTTP_201_CREATED,
    response_model=Note,
    summary="Create a note from a voice recording",
)
async def create_voice_note(
    user_id: Annotated[str, Depends(require_authenticated)],
    service: Annotated[ContentService, Depends(get_notes_service)],
    blobs: Annotated[BlobStore, Depends(get_blob_store)],
    audio: Annotated[UploadFile, File()],
    title: Annotated[str, Form(min_length=1)],
    content: Annotated[str, Form()] = "",
    tags: Annotated[str, Form()] = "",
):
    """
    Store the recording under voice-notes/{user}/ and create a note whose
    audioUrl points at it. content is usually the transcription.
    """
    data = await audio.read()
    max_bytes = get_settings().max_upload_size_mb * 1024 * 1024
    if len(data) > max_bytes:
        raise HTTPException(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            detail=f"File size exceeds {get_settings().max_upload_size_mb} MB",
        )
    timestamp = int(datetime.now(timezone.utc).timestamp() * 1000)
    path = f"voice-notes/{user_id}/voice-note-{timestamp}.webm"
    audio_url = await blobs.upload(path, data, content_type=audio.content_type or "audio/webm")
    return await service.create(
        user_id,
        NoteCreate(title=title, content=content, tags=_parse_tags(tags), audio_url=audio_url),
    )
