"""
FastAPI dependencies for shared services.

The store and blob store are built once in the app lifespan and kept on
app.state; routes receive them through these functions, which tests
replace with app.dependency_overrides.
"""

from typing import Annotated

from fastapi import Depends, Request

from dreamdesk.services.blob_store import BlobStore
from dreamdesk.services.content_service import IDEAS, NOTES, RESOURCES, ContentKind, ContentService
from dreamdesk.services.document_store import DocumentStore
from dreamdesk.services.fal_service import FalService, fal_service
from dreamdesk.services.llm_service import QuoteService, quote_service
from dreamdesk.services.openai_service import OpenAIService, openai_service
from dreamdesk.services.user_sync import UserSyncService
from dreamdesk.services.youtube_service import YouTubeService, youtube_service


def get_document_store(request: Request) -> DocumentStore:
    return request.app.state.document_store


def get_blob_store(request: Request) -> BlobStore:
    return request.app.state.blob_store


def get_user_sync(store: Annotated[DocumentStore, Depends(get_document_store)]) -> UserSyncService:
    return UserSyncService(store)


def content_service_dependency(kind: ContentKind):
    """Build a dependency returning the ContentService for one kind."""

    def dependency(
        store: Annotated[DocumentStore, Depends(get_document_store)],
        user_sync: Annotated[UserSyncService, Depends(get_user_sync)],
    ) -> ContentService:
        return ContentService(store, user_sync, kind)

    return dependency


get_notes_service = content_service_dependency(NOTES)
get_ideas_service = content_service_dependency(IDEAS)
get_resources_service = content_service_dependency(RESOURCES)


def get_openai_service() -> OpenAIService:
    return openai_service


def get_fal_service() -> FalService:
    return fal_service


def get_quote_service() -> QuoteService:
    return quote_service


def get_youtube_service() -> YouTubeService:
    return youtube_service
