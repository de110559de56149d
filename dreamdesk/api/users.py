"""
User profile APIs.

POST /users/sync: session bootstrap; pulls the identity from Clerk and syncs the profile.
GET /users/me: stored profile (404 until the first sync).
GET /users/me/identity: identity-provider view of the signed-in user.
PATCH /users/me/preferences: merge preference changes.
"""

import logging
from typing import Annotated, Optional

from fastapi import APIRouter, Depends, HTTPException, status

from dreamdesk.api.auth import fetch_identity_user, get_current_user_metadata, require_authenticated
from dreamdesk.api.deps import get_user_sync
from dreamdesk.models.user import PreferencesUpdate, UserMetadata, UserProfile
from dreamdesk.services.user_sync import UserSyncService

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post("/sync", response_model=UserProfile, summary="Sync profile with identity provider")
async def sync_current_user(
    user_id: Annotated[str, Depends(require_authenticated)],
    user_sync: Annotated[UserSyncService, Depends(get_user_sync)],
) -> UserProfile:
    identity = await fetch_identity_user(user_id)
    return await user_sync.sync_profile(identity)


@router.get("/me", response_model=UserProfile, summary="Get my profile")
async def get_my_profile(
    user_id: Annotated[str, Depends(require_authenticated)],
    user_sync: Annotated[UserSyncService, Depends(get_user_sync)],
) -> UserProfile:
    profile = await user_sync.get_profile(user_id)
    if profile is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Profile not found")
    return profile


@router.get("/me/identity", response_model=UserMetadata, summary="Get my identity-provider metadata")
async def get_my_identity(
    user_id: Annotated[str, Depends(require_authenticated)],
    metadata: Annotated[Optional[UserMetadata], Depends(get_current_user_metadata)],
) -> UserMetadata:
    if metadata is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized")
    return metadata


@router.patch("/me/preferences", response_model=UserProfile, summary="Update my preferences")
async def update_my_preferences(
    body: PreferencesUpdate,
    user_id: Annotated[str, Depends(require_authenticated)],
    user_sync: Annotated[UserSyncService, Depends(get_user_sync)],
) -> UserProfile:
    profile = await user_sync.update_preferences(user_id, body)
    if profile is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Profile not found")
    return profile
