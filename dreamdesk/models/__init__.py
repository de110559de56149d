"""Pydantic models for stored documents and API schemas."""

from dreamdesk.models.content import (
    BusinessIdea,
    BusinessIdeaCreate,
    BusinessIdeaUpdate,
    IdeaStatus,
    LibraryResource,
    LibraryResourceCreate,
    LibraryResourceUpdate,
    Note,
    NoteCreate,
    NoteUpdate,
    ResourceType,
)
from dreamdesk.models.user import (
    IdentityUser,
    Preferences,
    PreferencesUpdate,
    StatKind,
    UserMetadata,
    UserProfile,
    UserStats,
)

__all__ = [
    "BusinessIdea",
    "BusinessIdeaCreate",
    "BusinessIdeaUpdate",
    "IdeaStatus",
    "IdentityUser",
    "LibraryResource",
    "LibraryResourceCreate",
    "LibraryResourceUpdate",
    "Note",
    "NoteCreate",
    "NoteUpdate",
    "Preferences",
    "PreferencesUpdate",
    "ResourceType",
    "StatKind",
    "UserMetadata",
    "UserProfile",
    "UserStats",
]
