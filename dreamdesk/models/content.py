"""
Content items owned by one user: notes, business ideas, library resources.

Each kind has a stored model plus create/update request schemas. Update
schemas are all-optional; only fields the client sends are written.
"""

from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import Field

from dreamdesk.models.user import CamelModel


class IdeaStatus(str, Enum):
    IDEA = "idea"
    RESEARCH = "research"
    PLANNING = "planning"
    DEVELOPMENT = "development"
    LAUNCHED = "launched"


class ResourceType(str, Enum):
    ARTICLE = "article"
    VIDEO = "video"
    BOOK = "book"
    PODCAST = "podcast"
    TOOL = "tool"
    COURSE = "course"
    IMAGE = "image"
    OTHER = "other"


class ContentItem(CamelModel):
    """Fields every content item carries."""

    id: str
    user_id: str
    tags: List[str] = Field(default_factory=list)
    created_at: datetime
    updated_at: datetime


class NoteCreate(CamelModel):
    title: str = Field(min_length=1)
    content: str = ""
    tags: List[str] = Field(default_factory=list)
    audio_url: Optional[str] = None


class NoteUpdate(CamelModel):
    title: Optional[str] = Field(default=None, min_length=1)
    content: Optional[str] = None
    tags: Optional[List[str]] = None
    audio_url: Optional[str] = None


class Note(ContentItem):
    title: str
    content: str = ""
    audio_url: Optional[str] = None


class BusinessIdeaCreate(CamelModel):
    title: str = Field(min_length=1)
    description: str = ""
    category: str = ""
    target_market: str = ""
    feasibility_score: int = Field(default=5, ge=1, le=10)
    status: IdeaStatus = IdeaStatus.IDEA
    tags: List[str] = Field(default_factory=list)


class BusinessIdeaUpdate(CamelModel):
    title: Optional[str] = Field(default=None, min_length=1)
    description: Optional[str] = None
    category: Optional[str] = None
    target_market: Optional[str] = None
    feasibility_score: Optional[int] = Field(default=None, ge=1, le=10)
    status: Optional[IdeaStatus] = None
    tags: Optional[List[str]] = None


class BusinessIdea(ContentItem):
    title: str
    description: str = ""
    category: str = ""
    target_market: str = ""
    feasibility_score: int = Field(default=5, ge=1, le=10)
    status: IdeaStatus = IdeaStatus.IDEA


class LibraryResourceCreate(CamelModel):
    title: str = Field(min_length=1)
    url: str = ""
    description: str = ""
    type: ResourceType = ResourceType.OTHER
    category: str = ""
    tags: List[str] = Field(default_factory=list)
    is_favorite: bool = False


class LibraryResourceUpdate(CamelModel):
    title: Optional[str] = Field(default=None, min_length=1)
    url: Optional[str] = None
    description: Optional[str] = None
    type: Optional[ResourceType] = None
    category: Optional[str] = None
    tags: Optional[List[str]] = None
    is_favorite: Optional[bool] = None


class LibraryResource(ContentItem):
    title: str
    url: str = ""
    description: str = ""
    type: ResourceType = ResourceType.OTHER
    category: str = ""
    is_favorite: bool = False
