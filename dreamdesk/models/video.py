"""Flat video records mapped from the YouTube Data API."""

from typing import List, Optional

from pydantic import Field

from dreamdesk.models.user import CamelModel


class Thumbnails(CamelModel):
    default: str = ""
    medium: str = ""
    high: str = ""


class Video(CamelModel):
    id: str
    title: str = ""
    description: str = ""
    channel_title: str = ""
    channel_id: str = ""
    published_at: str = ""
    thumbnail: Thumbnails = Field(default_factory=Thumbnails)
    duration: Optional[str] = None
    view_count: Optional[str] = None
    view_count_formatted: Optional[str] = None
    like_count: Optional[str] = None
    comment_count: Optional[str] = None
    category_id: Optional[str] = None
    tags: Optional[List[str]] = None
    embed_url: str = ""
    watch_url: str = ""


class VideoSearchResult(CamelModel):
    videos: List[Video] = Field(default_factory=list)
    next_page_token: Optional[str] = None
    total_results: int = 0
