"""
YouTube Data API v3 client: search, trending, category and video details.

Search and list responses nest the useful fields under snippet /
contentDetails / statistics; they are flattened into Video records here.
"""

import logging
import re
from typing import Any, Dict, List, Optional

import httpx

from dreamdesk.config import get_settings
from dreamdesk.models.video import Thumbnails, Video, VideoSearchResult
from dreamdesk.services.errors import NotConfiguredError, UpstreamError

logger = logging.getLogger(__name__)

YOUTUBE_BASE_URL = "https://www.googleapis.com/youtube/v3"

_DURATION_RE = re.compile(r"PT(\d+H)?(\d+M)?(\d+S)?")


def parse_duration(duration: Optional[str]) -> str:
    """Turn "PT1H2M3S" into "1:02:03" and "PT4M13S" into "4:13"."""
    match = _DURATION_RE.search(duration or "")
    if not match:
        return "0:00"
    hours, minutes, seconds = ((g or "")[:-1] for g in match.groups())
    if hours:
        return f"{hours}:{minutes.rjust(2, '0')}:{seconds.rjust(2, '0')}"
    return f"{minutes or '0'}:{seconds.rjust(2, '0')}"


def format_view_count(count: Optional[str]) -> str:
    try:
        num = int(count or 0)
    except ValueError:
        return "0"
    if num >= 1_000_000:
        return f"{num / 1_000_000:.1f}M"
    if num >= 1_000:
        return f"{num / 1_000:.1f}K"
    return str(num)


def embed_url(video_id: str) -> str:
    return f"https://www.youtube.com/embed/{video_id}"


def watch_url(video_id: str) -> str:
    return f"https://www.youtube.com/watch?v={video_id}"


def _video_id(item: Dict[str, Any]) -> str:
    raw = item.get("id")
    if isinstance(raw, dict):
        return raw.get("videoId", "")
    return raw or ""


def map_video(item: Dict[str, Any], detailed: bool = False) -> Video:
    """Flatten one API item. detailed adds duration and statistics."""
    snippet = item.get("snippet") or {}
    thumbs = snippet.get("thumbnails") or {}
    video_id = _video_id(item)
    video = Video(
        id=video_id,
        title=snippet.get("title", ""),
        description=snippet.get("description", ""),
        channel_title=snippet.get("channelTitle", ""),
        channel_id=snippet.get("channelId", ""),
        published_at=snippet.get("publishedAt", ""),
        thumbnail=Thumbnails(
            default=(thumbs.get("default") or {}).get("url", ""),
            medium=(thumbs.get("medium") or {}).get("url", ""),
            high=(thumbs.get("high") or {}).get("url", ""),
        ),
        embed_url=embed_url(video_id),
        watch_url=watch_url(video_id),
    )
    if detailed:
        stats = item.get("statistics") or {}
        video.duration = parse_duration((item.get("contentDetails") or {}).get("duration"))
        video.view_count = stats.get("viewCount") or "0"
        video.view_count_formatted = format_view_count(video.view_count)
        video.like_count = stats.get("likeCount") or "0"
        video.comment_count = stats.get("commentCount") or "0"
        video.category_id = snippet.get("categoryId") or ""
        video.tags = snippet.get("tags") or []
    return video


class YouTubeService:
    def __init__(self, transport: Optional[httpx.AsyncBaseTransport] = None, timeout: float = 15.0):
        self.transport = transport
        self.timeout = timeout

    async def _get(self, endpoint: str, params: Dict[str, Any]) -> Dict[str, Any]:
        api_key = get_settings().youtube_api_key
        if not api_key:
            logger.error("YOUTUBE_API_KEY is not set")
            raise NotConfiguredError("YouTube API key not configured")
        query = {k: v for k, v in params.items() if v is not None}
        query["key"] = api_key
        async with httpx.AsyncClient(transport=self.transport, timeout=self.timeout) as client:
            try:
                response = await client.get(f"{YOUTUBE_BASE_URL}/{endpoint}", params=query)
            except httpx.RequestError as e:
                logger.error("YouTube request failed: %s", e)
                raise UpstreamError("Failed to fetch videos") from e
        if response.status_code != 200:
            logger.error("YouTube API error (%d): %s", response.status_code, response.text)
            raise UpstreamError("Failed to fetch videos", response.status_code, response.text)
        return response.json()

    async def search_videos(self, query: str, max_results: int = 20, page_token: Optional[str] = None) -> VideoSearchResult:
        data = await self._get(
            "search",
            {
                "part": "snippet",
                "type": "video",
                "q": query,
                "maxResults": max_results,
                "order": "relevance",
                "safeSearch": "moderate",
                "pageToken": page_token,
            },
        )
        return VideoSearchResult(
            videos=[map_video(item) for item in data.get("items") or []],
            next_page_token=data.get("nextPageToken"),
            total_results=(data.get("pageInfo") or {}).get("totalResults", 0),
        )

    async def get_video_details(self, video_id: str) -> Optional[Video]:
        data = await self._get("videos", {"part": "snippet,statistics,contentDetails", "id": video_id})
        items = data.get("items") or []
        if not items:
            return None
        return map_video(items[0], detailed=True)

    async def get_trending_videos(self, max_results: int = 20, region_code: str = "US") -> List[Video]:
        data = await self._get(
            "videos",
            {"part": "snippet", "chart": "mostPopular", "maxResults": max_results, "regionCode": region_code},
        )
        return [map_video(item) for item in data.get("items") or []]

    async def get_videos_by_category(self, category_id: str, max_results: int = 20) -> List[Video]:
        data = await self._get(
            "videos",
            {"part": "snippet", "chart": "mostPopular", "videoCategoryId": category_id, "maxResults": max_results},
        )
        return [map_video(item) for item in data.get("items") or []]


youtube_service = YouTubeService()
