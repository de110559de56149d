"""
Video browsing APIs backed by the YouTube Data API.
"""

import logging
from typing import Annotated, List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from dreamdesk.api.deps import get_youtube_service
from dreamdesk.models.video import Video, VideoSearchResult
from dreamdesk.services.errors import NotConfiguredError, UpstreamError
from dreamdesk.services.youtube_service import YouTubeService

logger = logging.getLogger(__name__)
router = APIRouter()

MaxResults = Annotated[int, Query(alias="maxResults", ge=1, le=50)]


def _http_error(e: Exception) -> HTTPException:
    if isinstance(e, NotConfiguredError):
        return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=e.message)
    return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to fetch videos")


@router.get("/search", response_model=VideoSearchResult, summary="Search videos")
async def search_videos(
    youtube: Annotated[YouTubeService, Depends(get_youtube_service)],
    q: Annotated[str, Query(min_length=1)],
    max_results: MaxResults = 20,
    page_token: Annotated[Optional[str], Query(alias="pageToken")] = None,
) -> VideoSearchResult:
    try:
        return await youtube.search_videos(q, max_results=max_results, page_token=page_token)
    except (NotConfiguredError, UpstreamError) as e:
        raise _http_error(e)


@router.get("/trending", response_model=List[Video], summary="Trending videos")
async def trending_videos(
    youtube: Annotated[YouTubeService, Depends(get_youtube_service)],
    max_results: MaxResults = 20,
    region_code: Annotated[str, Query(alias="regionCode", min_length=2, max_length=2)] = "US",
) -> List[Video]:
    try:
        return await youtube.get_trending_videos(max_results=max_results, region_code=region_code)
    except (NotConfiguredError, UpstreamError) as e:
        raise _http_error(e)


@router.get("/category/{category_id}", response_model=List[Video], summary="Popular videos in a category")
async def category_videos(
    category_id: str,
    youtube: Annotated[YouTubeService, Depends(get_youtube_service)],
    max_results: MaxResults = 20,
) -> List[Video]:
    try:
        return await youtube.get_videos_by_category(category_id, max_results=max_results)
    except (NotConfiguredError, UpstreamError) as e:
        raise _http_error(e)


@router.get("/{video_id}", response_model=Video, summary="Video details")
async def video_details(
    video_id: str,
    youtube: Annotated[YouTubeService, Depends(get_youtube_service)],
) -> Video:
    try:
        video = await youtube.get_video_details(video_id)
    except (NotConfiguredError, UpstreamError) as e:
        raise _http_error(e)
    if video is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Video not found")
    return video
