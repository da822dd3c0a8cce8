"""
YouTube Data API provider for tutorial recommendations.
"""
from __future__ import annotations

from typing import Any, Optional

import httpx
from pydantic import ValidationError

from codetube.config import Settings, logger
from codetube.errors import VideoProviderError
from codetube.models import VideoRecommendation


WATCH_URL = "https://www.youtube.com/watch?v={video_id}"

THUMBNAIL_PREFERENCE = ("high", "medium", "default")


def build_search_query(identified_problem: Optional[str], language: str) -> str:
    """Search for the identified problem when there is one, else the language."""
    if identified_problem and identified_problem.strip():
        return f"{identified_problem} {language} tutorial"
    return f"{language} programming tutorial"


def _pick_thumbnail(thumbnails: dict[str, Any]) -> str:
    for size in THUMBNAIL_PREFERENCE:
        url = (thumbnails.get(size) or {}).get("url")
        if url:
            return url
    return ""


def to_recommendation(item: dict[str, Any]) -> VideoRecommendation:
    """Map one search.list item to a VideoRecommendation."""
    snippet = item.get("snippet") or {}
    video_id = (item.get("id") or {}).get("videoId", "")
    return VideoRecommendation(
        title=snippet.get("title", ""),
        channelTitle=snippet.get("channelTitle", ""),
        thumbnail_url=_pick_thumbnail(snippet.get("thumbnails") or {}),
        video_url=WATCH_URL.format(video_id=video_id),
        description=snippet.get("description", ""),
    )


class YouTubeProvider:
    """
    Searches YouTube for videos matching a free-text query.
    """

    def __init__(self, settings: Settings, client: Optional[httpx.AsyncClient] = None):
        self._settings = settings
        self._client = client
        if not settings.YOUTUBE_API_KEY:
            logger.warning("YOUTUBE_API_KEY not configured")

    def is_available(self) -> bool:
        return bool(self._settings.YOUTUBE_API_KEY)

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                timeout=httpx.Timeout(self._settings.REQUEST_TIMEOUT_SECONDS),
            )
        return self._client

    async def close(self) -> None:
        """Close HTTP client."""
        if self._client and not self._client.is_closed:
            await self._client.aclose()

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    async def search(self, query: str) -> list[VideoRecommendation]:
        """
        Run a video search.

        Args:
            query: Free-text search query

        Returns:
            Recommendations in the order YouTube ranked them

        Raises:
            VideoProviderError: Missing key, error status, timeout,
                network failure or a malformed success body.
        """
        if not self.is_available():
            raise VideoProviderError(
                "Failed to fetch YouTube videos.",
                status_code=503,
                details="YOUTUBE_API_KEY is not configured",
            )

        params = {
            "part": "snippet",
            "q": query,
            "type": "video",
            "maxResults": self._settings.YOUTUBE_MAX_RESULTS,
            "key": self._settings.YOUTUBE_API_KEY,
        }

        client = await self._get_client()
        logger.info("Calling YouTube API with query: %s", query)
        try:
            response = await client.get(self._settings.YOUTUBE_SEARCH_URL, params=params)
        except httpx.TimeoutException as exc:
            logger.error("YouTube API timeout: %s", exc)
            raise VideoProviderError(
                "Failed to fetch YouTube videos.",
                status_code=504,
                details=f"Timed out after {self._settings.REQUEST_TIMEOUT_SECONDS}s",
            ) from exc
        except httpx.HTTPError as exc:
            logger.error("YouTube API unreachable: %s", exc)
            raise VideoProviderError("Failed to fetch YouTube videos.", details=str(exc)) from exc

        logger.info("Received response from YouTube API. Status: %d", response.status_code)

        if not response.is_success:
            logger.error("YouTube API error: %s", response.text[:500])
            raise VideoProviderError(
                "Failed to fetch YouTube videos.",
                status_code=response.status_code,
                details=response.text,
            )

        try:
            payload = response.json()
            if not isinstance(payload, dict):
                raise TypeError(f"expected a JSON object, got {type(payload).__name__}")
            return [to_recommendation(item) for item in payload.get("items") or []]
        except (ValueError, AttributeError, TypeError, ValidationError) as exc:
            logger.error("Malformed YouTube API response: %s", exc)
            raise VideoProviderError(
                "Failed to fetch YouTube videos.",
                status_code=502,
                details=response.text,
            ) from exc
