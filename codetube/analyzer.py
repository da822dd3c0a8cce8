"""
Code analyzer: Gemini analysis followed by a YouTube tutorial search.
"""
from __future__ import annotations

from typing import Optional

from codetube.config import Settings, logger
from codetube.errors import AnalyzerError, InternalError, InvalidRequest, VideoProviderError
from codetube.gemini_provider import GeminiProvider
from codetube.models import (
    SUPPORTED_LANGUAGES,
    AnalyzeRequest,
    CombinedResponse,
    VideoRecommendation,
    VideoSearchWarning,
)
from codetube.youtube_provider import YouTubeProvider, build_search_query


def validate_request(request: AnalyzeRequest) -> None:
    """Reject the request before any outbound call is made."""
    if not request.code or not request.code.strip() or not request.language:
        raise InvalidRequest("Code and language are required.")
    if request.language not in SUPPORTED_LANGUAGES:
        raise InvalidRequest(
            "Unsupported language.",
            details=f"Expected one of: {', '.join(sorted(SUPPORTED_LANGUAGES))}",
        )


class CodeAnalyzer:
    """
    Runs one analysis request end to end.

    Holds no per-request state, so one instance serves every request.
    """

    def __init__(
        self,
        settings: Settings,
        gemini: Optional[GeminiProvider] = None,
        youtube: Optional[YouTubeProvider] = None,
    ):
        self._settings = settings
        self.gemini = gemini or GeminiProvider(settings)
        self.youtube = youtube or YouTubeProvider(settings)

    async def close(self) -> None:
        await self.youtube.close()

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    async def _find_videos(
        self, query: str
    ) -> tuple[list[VideoRecommendation], Optional[VideoSearchWarning]]:
        try:
            return await self.youtube.search(query), None
        except VideoProviderError as exc:
            if self._settings.VIDEO_ERRORS_FATAL:
                raise
            logger.warning("Returning analysis without videos: %s", exc.message)
            warning = VideoSearchWarning(
                error=exc.message,
                details=exc.details,
                status_code=exc.status_code,
            )
            return [], warning

    async def analyze(self, request: AnalyzeRequest) -> CombinedResponse:
        """
        Analyze code and attach tutorial videos.

        Args:
            request: Code and its language tag

        Returns:
            The model's analysis merged with the video recommendations

        Raises:
            InvalidRequest: Code or language missing or unsupported
            AnalysisProviderError: Gemini failed or returned no text
            AnalysisParseError: Gemini's text is not an analysis object
            VideoProviderError: Video search failed and VIDEO_ERRORS_FATAL is set
            InternalError: Anything unexpected
        """
        validate_request(request)

        try:
            analysis = await self.gemini.analyze(request.code, request.language)
            logger.info("Identified problem: %s", analysis.identified_problem)

            query = build_search_query(analysis.identified_problem, request.language)
            videos, warning = await self._find_videos(query)
            logger.info("Found %d videos", len(videos))

            return CombinedResponse(
                **analysis.model_dump(),
                youtube_videos=videos,
                video_error=warning,
            )
        except AnalyzerError:
            raise
        except Exception as exc:
            logger.exception("Unexpected analysis failure")
            raise InternalError(
                "Failed to analyze code or fetch recommendations.",
                details=str(exc),
            ) from exc
