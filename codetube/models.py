"""
Pydantic models for the CodeTube API.
"""
from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field, field_validator


SUPPORTED_LANGUAGES = frozenset({
    "javascript", "python", "java", "csharp", "cpp", "ruby", "go",
})


class AnalyzeRequest(BaseModel):
    """Request payload for code analysis."""
    code: str = Field(..., description="Source code to analyze")
    language: str = Field(..., description="Language tag of the snippet")

    @field_validator("language")
    @classmethod
    def normalize_language(cls, v: str) -> str:
        return v.strip().lower()


class AlternativeImplementation(BaseModel):
    """Another way to write the analyzed code."""
    title: Optional[str] = Field(default=None, description="e.g. 'Recursive Solution'")
    code: Optional[str] = Field(default=None, description="Code of the alternative")


class AnalysisResult(BaseModel):
    """Analysis exactly as the model produced it. Missing keys stay None."""

    time_complexity: Optional[str] = None
    time_complexity_explanation: Optional[str] = None
    space_complexity: Optional[str] = None
    space_complexity_explanation: Optional[str] = None
    optimization_suggestions: Optional[list[str]] = None
    identified_problem: Optional[str] = None
    alternative_implementations: Optional[list[AlternativeImplementation]] = None


class VideoRecommendation(BaseModel):
    """One YouTube search hit."""
    title: str = ""
    channelTitle: str = ""
    thumbnail_url: str = ""
    video_url: str
    description: str = ""


class VideoSearchWarning(BaseModel):
    """Why youtube_videos is empty when the video search failed."""
    error: str
    details: Optional[str] = None
    status_code: int


class CombinedResponse(AnalysisResult):
    """Analysis merged with the recommended videos."""

    youtube_videos: list[VideoRecommendation] = Field(default_factory=list)
    video_error: Optional[VideoSearchWarning] = None


class ErrorResponse(BaseModel):
    """Error response."""
    error: str = Field(..., description="Error message")
    details: Optional[str] = Field(default=None, description="Additional error details")
    raw_response: Optional[str] = Field(default=None, description="Unparsed model output")
