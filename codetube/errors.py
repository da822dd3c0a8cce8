"""
Exceptions raised while handling an analysis request.

Each error knows the HTTP status it maps to, so the route layer can render
any of them the same way.
"""
from __future__ import annotations

from typing import Optional


class AnalyzerError(Exception):
    """Base class for every failure the /analyze-code route reports."""

    status_code: int = 500

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        details: Optional[str] = None,
    ):
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        self.details = details
        super().__init__(message)


class InvalidRequest(AnalyzerError):
    """Code or language missing, empty or unsupported."""

    status_code = 400


class AnalysisProviderError(AnalyzerError):
    """Gemini answered with an error, could not be reached, or returned no text."""


class AnalysisParseError(AnalyzerError):
    """Gemini answered, but its text is not a JSON analysis object."""

    def __init__(self, message: str, raw_response: str, details: Optional[str] = None):
        super().__init__(message, status_code=500, details=details)
        self.raw_response = raw_response


class VideoProviderError(AnalyzerError):
    """YouTube answered with an error or could not be reached."""


class InternalError(AnalyzerError):
    """Anything else that went wrong while handling the request."""
