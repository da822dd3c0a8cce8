"""
Gemini LLM provider for code analysis.
"""
from __future__ import annotations

import asyncio
import json
import re
from typing import Any, Optional

import httpx
from google import genai
from google.genai import errors as genai_errors
from google.genai import types
from pydantic import ValidationError

from codetube.config import Settings, logger
from codetube.errors import AnalysisParseError, AnalysisProviderError
from codetube.models import AnalysisResult
from codetube.prompts import build_analysis_prompt


FENCED_JSON = re.compile(r"```(?:json)?\s*\n?(.*?)\n?```", re.DOTALL)


def _error_body(details: Any) -> str:
    if isinstance(details, (dict, list)):
        return json.dumps(details)
    return str(details)


def extract_text(response: types.GenerateContentResponse) -> str:
    """
    Return the text of the first part of the first candidate.

    Raises:
        AnalysisProviderError: If that part is missing. When Gemini explains
            why (a prompt block or an abnormal finish), that explanation is
            the error details.
    """
    candidates = response.candidates or []
    if candidates:
        content = candidates[0].content
        parts = (content.parts if content else None) or []
        if parts and parts[0].text is not None:
            return parts[0].text

    reason = None
    feedback = response.prompt_feedback
    if feedback and feedback.block_reason:
        reason = feedback.block_reason_message or f"Prompt blocked: {feedback.block_reason}"
    elif candidates and candidates[0].finish_reason:
        candidate = candidates[0]
        reason = candidate.finish_message or f"Finish reason: {candidate.finish_reason}"

    if reason:
        logger.error("Gemini returned no content: %s", reason)
        raise AnalysisProviderError("Gemini API returned an error.", details=reason)

    logger.error("Unexpected Gemini response structure")
    raise AnalysisProviderError("Gemini API did not return expected content.",
                                details="unexpected response structure")


def parse_analysis(text: str) -> AnalysisResult:
    """
    Parse model output as an AnalysisResult.

    The text is tried as JSON first; if that fails, the body of a fenced
    code block is tried. Nothing is filled in for the caller.

    Raises:
        AnalysisParseError: Carrying the raw text when no candidate parses
            to a JSON object of the right shape.
    """
    candidates = [text.strip()]
    match = FENCED_JSON.search(text)
    if match:
        candidates.append(match.group(1).strip())

    last_error: Exception | None = None
    for candidate in candidates:
        try:
            data = json.loads(candidate)
        except json.JSONDecodeError as exc:
            last_error = exc
            continue
        try:
            return AnalysisResult.model_validate(data)
        except ValidationError as exc:
            last_error = exc
            break

    logger.error("Failed to parse Gemini JSON: %s", last_error)
    logger.debug("Raw Gemini response: %s", text[:500])
    raise AnalysisParseError(
        "Failed to parse Gemini response.",
        raw_response=text,
        details=str(last_error),
    )


class GeminiProvider:
    """
    Gemini provider for code analysis.
    """

    def __init__(self, settings: Settings, client: Optional[genai.Client] = None):
        self._settings = settings
        self._model = settings.GEMINI_MODEL
        self._client = client
        if self._client is None:
            self._initialize()

    def _initialize(self) -> None:
        """Initialize Gemini client."""
        if not self._settings.GEMINI_API_KEY:
            logger.warning("GEMINI_API_KEY not configured")
            return
        self._client = genai.Client(api_key=self._settings.GEMINI_API_KEY)
        logger.info("Gemini client initialized (model=%s)", self._model)

    def is_available(self) -> bool:
        """Check if provider is available."""
        return self._client is not None

    @property
    def model_name(self) -> str:
        return self._model

    async def generate(self, prompt: str) -> str:
        """
        Send the prompt to Gemini and return the generated text.

        Raises:
            AnalysisProviderError: Missing key, error status, timeout,
                network failure or a response without text.
        """
        if not self._client:
            raise AnalysisProviderError(
                "Gemini provider not available.",
                status_code=503,
                details="GEMINI_API_KEY is not configured",
            )

        timeout = self._settings.REQUEST_TIMEOUT_SECONDS
        logger.info("Calling Gemini (model=%s)", self._model)
        try:
            response = await asyncio.wait_for(
                self._client.aio.models.generate_content(
                    model=self._model,
                    contents=[types.Content(role="user", parts=[types.Part(text=prompt)])],
                    config=types.GenerateContentConfig(
                        temperature=self._settings.TEMPERATURE,
                        response_mime_type="application/json",
                    ),
                ),
                timeout=timeout,
            )
        except asyncio.TimeoutError as exc:
            logger.error("Gemini API timeout after %ss", timeout)
            raise AnalysisProviderError(
                "Failed to analyze code with Gemini API.",
                status_code=504,
                details=f"Timed out after {timeout}s",
            ) from exc
        except genai_errors.APIError as exc:
            logger.error("Gemini API error (%s): %s", exc.code, exc.message)
            raise AnalysisProviderError(
                "Failed to analyze code with Gemini API.",
                status_code=exc.code or 500,
                details=_error_body(exc.details),
            ) from exc
        except httpx.HTTPError as exc:
            logger.error("Gemini API unreachable: %s", exc)
            raise AnalysisProviderError(
                "Failed to analyze code with Gemini API.",
                details=str(exc),
            ) from exc

        logger.info("Received response from Gemini")
        return extract_text(response)

    async def analyze(self, code: str, language: str) -> AnalysisResult:
        """
        Analyze a snippet with Gemini.

        Args:
            code: Source code to analyze
            language: Language tag of the snippet

        Returns:
            The parsed analysis
        """
        text = await self.generate(build_analysis_prompt(code, language))
        return parse_analysis(text)
