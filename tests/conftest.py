import json
from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest
from google.genai import types

from codetube.analyzer import CodeAnalyzer
from codetube.config import Settings
from codetube.gemini_provider import GeminiProvider
from codetube.youtube_provider import YouTubeProvider


ANALYSIS = {
    "time_complexity": "O(n)",
    "time_complexity_explanation": "The loop body runs once per element.",
    "space_complexity": "O(1)",
    "space_complexity_explanation": "Only the loop counter is stored.",
    "optimization_suggestions": ["Print once with join instead of n separate calls."],
    "identified_problem": "Linear Iteration",
    "alternative_implementations": [
        {"title": "Single print", "code": "print(*range(n), sep='\\n')"},
    ],
}


def make_settings(**overrides) -> Settings:
    values = {
        "GEMINI_API_KEY": "test-gemini-key",
        "YOUTUBE_API_KEY": "test-youtube-key",
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


def gemini_response(text: str) -> types.GenerateContentResponse:
    return types.GenerateContentResponse(
        candidates=[
            types.Candidate(content=types.Content(role="model", parts=[types.Part(text=text)])),
        ],
    )


def video_item(video_id: str, title: str) -> dict:
    return {
        "id": {"kind": "youtube#video", "videoId": video_id},
        "snippet": {
            "title": title,
            "channelTitle": f"{title} Channel",
            "description": f"All about {title}",
            "thumbnails": {
                "default": {"url": f"https://i.ytimg.com/vi/{video_id}/default.jpg"},
                "high": {"url": f"https://i.ytimg.com/vi/{video_id}/hqdefault.jpg"},
            },
        },
    }


class FakeYouTube:
    """Records every search request and answers with a canned response."""

    def __init__(self, status_code: int = 200, items=None, body=None):
        self.status_code = status_code
        self.items = items if items is not None else []
        self.body = body
        self.requests: list[httpx.Request] = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.body is not None:
            return httpx.Response(self.status_code, text=self.body)
        return httpx.Response(self.status_code, json={"items": self.items})

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(self.handler))


def fake_genai_client(text: str = json.dumps(ANALYSIS), **kwargs) -> MagicMock:
    client = MagicMock()
    if "side_effect" in kwargs:
        client.aio.models.generate_content = AsyncMock(side_effect=kwargs["side_effect"])
    else:
        client.aio.models.generate_content = AsyncMock(return_value=gemini_response(text))
    return client


@pytest.fixture
def settings():
    return make_settings()


@pytest.fixture
def youtube():
    return FakeYouTube(items=[video_item("abc123", "Loops"), video_item("def456", "Iteration")])


@pytest.fixture
def genai_client():
    return fake_genai_client()


@pytest.fixture
def build_analyzer(settings):
    """Build a CodeAnalyzer over fake Gemini and YouTube backends."""

    def _build(genai_client, youtube, analyzer_settings=None):
        s = analyzer_settings or settings
        return CodeAnalyzer(
            s,
            gemini=GeminiProvider(s, client=genai_client),
            youtube=YouTubeProvider(s, client=youtube.client()),
        )

    return _build
