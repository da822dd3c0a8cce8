import json

import httpx
import pytest

from codetube.errors import VideoProviderError
from codetube.youtube_provider import YouTubeProvider, build_search_query, to_recommendation

from conftest import FakeYouTube, make_settings, video_item


@pytest.mark.parametrize("problem, query", [
    ("Binary Tree Height", "Binary Tree Height python tutorial"),
    (None, "python programming tutorial"),
    ("", "python programming tutorial"),
    ("   ", "python programming tutorial"),
])
def test_build_search_query(problem, query):
    assert build_search_query(problem, "python") == query


def test_to_recommendation_prefers_high_thumbnail():
    video = to_recommendation(video_item("abc123", "Loops"))

    assert video.video_url == "https://www.youtube.com/watch?v=abc123"
    assert video.thumbnail_url == "https://i.ytimg.com/vi/abc123/hqdefault.jpg"
    assert video.channelTitle == "Loops Channel"
    assert video.description == "All about Loops"


def test_to_recommendation_falls_back_to_smaller_thumbnail():
    item = video_item("abc123", "Loops")
    del item["snippet"]["thumbnails"]["high"]

    assert to_recommendation(item).thumbnail_url == "https://i.ytimg.com/vi/abc123/default.jpg"


async def test_search_keeps_provider_order():
    youtube = FakeYouTube(items=[
        video_item("id1", "First"),
        video_item("id2", "Second"),
        video_item("id3", "Third"),
    ])
    provider = YouTubeProvider(make_settings(), client=youtube.client())

    videos = await provider.search("Linear Iteration python tutorial")

    assert [v.title for v in videos] == ["First", "Second", "Third"]
    assert [v.video_url for v in videos] == [
        "https://www.youtube.com/watch?v=id1",
        "https://www.youtube.com/watch?v=id2",
        "https://www.youtube.com/watch?v=id3",
    ]


async def test_search_sends_query_and_result_cap():
    youtube = FakeYouTube()
    provider = YouTubeProvider(make_settings(), client=youtube.client())

    await provider.search("Binary Tree Height python tutorial")

    params = youtube.requests[0].url.params
    assert params["q"] == "Binary Tree Height python tutorial"
    assert params["maxResults"] == "5"
    assert params["type"] == "video"
    assert params["part"] == "snippet"
    assert params["key"] == "test-youtube-key"


async def test_search_without_items_returns_empty_list():
    youtube = FakeYouTube(items=[])
    provider = YouTubeProvider(make_settings(), client=youtube.client())

    assert await provider.search("anything") == []


async def test_search_error_status_is_reported_with_body():
    youtube = FakeYouTube(status_code=403, body='{"error": {"message": "quotaExceeded"}}')
    provider = YouTubeProvider(make_settings(), client=youtube.client())

    with pytest.raises(VideoProviderError) as exc_info:
        await provider.search("anything")

    assert exc_info.value.status_code == 403
    assert "quotaExceeded" in exc_info.value.details


async def test_search_unreachable_is_provider_error():
    def refuse(request):
        raise httpx.ConnectError("connection refused", request=request)

    client = httpx.AsyncClient(transport=httpx.MockTransport(refuse))
    provider = YouTubeProvider(make_settings(), client=client)

    with pytest.raises(VideoProviderError) as exc_info:
        await provider.search("anything")

    assert exc_info.value.status_code == 500


async def test_search_without_key_makes_no_request():
    youtube = FakeYouTube()
    provider = YouTubeProvider(make_settings(YOUTUBE_API_KEY=""), client=youtube.client())

    with pytest.raises(VideoProviderError) as exc_info:
        await provider.search("anything")

    assert exc_info.value.status_code == 503
    assert youtube.requests == []


async def test_close_releases_client():
    client = FakeYouTube().client()
    async with YouTubeProvider(make_settings(), client=client):
        pass

    assert client.is_closed


@pytest.mark.parametrize("body", [
    "[]",
    "not json",
    json.dumps({"items": [{"id": {"videoId": "x"}, "snippet": {"title": None}}]}),
    json.dumps({"items": ["x"]}),
])
async def test_search_malformed_success_body_is_provider_error(body):
    youtube = FakeYouTube(status_code=200, body=body)
    provider = YouTubeProvider(make_settings(), client=youtube.client())

    with pytest.raises(VideoProviderError) as exc_info:
        await provider.search("anything")

    assert exc_info.value.status_code == 502
    assert exc_info.value.details == body
