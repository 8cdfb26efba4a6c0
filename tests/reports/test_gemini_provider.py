from __future__ import annotations

import json

import httpx
import pytest

from src.standly.standly.reports.providers import ChatMessage, GeminiProvider


def _provider(handler, api_key="key-123"):
    return GeminiProvider(api_key, "gemini-test", transport=httpx.MockTransport(handler))


def test_is_available_requires_key():
    assert GeminiProvider("", "m").is_available() is False
    assert GeminiProvider(" k ", "m").is_available() is True


def test_chat_completion_request_and_response():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["url"] = str(request.url)
        seen["key"] = request.headers["x-goog-api-key"]
        seen["body"] = json.loads(request.content)
        return httpx.Response(
            200,
            json={
                "candidates": [{"content": {"parts": [{"text": "Hello "}, {"text": "team"}]}}],
                "usageMetadata": {"promptTokenCount": 5, "candidatesTokenCount": 2, "totalTokenCount": 7},
            },
        )

    response = _provider(handler).chat_completion(
        [ChatMessage(role="system", content="Be brief."), ChatMessage(role="user", content="Hi")],
        max_tokens=50,
    )

    assert seen["url"].endswith("/models/gemini-test:generateContent")
    assert seen["key"] == "key-123"
    assert seen["body"]["systemInstruction"]["parts"][0]["text"] == "Be brief."
    assert seen["body"]["contents"] == [{"role": "user", "parts": [{"text": "Hi"}]}]
    assert seen["body"]["generationConfig"]["maxOutputTokens"] == 50
    assert response.content == "Hello team"
    assert response.total_tokens == 7


def test_chat_completion_raises_on_http_error():
    provider = _provider(lambda request: httpx.Response(500, json={"error": "down"}))
    with pytest.raises(httpx.HTTPStatusError):
        provider.chat_completion([ChatMessage(role="user", content="Hi")])


def test_chat_completion_without_candidates():
    provider = _provider(lambda request: httpx.Response(200, json={"candidates": []}))
    with pytest.raises(ValueError):
        provider.chat_completion([ChatMessage(role="user", content="Hi")])


def test_missing_key_raises():
    with pytest.raises(ValueError):
        GeminiProvider("", "m").chat_completion([ChatMessage(role="user", content="Hi")])


@pytest.mark.parametrize(
    "body",
    [
        [],
        {"candidates": ["oops"]},
        {"candidates": {"content": "x"}},
        {"candidates": [{"content": {"parts": "text"}}]},
    ],
)
def test_malformed_response_raises_value_error(body):
    provider = _provider(lambda request: httpx.Response(200, json=body))
    with pytest.raises(ValueError):
        provider.chat_completion([ChatMessage(role="user", content="Hi")])
