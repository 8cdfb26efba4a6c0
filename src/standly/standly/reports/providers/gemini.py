"""
Google Gemini provider over the Generative Language REST API.
"""

import logging
from typing import Optional

import httpx

from .base import AbstractAIProvider, ChatMessage, ChatResponse

logger = logging.getLogger(__name__)


class GeminiProvider(AbstractAIProvider):
    """
    Calls ``models/<model>:generateContent`` with plain httpx requests.

    System messages become ``systemInstruction``; the rest map to
    ``user``/``model`` turns.
    """

    BASE_URL = "https://generativelanguage.googleapis.com/v1beta/models"
    DEFAULT_MODEL = "gemini-2.5-flash"

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        *,
        timeout: float = 60.0,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self._api_key = (api_key or "").strip()
        self._model = model or self.DEFAULT_MODEL
        self._timeout = httpx.Timeout(timeout, connect=10.0)
        self._transport = transport

    def is_available(self) -> bool:
        return bool(self._api_key)

    @property
    def model_name(self) -> str:
        return self._model

    def _payload(self, messages: list[ChatMessage], max_tokens: int, temperature: float) -> dict:
        system = [m.content for m in messages if m.role == "system"]
        contents = [
            {"role": "model" if m.role == "assistant" else "user", "parts": [{"text": m.content}]}
            for m in messages
            if m.role != "system"
        ]
        payload = {
            "contents": contents,
            "generationConfig": {"maxOutputTokens": max_tokens, "temperature": temperature},
        }
        if system:
            payload["systemInstruction"] = {"parts": [{"text": "\n\n".join(system)}]}
        return payload

    def chat_completion(
        self,
        messages: list[ChatMessage],
        max_tokens: int = 1024,
        temperature: float = 0.4,
    ) -> ChatResponse:
        if not self._api_key:
            raise ValueError("Gemini API key is not configured (set GEMINI_API_KEY)")

        url = f"{self.BASE_URL}/{self._model}:generateContent"
        headers = {"x-goog-api-key": self._api_key, "Content-Type": "application/json"}

        with httpx.Client(timeout=self._timeout, transport=self._transport) as client:
            response = client.post(url, json=self._payload(messages, max_tokens, temperature), headers=headers)
            response.raise_for_status()

        data = response.json()
        if not isinstance(data, dict):
            raise ValueError("Unexpected Gemini response: expected a JSON object")
        candidates = data.get("candidates") or []
        if not isinstance(candidates, list) or not candidates:
            raise ValueError("No candidates in Gemini response")

        first = candidates[0]
        content = first.get("content") if isinstance(first, dict) else None
        parts = content.get("parts") if isinstance(content, dict) else None
        if not isinstance(parts, list):
            raise ValueError("Unexpected Gemini response: candidate has no content parts")
        text = "".join(p.get("text", "") for p in parts if isinstance(p, dict)).strip()

        usage = data.get("usageMetadata")
        if not isinstance(usage, dict):
            usage = {}
        logger.debug("Gemini %s usage: %s", self._model, usage)
        return ChatResponse(
            content=text,
            model=data.get("modelVersion", self._model),
            input_tokens=int(usage.get("promptTokenCount", 0)),
            output_tokens=int(usage.get("candidatesTokenCount", 0)),
            total_tokens=int(usage.get("totalTokenCount", 0)),
        )
