from .base import AbstractAIProvider, ChatMessage, ChatResponse
from .gemini import GeminiProvider

__all__ = ["AbstractAIProvider", "ChatMessage", "ChatResponse", "GeminiProvider"]
