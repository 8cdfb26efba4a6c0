"""Provider interface used by the weekly summary and the standup draft."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Literal

Role = Literal["system", "user", "assistant"]


@dataclass(frozen=True)
class ChatMessage:
    role: Role
    content: str


@dataclass(frozen=True)
class ChatResponse:
    content: str
    model: str
    input_tokens: int = 0
    output_tokens: int = 0
    total_tokens: int = 0


class AbstractAIProvider(ABC):
    """A text model behind one call.

    Implementations raise on transport errors and on replies they cannot
    read; ``ReportService`` turns those into its fixed fallback texts.
    """

    @abstractmethod
    def chat_completion(
        self,
        messages: list[ChatMessage],
        max_tokens: int = 1024,
        temperature: float = 0.4,
    ) -> ChatResponse:
        raise NotImplementedError

    @abstractmethod
    def is_available(self) -> bool:
        """False when no API key is configured."""
        raise NotImplementedError

    @property
    @abstractmethod
    def model_name(self) -> str:
        raise NotImplementedError
