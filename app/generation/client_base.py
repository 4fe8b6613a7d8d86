from abc import ABC, abstractmethod

from app.generation.models import ChatMessage


class BaseGenerationClient(ABC):
    """Contract for provider-specific reply generation clients."""

    @abstractmethod
    def generate(self, messages: list[ChatMessage], context: str) -> str:
        """Return the assistant reply for the conversation and document context."""
