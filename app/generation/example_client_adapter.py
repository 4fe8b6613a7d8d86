"""Example generation client adapter.

Use this module as a reference when implementing new provider adapters.
Implement BaseGenerationClient and register the provider in GenerationClientFactory.
"""

from app.generation.client_base import BaseGenerationClient
from app.generation.models import ChatMessage


class ExampleClientAdapter(BaseGenerationClient):
    """Example adapter that echoes the question back as a canned reply.

    No network calls. Useful for local development and tests.
    """

    CONTEXT_PREVIEW_CHARS = 500

    def generate(self, messages: list[ChatMessage], context: str) -> str:
        last = messages[-1].content if messages else ""
        if context:
            return (
                f"Based on the provided documents, I can help you with: {last}. \n\n"
                "Context from documents:\n"
                f"{context[: self.CONTEXT_PREVIEW_CHARS]}...\n\n"
                "This is a mock response. Please integrate with your preferred AI service."
            )
        return (
            f"I understand you're asking about: {last}. "
            "This is a mock response. Please integrate with your preferred AI service."
        )
