import httpx
import openai

from app.generation.client_base import BaseGenerationClient
from app.generation.exceptions import GenerationError, GenerationNetworkError
from app.generation.models import ChatMessage

SYSTEM_PROMPT = (
    "You are a helpful assistant answering questions about the user's documents. "
    "Use the document context when it is relevant and say so when it does not "
    "contain the answer."
)


def build_messages(messages: list[ChatMessage], context: str) -> list[dict[str, str]]:
    system_prompt = SYSTEM_PROMPT
    if context:
        system_prompt = f"{SYSTEM_PROMPT}\n\nDocument context:\n{context}"
    return [
        {"role": "system", "content": system_prompt},
        *({"role": message.role, "content": message.content} for message in messages),
    ]


class OpenAIClientAdapter(BaseGenerationClient):
    """Generation client built on the OpenAI-compatible chat API."""

    def __init__(
        self,
        *,
        api_key: str,
        model: str,
        temperature: float,
        timeout_seconds: int,
        base_url: str | None = None,
    ) -> None:
        self._client = openai.OpenAI(
            api_key=api_key,
            timeout=timeout_seconds,
            base_url=base_url,
        )
        self._model = model
        self._temperature = temperature

    def generate(self, messages: list[ChatMessage], context: str) -> str:
        try:
            response = self._client.chat.completions.create(
                model=self._model,
                temperature=self._temperature,
                messages=build_messages(messages, context),
            )
        except (openai.APIConnectionError, httpx.ConnectError, httpx.TimeoutException) as exc:
            raise GenerationNetworkError(
                f"AI provider network error: {exc}"
            ) from exc
        except openai.APIError as exc:
            raise GenerationNetworkError(
                f"AI provider API error: {exc}"
            ) from exc

        if not response.choices:
            raise GenerationError("AI returned no choices")
        content = response.choices[0].message.content
        if content is None:
            raise GenerationError("AI returned empty response")
        return content
