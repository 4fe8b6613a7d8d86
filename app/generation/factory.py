from app.config.settings import Settings
from app.generation.client_base import BaseGenerationClient
from app.generation.example_client_adapter import ExampleClientAdapter
from app.generation.openai_client_adapter import OpenAIClientAdapter


class GenerationClientFactory:
    """Creates the configured reply generation client."""

    SUPPORTED_PROVIDERS = ("example", "openai", "openai_compatible")

    @classmethod
    def create(cls, settings: Settings) -> BaseGenerationClient:
        provider = settings.generation_provider.lower()
        if provider == "example":
            return ExampleClientAdapter()
        if provider not in cls.SUPPORTED_PROVIDERS:
            raise ValueError(
                f"Unknown generation provider '{provider}'. "
                f"Choose from: {list(cls.SUPPORTED_PROVIDERS)}"
            )
        return OpenAIClientAdapter(
            api_key=settings.generation_openai_api_key,
            model=settings.generation_openai_model_name,
            temperature=settings.generation_temperature,
            timeout_seconds=settings.generation_timeout_seconds,
            base_url=cls._resolve_base_url(provider, settings),
        )

    @classmethod
    def _resolve_base_url(cls, provider: str, settings: Settings) -> str | None:
        if provider == "openai":
            return None
        url = (settings.generation_openai_compatible_base_url or "").strip()
        if not url:
            raise ValueError(
                "generation_openai_compatible_base_url is required for "
                "generation_provider=openai_compatible"
            )
        return url
