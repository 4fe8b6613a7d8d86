from dataclasses import dataclass
from pathlib import Path

from app.auth.factory import AuthProviderFactory
from app.auth.service import AuthService
from app.config.settings import Settings
from app.conversations.service import ConversationService
from app.database.repositories.conversations_repository import ConversationsRepository
from app.database.repositories.documents_repository import DocumentsRepository
from app.database.repositories.profiles_repository import ProfilesRepository
from app.documents.service import DocumentService
from app.extraction.dispatcher import ExtractionDispatcher
from app.extraction.registry import ExtractorRegistryFactory
from app.generation.client_base import BaseGenerationClient
from app.generation.factory import GenerationClientFactory
from app.ingestion.service import DocumentIngestionService
from app.ratelimit.limiter import RateLimiters, RateLimitersFactory
from app.retrieval.context_assembler import ContextAssembler
from app.storage.factory import ObjectStorageFactory
from app.storage.lifecycle import StorageLifecycleManager


@dataclass
class Services:
    """Everything the HTTP layer calls into, built once at startup."""

    auth: AuthService
    rate_limiters: RateLimiters
    lifecycle: StorageLifecycleManager
    ingestion: DocumentIngestionService
    documents: DocumentService
    conversations: ConversationService
    assembler: ContextAssembler
    generation: BaseGenerationClient


class ServicesFactory:
    @classmethod
    def create(cls, settings: Settings) -> Services:
        documents_repo = DocumentsRepository()
        lifecycle = StorageLifecycleManager(
            ObjectStorageFactory.create(settings),
            bucket=settings.storage_bucket,
            scratch_dir=Path(settings.scratch_dir),
        )
        dispatcher = ExtractionDispatcher(
            ExtractorRegistryFactory.create(settings),
            min_chars=settings.min_extracted_chars,
        )
        return Services(
            auth=AuthService(AuthProviderFactory.create(settings), ProfilesRepository()),
            rate_limiters=RateLimitersFactory.create(settings),
            lifecycle=lifecycle,
            ingestion=DocumentIngestionService(dispatcher, lifecycle, documents_repo),
            documents=DocumentService(
                documents_repo,
                lifecycle,
                signed_url_expiry_seconds=settings.storage_signed_url_expiry_seconds,
            ),
            conversations=ConversationService(ConversationsRepository()),
            assembler=ContextAssembler(documents_repo),
            generation=GenerationClientFactory.create(settings),
        )
