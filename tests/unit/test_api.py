from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest
from fastapi.testclient import TestClient

from app.api.app import create_app
from app.api.services import Services
from app.auth.base import BaseAuthProvider
from app.auth.models import UserIdentity
from app.auth.service import AuthService
from app.config.settings import Settings
from app.conversations.service import ConversationService
from app.database.models import DocumentRecord, NewDocument, ProfileRecord
from app.database.repositories.conversations_repository import ConversationsRepository
from app.database.repositories.documents_repository import DocumentsRepository
from app.database.repositories.profiles_repository import ProfilesRepository
from app.documents.service import DocumentService
from app.extraction.dispatcher import ExtractionDispatcher
from app.extraction.models import ContentFamily
from app.extraction.registry import ExtractorRegistry
from app.extraction.text_extractor import PlainTextExtractor
from app.generation.example_client_adapter import ExampleClientAdapter
from app.ingestion.service import DocumentIngestionService
from app.ratelimit.limiter import RateLimitersFactory
from app.retrieval.context_assembler import ContextAssembler
from app.storage.lifecycle import StorageLifecycleManager
from app.storage.local_adapter import LocalObjectStorage

DOC_ID = "9b2f7c7e-0000-4000-8000-000000000001"
CONVERSATION_ID = "3c8a1d52-0000-4000-8000-000000000003"
TEXT_BODY = b"Travel policy: economy class for flights under six hours, business above."

TOKENS = {
    "approved-token": UserIdentity(id="approved-user", email="a@example.com"),
    "pending-token": UserIdentity(id="pending-user", email="p@example.com"),
}
PROFILES = {
    "approved-user": ProfileRecord(id="approved-user", status="approved", role="user"),
    "pending-user": ProfileRecord(id="pending-user", status="pending", role="user"),
}


def _auth(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


def _inserted(document: NewDocument) -> DocumentRecord:
    return DocumentRecord(
        id=DOC_ID,
        user_id=document.user_id,
        title=document.title,
        content=document.content,
        file_path=document.file_path,
        file_size=document.file_size,
        file_type=document.file_type,
        is_company_wide=document.is_company_wide,
    )


@pytest.fixture()
def documents_repo() -> MagicMock:
    repo = MagicMock(spec=DocumentsRepository)
    repo.insert.side_effect = _inserted
    return repo


@pytest.fixture()
def conversations_repo() -> MagicMock:
    return MagicMock(spec=ConversationsRepository)


@pytest.fixture()
def lifecycle(settings: Settings) -> StorageLifecycleManager:
    return StorageLifecycleManager(
        LocalObjectStorage(Path(settings.storage_local_root)),
        settings.storage_bucket,
        Path(settings.scratch_dir),
    )


@pytest.fixture()
def services(
    settings: Settings,
    lifecycle: StorageLifecycleManager,
    documents_repo: MagicMock,
    conversations_repo: MagicMock,
) -> Services:
    provider = MagicMock(spec=BaseAuthProvider)
    provider.resolve.side_effect = TOKENS.get
    profiles = MagicMock(spec=ProfilesRepository)
    profiles.find_by_user_id.side_effect = PROFILES.get
    dispatcher = ExtractionDispatcher(ExtractorRegistry({ContentFamily.TEXT: PlainTextExtractor()}))

    return Services(
        auth=AuthService(provider, profiles),
        rate_limiters=RateLimitersFactory.create(settings),
        lifecycle=lifecycle,
        ingestion=DocumentIngestionService(dispatcher, lifecycle, documents_repo),
        documents=DocumentService(documents_repo, lifecycle),
        conversations=ConversationService(conversations_repo),
        assembler=ContextAssembler(documents_repo),
        generation=ExampleClientAdapter(),
    )


@pytest.fixture()
def client(settings: Settings, services: Services) -> TestClient:
    return TestClient(create_app(settings, services))


def _stored_files(settings: Settings) -> list[Path]:
    return [path for path in Path(settings.storage_local_root).rglob("*") if path.is_file()]


def _scratch_files(settings: Settings) -> list[Path]:
    scratch = Path(settings.scratch_dir)
    return list(scratch.iterdir()) if scratch.exists() else []


class TestInfoRoutes:
    def test_health(self, client: TestClient) -> None:
        response = client.get("/health")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert body["storage"] == "local"
        assert "X-Request-ID" in response.headers

    def test_supported_formats(self, client: TestClient) -> None:
        body = client.get("/supported-formats").json()

        assert body["formats"]["pdf"] == ["application/pdf"]
        assert "text/plain" in body["formats"]["documents"]
        assert body["maxFileSizes"]["images"] == 8 * 1024 * 1024

    def test_unknown_route(self, client: TestClient) -> None:
        response = client.get("/nope")

        assert response.status_code == 404
        assert response.json()["message"] == "Route /nope not found"


class TestAuthentication:
    def test_missing_token(self, client: TestClient) -> None:
        response = client.get("/api/documents")

        assert response.status_code == 401
        assert response.headers["WWW-Authenticate"] == "Bearer"
        assert response.json()["message"] == "Unauthorized - No token provided"

    def test_repeated_failures_hit_auth_limit(self, client: TestClient) -> None:
        for _ in range(5):
            assert client.get("/api/documents", headers=_auth("bogus")).status_code == 401

        response = client.get("/api/documents", headers=_auth("bogus"))

        assert response.status_code == 429
        assert int(response.headers["Retry-After"]) >= 1
        assert response.json()["retryAfter"] >= 1

    def test_successful_requests_do_not_count_against_auth_limit(
        self, client: TestClient, documents_repo: MagicMock
    ) -> None:
        documents_repo.list_documents.return_value = []
        for _ in range(7):
            assert client.get("/api/documents", headers=_auth("approved-token")).status_code == 200

    def test_pending_account_forbidden(self, client: TestClient) -> None:
        response = client.get("/api/documents", headers=_auth("pending-token"))

        assert response.status_code == 403
        assert response.json()["message"] == "Account not approved"


class TestGlobalRateLimit:
    def test_rejects_over_budget(self, settings: Settings, services: Services) -> None:
        settings.rate_limit_global_max = 2
        services.rate_limiters = RateLimitersFactory.create(settings)
        client = TestClient(create_app(settings, services))

        assert client.get("/health").status_code == 200
        assert client.get("/health").status_code == 200
        response = client.get("/health")

        assert response.status_code == 429
        assert response.json()["error"] == "Rate limit exceeded"


class TestUploadDocument:
    def test_pending_user_upload_leaves_nothing_behind(
        self, client: TestClient, settings: Settings, documents_repo: MagicMock
    ) -> None:
        response = client.post(
            "/api/documents",
            headers=_auth("pending-token"),
            files={"file": ("note.txt", b"0123456789", "text/plain")},
            data={"title": "note"},
        )

        assert response.status_code == 403
        documents_repo.insert.assert_not_called()
        assert _stored_files(settings) == []
        assert _scratch_files(settings) == []

    def test_approved_upload(
        self, client: TestClient, settings: Settings, lifecycle: StorageLifecycleManager
    ) -> None:
        response = client.post(
            "/api/documents",
            headers=_auth("approved-token"),
            files={"file": ("policy.txt", TEXT_BODY, "text/plain")},
            data={"title": "Travel policy", "isCompanyWide": "true"},
        )

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["document"]["is_company_wide"] is True
        assert body["document"]["content"] == TEXT_BODY.decode()
        assert lifecycle.object_exists(body["document"]["file_path"])
        assert _scratch_files(settings) == []

    def test_invalid_extension_rejected(self, client: TestClient, settings: Settings) -> None:
        response = client.post(
            "/api/documents",
            headers=_auth("approved-token"),
            files={"file": ("policy.pdf", TEXT_BODY, "text/plain")},
            data={"title": "Travel policy"},
        )

        assert response.status_code == 400
        assert response.json()["details"] == [
            "File extension .pdf doesn't match the file type"
        ]
        assert _stored_files(settings) == []


class TestDocuments:
    def test_list_documents(self, client: TestClient, documents_repo: MagicMock) -> None:
        documents_repo.list_documents.return_value = []

        response = client.get(
            "/api/documents?companyWideOnly=true", headers=_auth("approved-token")
        )

        assert response.status_code == 200
        assert response.json() == {"documents": []}
        assert documents_repo.list_documents.call_args.kwargs["company_wide_only"] is True

    def test_delete_foreign_document_forbidden(
        self, client: TestClient, documents_repo: MagicMock
    ) -> None:
        documents_repo.find_by_id.return_value = DocumentRecord(
            id=DOC_ID,
            user_id="someone-else",
            title="t",
            content="c",
            file_path="someone-else/1-1.txt",
            file_size=1,
            file_type="text/plain",
        )

        response = client.delete(f"/api/documents/{DOC_ID}", headers=_auth("approved-token"))

        assert response.status_code == 403
        documents_repo.delete.assert_not_called()

    def test_signed_url_for_unknown_path(
        self, client: TestClient, documents_repo: MagicMock
    ) -> None:
        documents_repo.find_by_file_path.return_value = None

        response = client.post(
            "/api/documents/url",
            headers=_auth("approved-token"),
            json={"filePath": "x/y.txt"},
        )

        assert response.status_code == 404

    def test_unexpected_error_is_500(
        self, settings: Settings, services: Services, documents_repo: MagicMock
    ) -> None:
        documents_repo.list_documents.side_effect = RuntimeError("boom")
        client = TestClient(create_app(settings, services), raise_server_exceptions=False)

        response = client.get("/api/documents", headers=_auth("approved-token"))

        assert response.status_code == 500
        assert response.json()["message"] == "An unexpected error occurred"
        assert "traceback" not in response.json()
        assert "X-Request-ID" in response.headers

    def test_unexpected_error_is_logged_as_completed_request(
        self, settings: Settings, services: Services, documents_repo: MagicMock
    ) -> None:
        documents_repo.list_documents.side_effect = RuntimeError("boom")
        client = TestClient(create_app(settings, services), raise_server_exceptions=False)

        with patch("app.api.app.Log") as mock_log:
            response = client.get("/api/documents", headers=_auth("approved-token"))

        completed = [
            call.kwargs
            for call in mock_log.info.call_args_list
            if call.args == ("Request completed",)
        ]
        assert completed == [
            {
                "request_id": response.headers["X-Request-ID"],
                "method": "GET",
                "path": "/api/documents",
                "status": 500,
                "duration_ms": completed[0]["duration_ms"],
            }
        ]
        mock_log.error.assert_called_once()


class TestExtract:
    def test_extracts_text_file(
        self, client: TestClient, settings: Settings, lifecycle: StorageLifecycleManager
    ) -> None:
        response = client.post(
            "/extract", files={"file": ("policy.txt", TEXT_BODY, "text/plain")}
        )

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["extractedText"] == TEXT_BODY.decode()
        assert body["wordCount"] == len(TEXT_BODY.split())
        assert body["processingTime"].endswith("ms")
        assert lifecycle.object_exists(body["storageInfo"]["path"])
        assert _scratch_files(settings) == []

    def test_missing_file(self, client: TestClient) -> None:
        response = client.post("/extract")

        assert response.status_code == 400
        assert response.json()["message"] == "No file uploaded"

    def test_unsupported_type(self, client: TestClient, settings: Settings) -> None:
        response = client.post(
            "/extract", files={"file": ("a.zip", b"PK\x03\x04", "application/zip")}
        )

        assert response.status_code == 400
        assert response.json()["error"] == "Unsupported file type"
        assert _stored_files(settings) == []


class TestChat:
    def test_reply_with_sources(self, client: TestClient, documents_repo: MagicMock) -> None:
        documents_repo.find_many.return_value = [
            DocumentRecord(
                id=DOC_ID,
                user_id="approved-user",
                title="Travel policy",
                content=TEXT_BODY.decode(),
                file_path="approved-user/1-1.txt",
                file_size=len(TEXT_BODY),
                file_type="text/plain",
            )
        ]

        response = client.post(
            "/api/chat/stream",
            headers=_auth("approved-token"),
            json={
                "messages": [{"role": "user", "content": "Which class for long flights?"}],
                "documentIds": [DOC_ID],
            },
        )

        assert response.status_code == 200
        body = response.json()
        assert body["response"].startswith("Based on the provided documents")
        assert body["sources"] == [
            {
                "documentId": DOC_ID,
                "documentTitle": "Travel policy",
                "similarity": 0.95,
                "content": TEXT_BODY.decode(),
            }
        ]

    def test_empty_messages_rejected(self, client: TestClient) -> None:
        response = client.post(
            "/api/chat/stream", headers=_auth("approved-token"), json={"messages": []}
        )

        assert response.status_code == 400
        assert response.json()["error"] == "Validation failed"


class TestGenerateTitle:
    def test_foreign_conversation_is_not_found(
        self, client: TestClient, conversations_repo: MagicMock
    ) -> None:
        conversations_repo.find_owner_id.return_value = "someone-else"

        response = client.post(
            "/api/conversations/generate-title",
            headers=_auth("approved-token"),
            json={
                "conversationId": CONVERSATION_ID,
                "messages": [{"role": "user", "content": "Plan the offsite"}],
            },
        )

        assert response.status_code == 404
        conversations_repo.update_title.assert_not_called()

    def test_owner_gets_title(self, client: TestClient, conversations_repo: MagicMock) -> None:
        conversations_repo.find_owner_id.return_value = "approved-user"

        response = client.post(
            "/api/conversations/generate-title",
            headers=_auth("approved-token"),
            json={
                "conversationId": CONVERSATION_ID,
                "messages": [{"role": "user", "content": "Plan the offsite"}],
            },
        )

        assert response.json() == {"title": "Plan the offsite"}
