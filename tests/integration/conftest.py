import os
import uuid
from collections.abc import Generator

import pytest

from app.config.settings import Settings
from app.database.connection import close_pool, get_connection, init_pool
from app.database.models import DocumentRecord, NewDocument
from app.database.repositories.documents_repository import DocumentsRepository
from app.ingestion.exceptions import MetadataPersistError


def _test_settings() -> Settings:
    os.environ.setdefault("DB_DATABASE", "docpipe_test")
    return Settings()


@pytest.fixture(scope="session")
def test_settings() -> Settings:
    return _test_settings()


@pytest.fixture(scope="session", autouse=True)
def integration_pool(test_settings: Settings) -> Generator[None, None, None]:
    try:
        init_pool(test_settings)
        with get_connection() as conn:
            conn.execute("SELECT 1 FROM documents LIMIT 1")
    except Exception as e:
        close_pool()
        pytest.skip(f"PostgreSQL test DB not available: {e}. Set DB_* env to run integration tests")
    try:
        yield
    finally:
        close_pool()


@pytest.fixture
def integration_cleanup() -> Generator[list[str], None, None]:
    document_ids: list[str] = []
    yield document_ids
    if not document_ids:
        return
    with get_connection() as conn:
        with conn.cursor() as cur:
            cur.execute(
                "DELETE FROM documents WHERE id = ANY(%s::uuid[])",
                (document_ids,),
            )
        conn.commit()


@pytest.fixture
def owner_id() -> str:
    return str(uuid.uuid4())


@pytest.fixture
def seed_document(owner_id: str, integration_cleanup: list[str]) -> DocumentRecord:
    try:
        record = DocumentsRepository().insert(
            NewDocument(
                user_id=owner_id,
                title="Integration handbook",
                content="Employees accrue two vacation days per month of service.",
                file_path=f"{owner_id}/{uuid.uuid4().hex}.txt",
                file_size=57,
                file_type="text/plain",
            )
        )
    except MetadataPersistError as e:
        pytest.skip(f"Cannot seed documents table: {e}")
    integration_cleanup.append(record.id)
    return record
