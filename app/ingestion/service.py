from app.database.models import DocumentRecord, NewDocument
from app.database.repositories.documents_repository import DocumentsRepository
from app.extraction.dispatcher import ExtractionDispatcher
from app.extraction.exceptions import NoExtractorAvailableError
from app.extraction.models import UploadedFile
from app.ingestion.models import StoredExtraction
from app.logging.logger import Log
from app.storage.exceptions import StorageError
from app.storage.lifecycle import StorageLifecycleManager


class DocumentIngestionService:
    """Turns a staged upload into a durable object plus a document record.

    The object upload and the record insert form one logical transaction: a
    failed insert deletes the uploaded object before the error is raised.
    The staged scratch file is removed on every exit path.
    """

    def __init__(
        self,
        dispatcher: ExtractionDispatcher,
        lifecycle: StorageLifecycleManager,
        documents_repository: DocumentsRepository,
    ) -> None:
        self._dispatcher = dispatcher
        self._lifecycle = lifecycle
        self._documents = documents_repository

    def ingest_document(
        self,
        upload: UploadedFile,
        *,
        owner_id: str,
        title: str,
        is_company_wide: bool,
    ) -> DocumentRecord:
        """Extract, store and record an uploaded document.

        Raises:
            NoExtractorAvailableError: if the content type is not supported.
            StorageWriteError: if the object upload fails.
            MetadataPersistError: if the record insert fails (object already removed).
        """
        with self._lifecycle.scratch_file(upload.scratch_path):
            extraction = self._dispatcher.extract(upload)
            Log.info(
                "Extracted document text",
                filename=upload.original_name,
                chars=len(extraction.text),
                fallback=extraction.used_fallback,
            )

            stored = self._lifecycle.upload(
                upload.scratch_path,
                upload.original_name,
                upload.content_type,
                prefix=owner_id,
            )

            try:
                record = self._documents.insert(
                    NewDocument(
                        user_id=owner_id,
                        title=title,
                        content=extraction.text,
                        file_path=stored.key,
                        file_size=upload.size,
                        file_type=upload.content_type,
                        is_company_wide=is_company_wide,
                    )
                )
            except Exception as exc:
                Log.error(
                    "Document insert failed, removing uploaded object",
                    key=stored.key,
                    error=str(exc),
                )
                self._lifecycle.delete(stored.key)
                raise

        Log.info("Document record created", document_id=record.id, key=stored.key)
        return record

    def extract_and_store(self, upload: UploadedFile) -> StoredExtraction:
        """Keep the upload in storage and extract text from the stored copy.

        The stored object is removed again if it cannot be read back.

        Raises:
            NoExtractorAvailableError: if the content type is not supported.
            StorageError: if the upload or the download fails.
        """
        with self._lifecycle.scratch_file(upload.scratch_path):
            if not self._dispatcher.supports(upload.content_type):
                raise NoExtractorAvailableError(upload.content_type)

            stored = self._lifecycle.upload(
                upload.scratch_path,
                upload.original_name,
                upload.content_type,
            )
            try:
                with self._lifecycle.downloaded(stored.key) as local_copy:
                    result = self._dispatcher.extract(
                        UploadedFile(
                            scratch_path=local_copy,
                            content_type=upload.content_type,
                            size=upload.size,
                            original_name=upload.original_name,
                        )
                    )
            except StorageError:
                self._lifecycle.delete(stored.key)
                raise

        Log.info(
            "Text extraction completed successfully",
            filename=upload.original_name,
            chars=len(result.text),
            processing_time=result.processing_time,
        )
        return StoredExtraction(stored=stored, result=result)
