"""Selects an extractor by declared content type and degrades to fallback text."""

import time
from collections.abc import Callable
from datetime import date

from app.extraction.models import ExtractionResult, UploadedFile
from app.extraction.registry import ExtractorRegistry
from app.logging.logger import Log

FALLBACK_INSUFFICIENT = "insufficient_content"
FALLBACK_FAILED = "extraction_failed"


def describe_kind(content_type: str) -> str:
    lowered = content_type.lower()
    if "pdf" in lowered:
        return "PDF"
    if "word" in lowered:
        return "Word"
    if lowered.startswith("image/"):
        return "image"
    return "document"


def format_size_kb(size: int) -> str:
    return f"{int(size / 1024 + 0.5)} KB"


class ExtractionDispatcher:
    """Runs the matching extractor and guarantees a usable text body.

    Extraction failures never escape: a failing or near-empty extraction is
    replaced by a synthesized description of the file. An unknown content type
    is a dispatch failure and raises NoExtractorAvailableError instead.
    """

    DEFAULT_MIN_CHARS = 50

    def __init__(
        self,
        registry: ExtractorRegistry,
        *,
        min_chars: int = DEFAULT_MIN_CHARS,
        today: Callable[[], date] = date.today,
    ) -> None:
        self._registry = registry
        self._min_chars = min_chars
        self._today = today

    def supports(self, content_type: str) -> bool:
        return self._registry.supports(content_type)

    def extract(self, file: UploadedFile, content_type: str | None = None) -> ExtractionResult:
        """Extract text from a staged upload.

        Raises:
            NoExtractorAvailableError: if no extractor handles the content type.
        """
        declared = content_type or file.content_type
        extractor = self._registry.for_content_type(declared)
        started = time.monotonic()

        try:
            content = extractor.extract(file.scratch_path)
        except Exception as exc:
            duration_ms = _elapsed_ms(started)
            Log.warning(
                "Extraction failed, using fallback text",
                filename=file.original_name,
                content_type=declared,
                error=str(exc),
            )
            return ExtractionResult(
                text=self._failed_text(file, declared, str(exc)),
                metadata={},
                duration_ms=duration_ms,
                used_fallback=True,
                fallback_reason=FALLBACK_FAILED,
            )

        duration_ms = _elapsed_ms(started)
        if len(content.text.strip()) < self._min_chars:
            Log.info(
                "Extracted text too short, using fallback text",
                filename=file.original_name,
                chars=len(content.text.strip()),
            )
            return ExtractionResult(
                text=self._insufficient_text(file, declared),
                metadata=content.metadata,
                duration_ms=duration_ms,
                used_fallback=True,
                fallback_reason=FALLBACK_INSUFFICIENT,
            )

        Log.info(
            "Text extraction completed",
            filename=file.original_name,
            chars=len(content.text),
            duration_ms=duration_ms,
        )
        return ExtractionResult(
            text=content.text,
            metadata=content.metadata,
            duration_ms=duration_ms,
        )

    def _details(self, file: UploadedFile, content_type: str) -> str:
        return (
            "File Details:\n"
            f"- Original Name: {file.original_name}\n"
            f"- Type: {content_type}\n"
            f"- Size: {format_size_kb(file.size)}\n"
            f"- Upload Date: {self._today().isoformat()}"
        )

    def _insufficient_text(self, file: UploadedFile, content_type: str) -> str:
        return (
            f"Document: {file.original_name}\n\n"
            f"This is a {describe_kind(content_type)} file uploaded to the platform.\n\n"
            f"{self._details(file, content_type)}\n\n"
            "Note: Text extraction was not successful for this file. For better "
            "analysis, please ensure the document contains readable text content."
        )

    def _failed_text(self, file: UploadedFile, content_type: str, error: str) -> str:
        return (
            f"Document: {file.original_name}\n\n"
            "This document has been uploaded but text extraction encountered an error.\n\n"
            f"{self._details(file, content_type)}\n\n"
            f"Error during text extraction: {error}\n\n"
            "Please try re-uploading the document or contact support if the issue persists."
        )


def _elapsed_ms(started: float) -> int:
    return int((time.monotonic() - started) * 1000)
