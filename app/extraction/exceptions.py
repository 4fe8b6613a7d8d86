class ExtractionError(Exception):
    """Base exception for failures inside a format extractor."""


class MalformedDocumentError(ExtractionError):
    """Raised when a file cannot be parsed as its declared format."""


class OcrEngineError(ExtractionError):
    """Raised when the OCR engine fails to recognize an image."""


class NoExtractorAvailableError(Exception):
    """Raised when no extractor is registered for a declared content type."""

    def __init__(self, content_type: str) -> None:
        super().__init__(f"No extractor available for content type '{content_type}'")
        self.content_type = content_type
