from app.config.settings import Settings
from app.extraction.base import BaseExtractor
from app.extraction.document_extractor import DocumentExtractor
from app.extraction.exceptions import NoExtractorAvailableError
from app.extraction.models import ContentFamily, family_for
from app.extraction.ocr_extractor import OcrExtractor
from app.extraction.pdf.factory import PdfExtractorFactory
from app.extraction.text_extractor import PlainTextExtractor
from app.ocr.base import BaseOcrEngine
from app.ocr.tesseract_adapter import TesseractOcrEngine


class ExtractorRegistry:
    """Maps content families to extractors.

    Adding a format means a new ContentFamily member and one registry entry.
    """

    def __init__(self, extractors: dict[ContentFamily, BaseExtractor]) -> None:
        self._extractors = dict(extractors)

    def supports(self, content_type: str) -> bool:
        family = family_for(content_type)
        return family is not None and family in self._extractors

    def for_content_type(self, content_type: str) -> BaseExtractor:
        """Return the extractor for a declared MIME type.

        Raises:
            NoExtractorAvailableError: if the type is unknown or unregistered.
        """
        family = family_for(content_type)
        extractor = self._extractors.get(family) if family is not None else None
        if extractor is None:
            raise NoExtractorAvailableError(content_type)
        return extractor


class ExtractorRegistryFactory:
    """Builds the registry with the extractors configured in settings."""

    @classmethod
    def create(
        cls,
        settings: Settings,
        ocr_engine: BaseOcrEngine | None = None,
    ) -> ExtractorRegistry:
        engine = ocr_engine or TesseractOcrEngine(timeout_seconds=settings.ocr_timeout_seconds)
        return ExtractorRegistry(
            extractors={
                ContentFamily.PDF: PdfExtractorFactory.create(settings),
                ContentFamily.DOCUMENT: DocumentExtractor(),
                ContentFamily.IMAGE: OcrExtractor(
                    engine,
                    languages=settings.ocr_languages,
                    min_confidence=settings.ocr_min_confidence,
                    filter_low_confidence=settings.ocr_filter_low_confidence,
                ),
                ContentFamily.TEXT: PlainTextExtractor(),
            },
        )
