from abc import ABC, abstractmethod
from pathlib import Path

from app.extraction.models import ExtractedContent


class BaseExtractor(ABC):
    """Contract for all format-specific text extractors."""

    @abstractmethod
    def extract(self, path: Path) -> ExtractedContent:
        """Extract plain text and format metadata from a readable file.

        Args:
            path: Scratch path of the file to read.

        Returns:
            ExtractedContent with the extracted text and format metadata.

        Raises:
            ExtractionError: if extraction fails for any reason.
        """
