from abc import ABC, abstractmethod
from pathlib import Path

from app.ocr.models import OcrResult


class BaseOcrEngine(ABC):
    """Contract for OCR engines: recognize(image) -> text + confidence."""

    @abstractmethod
    def recognize(self, image_path: Path, language: str) -> OcrResult:
        """Recognize text in an image file.

        Args:
            image_path: Path to a readable image.
            language: Engine language string, e.g. "eng" or "eng+deu".

        Raises:
            OcrEngineError: if the engine cannot process the image.
        """
