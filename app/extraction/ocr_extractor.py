import re
from pathlib import Path

from app.extraction.base import BaseExtractor
from app.extraction.models import ExtractedContent
from app.logging.logger import Log
from app.ocr.base import BaseOcrEngine
from app.ocr.models import OcrResult

_SCRIPT_PATTERNS: tuple[tuple[str, re.Pattern[str]], ...] = (
    ("latin-based", re.compile(r"[a-zA-Z]")),
    ("cyrillic", re.compile(r"[\u0400-\u04FF]")),
    ("arabic", re.compile(r"[\u0600-\u06FF]")),
    ("chinese", re.compile(r"[\u4e00-\u9fff]")),
)


def filter_low_confidence_words(result: OcrResult, min_confidence: float) -> str | None:
    """Rebuild text from words at or above min_confidence.

    Returns None when filtering would not change anything (no word dropped)
    or would leave nothing behind, so the caller keeps the unfiltered text.
    """
    if not result.words:
        return None
    kept = [word.text for word in result.words if word.confidence >= min_confidence]
    if not kept or len(kept) == len(result.words):
        return None
    return " ".join(kept)


def detect_scripts(text: str) -> list[str]:
    scripts = [name for name, pattern in _SCRIPT_PATTERNS if pattern.search(text)]
    return scripts or ["unknown"]


class OcrExtractor(BaseExtractor):
    """Extracts text from images through an OCR engine."""

    DEFAULT_MIN_CONFIDENCE = 30.0

    def __init__(
        self,
        engine: BaseOcrEngine,
        *,
        languages: list[str] | None = None,
        min_confidence: float = DEFAULT_MIN_CONFIDENCE,
        filter_low_confidence: bool = True,
    ) -> None:
        self._engine = engine
        self._language = "+".join(languages or ["eng"])
        self._min_confidence = min_confidence
        self._filter_low_confidence = filter_low_confidence

    def extract(self, path: Path) -> ExtractedContent:
        Log.info("Starting OCR", path=str(path), language=self._language)
        result = self._engine.recognize(path, self._language)

        text = result.text.strip()
        filtered_words = 0
        if self._filter_low_confidence:
            filtered = filter_low_confidence_words(result, self._min_confidence)
            if filtered is not None:
                filtered_words = sum(
                    1 for word in result.words if word.confidence < self._min_confidence
                )
                text = filtered

        Log.info(
            "OCR completed",
            chars=len(text),
            confidence=round(result.confidence),
        )
        return ExtractedContent(
            text=text,
            metadata={
                "confidence": round(result.confidence),
                "language": self._language,
                "blocks": result.blocks,
                "paragraphs": result.paragraphs,
                "lines": result.lines,
                "words": len(result.words),
                "filtered_words": filtered_words,
                "detected_scripts": detect_scripts(text),
            },
        )
