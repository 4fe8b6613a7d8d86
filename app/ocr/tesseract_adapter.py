from pathlib import Path
from typing import Any

import pytesseract
from PIL import Image, UnidentifiedImageError

from app.extraction.exceptions import OcrEngineError
from app.ocr.base import BaseOcrEngine
from app.ocr.models import OcrResult, OcrWord


class TesseractOcrEngine(BaseOcrEngine):
    """OCR engine backed by the Tesseract binary through pytesseract."""

    def __init__(self, timeout_seconds: int = 0) -> None:
        self._timeout_seconds = timeout_seconds

    def recognize(self, image_path: Path, language: str) -> OcrResult:
        try:
            with Image.open(image_path) as image:
                text = pytesseract.image_to_string(
                    image, lang=language, timeout=self._timeout_seconds
                )
                data = pytesseract.image_to_data(
                    image,
                    lang=language,
                    output_type=pytesseract.Output.DICT,
                    timeout=self._timeout_seconds,
                )
        except (pytesseract.TesseractError, pytesseract.TesseractNotFoundError) as exc:
            raise OcrEngineError(f"OCR extraction failed: {exc}") from exc
        except (UnidentifiedImageError, OSError) as exc:
            raise OcrEngineError(f"OCR extraction failed: unreadable image ({exc})") from exc
        except RuntimeError as exc:
            # pytesseract signals its own timeout as a bare RuntimeError
            raise OcrEngineError(f"OCR extraction failed: {exc}") from exc

        return _build_result(text or "", data)


def _build_result(text: str, data: dict[str, list[Any]]) -> OcrResult:
    words: list[OcrWord] = []
    blocks: set[int] = set()
    paragraphs: set[tuple[int, int]] = set()
    lines: set[tuple[int, int, int]] = set()

    tokens = data.get("text", [])
    confidences = data.get("conf", [])
    for idx, token in enumerate(tokens):
        value = (token or "").strip()
        if not value:
            continue
        confidence = _as_float(confidences[idx] if idx < len(confidences) else -1)
        if confidence < 0:
            continue
        words.append(OcrWord(text=value, confidence=confidence))
        block = int(_column(data, "block_num", idx))
        par = int(_column(data, "par_num", idx))
        line = int(_column(data, "line_num", idx))
        blocks.add(block)
        paragraphs.add((block, par))
        lines.add((block, par, line))

    mean_confidence = (
        sum(word.confidence for word in words) / len(words) if words else 0.0
    )
    return OcrResult(
        text=text,
        confidence=mean_confidence,
        words=words,
        blocks=len(blocks),
        paragraphs=len(paragraphs),
        lines=len(lines),
    )


def _column(data: dict[str, list[Any]], name: str, idx: int) -> Any:
    column = data.get(name, [])
    return column[idx] if idx < len(column) else 0


def _as_float(raw: Any) -> float:
    try:
        return float(raw)
    except (TypeError, ValueError):
        return -1.0
