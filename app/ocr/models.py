from dataclasses import dataclass, field


@dataclass(frozen=True)
class OcrWord:
    """A single recognized word and its confidence percentage (0-100)."""

    text: str
    confidence: float


@dataclass(frozen=True)
class OcrResult:
    """Output of an OCR engine for one image."""

    text: str
    confidence: float
    words: list[OcrWord] = field(default_factory=list)
    blocks: int = 0
    paragraphs: int = 0
    lines: int = 0
