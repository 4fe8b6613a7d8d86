from pathlib import Path

from app.extraction.base import BaseExtractor
from app.extraction.exceptions import MalformedDocumentError
from app.extraction.models import ExtractedContent


class PlainTextExtractor(BaseExtractor):
    """Reads plain text files as UTF-8, replacing undecodable bytes."""

    ENCODING = "utf-8"

    def extract(self, path: Path) -> ExtractedContent:
        try:
            text = path.read_text(encoding=self.ENCODING, errors="replace")
        except OSError as exc:
            raise MalformedDocumentError(f"Text extraction failed: {exc}") from exc
        return ExtractedContent(
            text=text,
            metadata={"encoding": self.ENCODING, "lines": len(text.splitlines())},
        )
