import io
from pathlib import Path

import pdfplumber

from app.extraction.base import BaseExtractor
from app.extraction.exceptions import MalformedDocumentError
from app.extraction.models import ExtractedContent


class PdfPlumberAdapter(BaseExtractor):
    """Extracts text from PDF using pdfplumber."""

    def extract(self, path: Path) -> ExtractedContent:
        try:
            with pdfplumber.open(io.BytesIO(path.read_bytes())) as pdf:
                pages = [page.extract_text() or "" for page in pdf.pages]
                info = dict(pdf.metadata or {})
        except Exception as exc:
            raise MalformedDocumentError(f"pdfplumber extraction failed: {exc}") from exc
        return ExtractedContent(
            text="\n".join(pages).strip(),
            metadata={"pages": len(pages), "info": _stringify(info)},
        )


def _stringify(info: dict[str, object]) -> dict[str, str]:
    return {str(key): str(value) for key, value in info.items()}
