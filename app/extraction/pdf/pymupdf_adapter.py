from pathlib import Path

import pymupdf

from app.extraction.base import BaseExtractor
from app.extraction.exceptions import MalformedDocumentError
from app.extraction.models import ExtractedContent


class PyMuPdfAdapter(BaseExtractor):
    """Extracts text from PDF using PyMuPDF."""

    def extract(self, path: Path) -> ExtractedContent:
        try:
            with pymupdf.open(stream=path.read_bytes(), filetype="pdf") as doc:  # type: ignore[no-untyped-call]
                pages = [page.get_text() for page in doc]
                info = {key: value for key, value in (doc.metadata or {}).items() if value}
        except Exception as exc:
            raise MalformedDocumentError(f"pymupdf extraction failed: {exc}") from exc
        return ExtractedContent(
            text="\n".join(pages).strip(),
            metadata={"pages": len(pages), "info": info},
        )
