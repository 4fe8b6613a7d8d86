from pathlib import Path

import docx
from docx.opc.exceptions import PackageNotFoundError

from app.extraction.base import BaseExtractor
from app.extraction.exceptions import MalformedDocumentError
from app.extraction.models import ExtractedContent
from app.logging.logger import Log

LEGACY_DOC_WARNING = "Legacy .doc format: extraction results may vary"


class DocumentExtractor(BaseExtractor):
    """Extracts raw text from word-processing documents using python-docx.

    Paragraph text is followed by table cell text, one block per line. Legacy
    binary .doc files are attempted too; they normally fail to open and the
    dispatcher degrades them to fallback text.
    """

    def extract(self, path: Path) -> ExtractedContent:
        suffix = path.suffix.lower()
        warnings: list[str] = []
        if suffix == ".doc":
            Log.info("Processing legacy .doc file", path=str(path))
            warnings.append(LEGACY_DOC_WARNING)

        try:
            document = docx.Document(str(path))
        except PackageNotFoundError as exc:
            raise MalformedDocumentError(
                f"Document extraction failed: not a valid OOXML package ({exc})"
            ) from exc
        except Exception as exc:
            raise MalformedDocumentError(f"Document extraction failed: {exc}") from exc

        paragraphs = [p.text for p in document.paragraphs if p.text.strip()]
        cells: list[str] = []
        for table in document.tables:
            for row in table.rows:
                row_text = "\t".join(cell.text.strip() for cell in row.cells)
                if row_text.strip():
                    cells.append(row_text)

        text = "\n".join(paragraphs + cells).strip()
        Log.info("Document processed", chars=len(text), warnings=len(warnings))
        return ExtractedContent(
            text=text,
            metadata={
                "warnings": warnings,
                "file_type": suffix,
                "paragraphs": len(paragraphs),
                "tables": len(document.tables),
            },
        )
