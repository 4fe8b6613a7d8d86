from pathlib import Path

import pytest

from app.extraction.document_extractor import LEGACY_DOC_WARNING, DocumentExtractor
from app.extraction.exceptions import MalformedDocumentError


class TestDocumentExtractor:
    def test_extracts_paragraphs_then_tables(self, sample_docx_path: Path) -> None:
        result = DocumentExtractor().extract(sample_docx_path)

        lines = result.text.split("\n")
        assert lines[0] == "First paragraph of the report."
        assert lines[1] == "Second paragraph with more detail."
        assert "Region\tRevenue" in lines
        assert "North\t120" in lines

    def test_reports_metadata(self, sample_docx_path: Path) -> None:
        result = DocumentExtractor().extract(sample_docx_path)

        assert result.metadata["paragraphs"] == 2
        assert result.metadata["tables"] == 1
        assert result.metadata["file_type"] == ".docx"
        assert result.metadata["warnings"] == []

    def test_raises_malformed_for_non_ooxml_file(self, tmp_path: Path) -> None:
        path = tmp_path / "broken.docx"
        path.write_bytes(b"this is not a zip package")

        with pytest.raises(MalformedDocumentError, match="Document extraction failed"):
            DocumentExtractor().extract(path)

    def test_legacy_doc_that_is_really_ooxml_carries_warning(
        self, sample_docx_path: Path, tmp_path: Path
    ) -> None:
        legacy = tmp_path / "old.doc"
        legacy.write_bytes(sample_docx_path.read_bytes())

        result = DocumentExtractor().extract(legacy)

        assert result.metadata["warnings"] == [LEGACY_DOC_WARNING]
        assert result.metadata["file_type"] == ".doc"

    def test_binary_legacy_doc_raises(self, tmp_path: Path) -> None:
        legacy = tmp_path / "old.doc"
        legacy.write_bytes(b"\xd0\xcf\x11\xe0\xa1\xb1\x1a\xe1" + b"\x00" * 64)

        with pytest.raises(MalformedDocumentError):
            DocumentExtractor().extract(legacy)
