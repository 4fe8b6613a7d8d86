from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path


class ContentFamily(str, Enum):
    """Supported families of uploaded content, keyed by declared MIME type."""

    PDF = "pdf"
    DOCUMENT = "document"
    IMAGE = "image"
    TEXT = "text"


CONTENT_TYPES: dict[ContentFamily, tuple[str, ...]] = {
    ContentFamily.PDF: ("application/pdf",),
    ContentFamily.DOCUMENT: (
        "application/msword",
        "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    ),
    ContentFamily.IMAGE: (
        "image/png",
        "image/jpeg",
        "image/jpg",
        "image/gif",
        "image/bmp",
        "image/tiff",
    ),
    ContentFamily.TEXT: ("text/plain",),
}

FILE_EXTENSIONS: dict[str, tuple[str, ...]] = {
    "application/pdf": (".pdf",),
    "application/msword": (".doc",),
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document": (".docx",),
    "text/plain": (".txt",),
    "image/png": (".png",),
    "image/jpeg": (".jpg", ".jpeg"),
    "image/jpg": (".jpg", ".jpeg"),
    "image/gif": (".gif",),
    "image/bmp": (".bmp",),
    "image/tiff": (".tiff", ".tif"),
}


def family_for(content_type: str) -> ContentFamily | None:
    """Map a declared MIME type to its content family, or None if unsupported."""
    normalized = content_type.split(";", 1)[0].strip().lower()
    for family, types in CONTENT_TYPES.items():
        if normalized in types:
            return family
    return None


@dataclass(frozen=True)
class UploadedFile:
    """A file received from a client and staged in scratch space.

    Owned by the request that created it; the scratch file is removed on every
    exit path of that request.
    """

    scratch_path: Path
    content_type: str
    size: int
    original_name: str


@dataclass(frozen=True)
class ExtractedContent:
    """Raw output of a single extractor."""

    text: str
    metadata: dict[str, object] = field(default_factory=dict)


@dataclass(frozen=True)
class ExtractionResult:
    """Final output of the dispatcher for one file."""

    text: str
    metadata: dict[str, object] = field(default_factory=dict)
    duration_ms: int = 0
    used_fallback: bool = False
    fallback_reason: str | None = None

    @property
    def processing_time(self) -> str:
        return f"{self.duration_ms}ms"

    @property
    def word_count(self) -> int:
        return len(self.text.split())
