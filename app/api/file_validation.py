from pathlib import Path

from app.api.exceptions import ValidationError
from app.config.settings import Settings
from app.extraction.models import FILE_EXTENSIONS, ContentFamily, family_for


def max_file_sizes(settings: Settings) -> dict[ContentFamily, int]:
    return {
        ContentFamily.PDF: settings.max_file_size_pdf_bytes,
        ContentFamily.DOCUMENT: settings.max_file_size_document_bytes,
        ContentFamily.TEXT: settings.max_file_size_document_bytes,
        ContentFamily.IMAGE: settings.max_file_size_image_bytes,
    }


def validate_upload(filename: str, content_type: str, size: int, settings: Settings) -> None:
    """Check size and extension of an upload of a supported type.

    Unsupported types pass through untouched; the extraction dispatcher
    reports them.

    Raises:
        ValidationError: with one detail per violated rule.
    """
    family = family_for(content_type)
    if family is None:
        return

    errors: list[str] = []
    if size == 0:
        errors.append("File is empty")

    limit = max_file_sizes(settings)[family]
    if size > limit:
        errors.append(
            f"File too large. Maximum size for {family.value} files is "
            f"{limit / (1024 * 1024):.1f}MB"
        )

    extension = Path(filename).suffix.lower()
    normalized = content_type.split(";", 1)[0].strip().lower()
    if extension not in FILE_EXTENSIONS.get(normalized, ()):
        errors.append(f"File extension {extension or '(none)'} doesn't match the file type")

    if errors:
        raise ValidationError("File validation failed", errors)
