from dataclasses import dataclass

from app.extraction.models import ExtractionResult
from app.storage.models import StoredObject


@dataclass(frozen=True)
class StoredExtraction:
    """Outcome of the store-then-extract flow: the kept object and its text."""

    stored: StoredObject
    result: ExtractionResult
