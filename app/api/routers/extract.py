from datetime import datetime, timezone
from pathlib import Path

from fastapi import APIRouter, Depends, File, UploadFile

from app.api.dependencies import get_services, get_settings
from app.api.exceptions import ValidationError
from app.api.file_validation import validate_upload
from app.api.routers.uploads import stage, upload_size
from app.api.services import Services
from app.config.settings import Settings

router = APIRouter(tags=["extraction"])


@router.post("/extract")
def extract_text(
    file: UploadFile | None = File(None),
    services: Services = Depends(get_services),
    settings: Settings = Depends(get_settings),
) -> dict[str, object]:
    """Store an uploaded file and return the text extracted from it."""
    if file is None:
        raise ValidationError(
            "No file uploaded",
            ["Please upload a file to extract text from"],
        )

    filename = file.filename or "upload"
    content_type = file.content_type or "application/octet-stream"
    validate_upload(filename, content_type, upload_size(file), settings)

    uploaded = stage(services, file)
    outcome = services.ingestion.extract_and_store(uploaded)
    return {
        "success": True,
        "filename": filename,
        "fileType": content_type,
        "fileSize": uploaded.size,
        "storageInfo": {
            "path": outcome.stored.key,
            "fileName": Path(outcome.stored.key).name,
        },
        "extractedText": outcome.result.text,
        "wordCount": outcome.result.word_count,
        "processingTime": outcome.result.processing_time,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
