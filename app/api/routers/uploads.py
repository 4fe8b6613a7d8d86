import os

from fastapi import UploadFile

from app.api.services import Services
from app.extraction.models import UploadedFile


def upload_size(file: UploadFile) -> int:
    if file.size is not None:
        return file.size
    file.file.seek(0, os.SEEK_END)
    size = file.file.tell()
    file.file.seek(0)
    return size


def stage(services: Services, file: UploadFile) -> UploadedFile:
    """Copy the request body part into the scratch directory."""
    file.file.seek(0)
    return services.lifecycle.stage_upload(
        file.file,
        file.filename or "upload",
        file.content_type or "application/octet-stream",
    )
