from uuid import UUID

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile

from app.api.dependencies import (
    get_services,
    get_settings,
    rate_limited_user,
    require_approved_user,
)
from app.api.file_validation import validate_upload
from app.api.routers.uploads import stage, upload_size
from app.api.schemas import SignedUrlRequest
from app.api.services import Services
from app.auth.models import AuthenticatedUser
from app.config.settings import Settings
from app.ratelimit.limiter import RateLimiters

router = APIRouter(prefix="/api/documents", tags=["documents"])


@router.get("")
def list_documents(
    company_wide_only: bool = Query(False, alias="companyWideOnly"),
    user_id: str | None = Query(None, alias="userId"),
    user: AuthenticatedUser = Depends(require_approved_user),
    services: Services = Depends(get_services),
) -> dict[str, object]:
    documents = services.documents.list_documents(
        user,
        company_wide_only=company_wide_only,
        owner_id=user_id,
    )
    return {"documents": [document.to_dict() for document in documents]}


@router.post("")
def upload_document(
    file: UploadFile = File(...),
    title: str = Form(..., min_length=1, max_length=255),
    is_company_wide: str = Form("false", alias="isCompanyWide"),
    user: AuthenticatedUser = Depends(rate_limited_user(RateLimiters.UPLOAD)),
    services: Services = Depends(get_services),
    settings: Settings = Depends(get_settings),
) -> dict[str, object]:
    filename = file.filename or "upload"
    content_type = file.content_type or "application/octet-stream"
    validate_upload(filename, content_type, upload_size(file), settings)

    uploaded = stage(services, file)
    document = services.ingestion.ingest_document(
        uploaded,
        owner_id=user.id,
        title=title,
        is_company_wide=is_company_wide.lower() == "true",
    )
    return {
        "success": True,
        "document": document.to_dict(),
        "message": "Document uploaded successfully",
    }


@router.delete("/{document_id}")
def delete_document(
    document_id: UUID,
    user: AuthenticatedUser = Depends(require_approved_user),
    services: Services = Depends(get_services),
) -> dict[str, object]:
    services.documents.delete_document(user, str(document_id))
    return {"success": True, "message": "Document deleted successfully"}


@router.post("/url")
def get_document_url(
    body: SignedUrlRequest,
    user: AuthenticatedUser = Depends(require_approved_user),
    services: Services = Depends(get_services),
) -> dict[str, str]:
    return {"url": services.documents.signed_url(user, body.file_path)}
