from fastapi import APIRouter, Depends

from app.api.dependencies import get_services, require_approved_user
from app.api.schemas import GenerateTitleRequest
from app.api.services import Services
from app.auth.models import AuthenticatedUser

router = APIRouter(prefix="/api/conversations", tags=["conversations"])


@router.post("/generate-title")
def generate_title(
    body: GenerateTitleRequest,
    user: AuthenticatedUser = Depends(require_approved_user),
    services: Services = Depends(get_services),
) -> dict[str, str]:
    title = services.conversations.generate_title(
        user,
        str(body.conversation_id),
        [message.to_message() for message in body.messages],
    )
    return {"title": title}
