from fastapi import APIRouter, Depends

from app.api.dependencies import get_services, rate_limited_user
from app.api.schemas import ChatRequest
from app.api.services import Services
from app.auth.models import AuthenticatedUser
from app.logging.logger import Log
from app.ratelimit.limiter import RateLimiters

router = APIRouter(prefix="/api/chat", tags=["chat"])


@router.post("/stream")
def chat_stream(
    body: ChatRequest,
    user: AuthenticatedUser = Depends(rate_limited_user(RateLimiters.CHAT)),
    services: Services = Depends(get_services),
) -> dict[str, object]:
    """Answer the last message using the selected documents as context."""
    messages = [message.to_message() for message in body.messages]
    query = messages[-1].content
    Log.info(
        "Chat request",
        user_id=user.id,
        messages=len(messages),
        documents=len(body.document_ids),
    )

    bundle = services.assembler.assemble(query, [str(doc_id) for doc_id in body.document_ids])
    reply = services.generation.generate(messages, bundle.context)
    return {
        "response": reply,
        "sources": [source.to_dict() for source in bundle.sources],
    }
