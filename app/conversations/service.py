from app.auth.models import AuthenticatedUser
from app.conversations.title import conversation_text, generate_simple_title
from app.database.repositories.conversations_repository import ConversationsRepository
from app.documents.exceptions import ConversationNotFoundError
from app.generation.models import ChatMessage
from app.logging.logger import Log


class ConversationService:
    def __init__(self, conversations_repository: ConversationsRepository) -> None:
        self._conversations = conversations_repository

    def generate_title(
        self,
        user: AuthenticatedUser,
        conversation_id: str,
        messages: list[ChatMessage],
    ) -> str:
        """Derive and persist a title for a conversation the caller owns.

        A conversation owned by someone else is reported as not found.
        """
        owner_id = self._conversations.find_owner_id(conversation_id)
        if owner_id is None or owner_id != user.id:
            raise ConversationNotFoundError("Conversation not found")

        title = generate_simple_title(
            conversation_text([(message.role, message.content) for message in messages])
        )
        self._conversations.update_title(conversation_id, title)
        Log.info("Conversation title generated", conversation_id=conversation_id)
        return title
