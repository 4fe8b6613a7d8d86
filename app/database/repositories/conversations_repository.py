from app.database.connection import get_connection
from app.documents.exceptions import ConversationNotFoundError


class ConversationsRepository:
    """Database operations for the conversations table."""

    def find_owner_id(self, conversation_id: str) -> str | None:
        """Return the owning user's ID, or None if the conversation does not exist."""
        with get_connection() as conn:
            with conn.cursor() as cur:
                cur.execute(
                    "SELECT user_id::text FROM conversations WHERE id = %s::uuid",
                    (conversation_id,),
                )
                row = cur.fetchone()

        if row is None:
            return None
        return row[0]

    def update_title(self, conversation_id: str, title: str) -> None:
        """Persist a generated title.

        Raises:
            ConversationNotFoundError: if no conversation with this ID exists.
        """
        with get_connection() as conn:
            with conn.cursor() as cur:
                cur.execute(
                    """
                    UPDATE conversations
                    SET title = %s
                    WHERE id = %s::uuid
                    """,
                    (title, conversation_id),
                )
                if cur.rowcount == 0:
                    raise ConversationNotFoundError(
                        f"Conversation {conversation_id} not found"
                    )
            conn.commit()
