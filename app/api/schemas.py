from typing import Literal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from app.generation.models import ChatMessage


class MessageSchema(BaseModel):
    role: Literal["user", "assistant", "system"]
    content: str = Field(min_length=1, max_length=10_000)

    def to_message(self) -> ChatMessage:
        return ChatMessage(role=self.role, content=self.content)


class ChatRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    messages: list[MessageSchema] = Field(min_length=1, max_length=50)
    document_ids: list[UUID] = Field(default_factory=list, max_length=10, alias="documentIds")


class GenerateTitleRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    conversation_id: UUID = Field(alias="conversationId")
    messages: list[MessageSchema] = Field(min_length=1, max_length=50)


class SignedUrlRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    file_path: str = Field(min_length=1, max_length=500, alias="filePath")
