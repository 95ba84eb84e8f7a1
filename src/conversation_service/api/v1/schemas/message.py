from __future__ import annotations

from datetime import datetime
from typing import Any, Literal
from uuid import UUID

from pydantic import BaseModel, Field

from conversation_service.api.v1.schemas.common import TagSchema


class ReplySchema(BaseModel):
    id: UUID


class GifSchema(BaseModel):
    id: str
    type: Literal["gif", "sticker"]
    width: int
    height: int
    aspect_ratio: float = Field(alias="aspectRatio")

    model_config = {"populate_by_name": True}


class ImageSchema(BaseModel):
    url: str


class AttachmentSchema(BaseModel):
    link: str
    type: Literal["pdf"]
    size: str | None = None
    file_name: str | None = Field(None, alias="fileName")

    model_config = {"populate_by_name": True}


class PollOptionSchema(BaseModel):
    option: str
    votes: list[UUID] = []


class PollSchema(BaseModel):
    question: str
    options: list[PollOptionSchema]
    allow_multiple_answers: bool = Field(alias="allowMultipleAnswers")

    model_config = {"populate_by_name": True}


class RichContentSchema(BaseModel):
    reply: ReplySchema | None = None
    giphy: GifSchema | None = None
    images: list[ImageSchema] | None = None
    attachments: list[AttachmentSchema] | None = None
    poll: PollSchema | None = None


class CreateMessageRequest(BaseModel):
    conversation_id: UUID
    sender_id: UUID
    text: str = ""
    rich_content: RichContentSchema | None = None


class ResolveMessageRequest(BaseModel):
    resolved: bool = True


class MessageResponse(BaseModel):
    id: UUID
    conversation_id: UUID
    sender_id: UUID
    text: str
    rich_content: dict[str, Any] | None
    tags: list[TagSchema]
    likes: list[UUID]
    reactions: list[dict[str, Any]]
    resolved: bool
    deleted: bool
    created_at: datetime

    model_config = {"from_attributes": True}


class ConversationMessagesResponse(BaseModel):
    conversation_id: UUID
    messages: list[MessageResponse]

    model_config = {"from_attributes": True}
