from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel

from conversation_service.api.v1.schemas.common import TagSchema
from conversation_service.domain.value_objects.enums import ConversationPermission


class CreateConversationRequest(BaseModel):
    name: str
    product: str
    member_ids: list[UUID] = []
    permissions: list[ConversationPermission] = []
    tags: list[TagSchema] = []


class DirectConversationRequest(BaseModel):
    product: str
    user_id: UUID
    other_user_id: UUID
    name: str = ""
    permissions: list[ConversationPermission] = []


class ConversationResponse(BaseModel):
    id: UUID
    name: str
    product: str
    permissions: list[str]
    tags: list[TagSchema]
    blocked_members: list[UUID]
    last_message_id: UUID | None
    direct: bool
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class AddMemberRequest(BaseModel):
    user_id: UUID


class MemberResponse(BaseModel):
    conversation_id: UUID
    user_id: UUID
    joined_at: datetime
    last_read_at: datetime | None

    model_config = {"from_attributes": True}


class BlockUserRequest(BaseModel):
    conversation_ids: list[UUID]
    member_id: UUID


class MarkReadRequest(BaseModel):
    user_id: UUID
    message_id: UUID


class UnreadCountResponse(BaseModel):
    conversation_id: UUID
    user_id: UUID
    count: int

    model_config = {"from_attributes": True}
