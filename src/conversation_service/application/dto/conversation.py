from __future__ import annotations

from dataclasses import dataclass, field
from uuid import UUID

from conversation_service.domain.entities.message import Message
from conversation_service.domain.value_objects.tag import Tag


@dataclass(frozen=True, slots=True)
class CreateConversationDTO:
    name: str
    product: str
    member_ids: list[UUID] = field(default_factory=list)
    permissions: list[str] = field(default_factory=list)
    tags: list[Tag] = field(default_factory=list)


@dataclass(frozen=True, slots=True)
class ConversationMessages:
    conversation_id: UUID
    messages: list[Message]


@dataclass(frozen=True, slots=True)
class DirectConversationDTO:
    product: str
    user_id: UUID
    other_user_id: UUID
    name: str = ""
    permissions: list[str] = field(default_factory=list)
