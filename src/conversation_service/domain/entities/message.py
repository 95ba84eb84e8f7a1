from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any
from uuid import UUID

from conversation_service.domain.value_objects.tag import Tag


@dataclass(frozen=True, slots=True)
class Message:
    id: UUID
    conversation_id: UUID
    sender_id: UUID
    text: str
    rich_content: dict[str, Any] | None
    created_at: datetime
    tags: tuple[Tag, ...] = ()
    likes: tuple[UUID, ...] = ()
    reactions: tuple[dict[str, Any], ...] = ()
    resolved: bool = False
    deleted: bool = False
