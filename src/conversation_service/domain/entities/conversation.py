from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from conversation_service.domain.value_objects.tag import Tag


@dataclass(frozen=True, slots=True)
class Conversation:
    id: UUID
    name: str
    product: str
    permissions: tuple[str, ...]
    tags: tuple[Tag, ...]
    blocked_members: tuple[UUID, ...]
    last_message_id: UUID | None
    created_at: datetime
    updated_at: datetime
    direct: bool = False

    def is_blocked(self, user_id: UUID) -> bool:
        return user_id in self.blocked_members
