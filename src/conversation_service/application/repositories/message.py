from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime
from typing import Protocol
from uuid import UUID

from conversation_service.application.policies.tag_filter import TagFilter
from conversation_service.domain.entities.message import Message
from conversation_service.domain.value_objects.tag import Tag


class MessageReader(Protocol):
    async def get_by_id(self, message_id: UUID) -> Message | None: ...

    async def list_messages(
        self,
        conversation_id: UUID,
        *,
        cursor: str | None = None,
        limit: int = 40,
    ) -> list[Message]: ...

    async def list_in_window(
        self,
        conversation_ids: Sequence[UUID],
        start: datetime,
        end: datetime,
        *,
        tag_filter: TagFilter | None = None,
    ) -> list[Message]:
        """Non-deleted messages with start <= created_at <= end, ordered by (created_at, id)."""
        ...

    async def count_unread(
        self,
        conversation_id: UUID,
        user_id: UUID,
        *,
        after: datetime | None,
    ) -> int:
        """Messages not sent by ``user_id`` created after ``after``, deleted ones included."""
        ...

    async def get_latest(self, conversation_id: UUID) -> Message | None:
        """Most recent non-deleted message of the conversation."""
        ...


class MessageWriter(Protocol):
    async def create(self, message: Message) -> Message: ...

    async def mark_deleted(self, message_id: UUID) -> Message | None: ...

    async def set_tags(self, message_id: UUID, tags: tuple[Tag, ...]) -> Message | None: ...

    async def set_resolved(self, message_id: UUID, resolved: bool) -> Message | None: ...
