from __future__ import annotations

from typing import Protocol
from uuid import UUID

from conversation_service.domain.entities.conversation import Conversation
from conversation_service.domain.value_objects.tag import Tag


class ConversationReader(Protocol):
    async def get_by_id(self, conversation_id: UUID) -> Conversation | None: ...

    async def exists(self, conversation_id: UUID) -> bool: ...

    async def list_ids(
        self, *, after: UUID | None = None, limit: int = 100
    ) -> list[UUID]:
        """Conversation ids in ascending order, strictly greater than ``after``."""
        ...

    async def find_direct(
        self, product: str, user_id: UUID, other_user_id: UUID
    ) -> Conversation | None:
        """Oldest direct conversation of ``product`` both users belong to."""
        ...


class ConversationWriter(Protocol):
    async def create(self, conversation: Conversation) -> Conversation: ...

    async def set_tags(self, conversation_id: UUID, tags: tuple[Tag, ...]) -> None: ...

    async def set_permissions(
        self, conversation_id: UUID, permissions: tuple[str, ...]
    ) -> None: ...

    async def block_member(self, conversation_id: UUID, user_id: UUID) -> None: ...

    async def unblock_member(self, conversation_id: UUID, user_id: UUID) -> None: ...

    async def set_last_message(
        self, conversation_id: UUID, message_id: UUID | None
    ) -> None: ...
