from __future__ import annotations

from datetime import datetime
from typing import Protocol
from uuid import UUID

from conversation_service.domain.entities.member import Member


class MemberReader(Protocol):
    async def get(self, conversation_id: UUID, user_id: UUID) -> Member | None: ...

    async def list_members(self, conversation_id: UUID) -> list[Member]: ...


class MemberWriter(Protocol):
    async def add(self, member: Member) -> None: ...

    async def remove(self, conversation_id: UUID, user_id: UUID) -> None: ...

    async def advance_last_read(
        self, conversation_id: UUID, user_id: UUID, ts: datetime
    ) -> None:
        """Move the read marker to ``ts`` unless it already points later."""
        ...
