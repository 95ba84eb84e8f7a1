from __future__ import annotations

from dataclasses import dataclass
from uuid import UUID


@dataclass(frozen=True, slots=True)
class UnreadCount:
    conversation_id: UUID
    user_id: UUID
    count: int
