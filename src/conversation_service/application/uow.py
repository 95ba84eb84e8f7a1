from __future__ import annotations

from typing import Protocol

from conversation_service.application.repositories.conversation import (
    ConversationReader,
    ConversationWriter,
)
from conversation_service.application.repositories.member import MemberReader, MemberWriter
from conversation_service.application.repositories.message import MessageReader, MessageWriter


class UnitOfWork(Protocol):
    conversations: ConversationReader
    conversations_w: ConversationWriter
    members: MemberReader
    members_w: MemberWriter
    messages: MessageReader
    messages_w: MessageWriter

    async def commit(self) -> None: ...
    async def rollback(self) -> None: ...
    async def flush(self) -> None: ...
