from __future__ import annotations

import logging
import uuid
from collections.abc import Iterable
from typing import Any

from conversation_service.application.exceptions import ForbiddenError, NotFoundError
from conversation_service.application.ports.clock import Clock, SystemClock
from conversation_service.application.uow import UnitOfWork
from conversation_service.domain.entities.message import Message
from conversation_service.domain.value_objects.tag import Tag, unique_tags

logger = logging.getLogger(__name__)

_clock: Clock = SystemClock()


async def create_message(
    conversation_id: uuid.UUID,
    sender_id: uuid.UUID,
    text: str,
    rich_content: dict[str, Any] | None,
    uow: UnitOfWork,
    clock: Clock = _clock,
) -> Message:
    conversation = await uow.conversations.get_by_id(conversation_id)
    if conversation is None:
        raise NotFoundError("Conversation not found")
    if conversation.is_blocked(sender_id):
        raise ForbiddenError("User is blocked in this conversation")

    msg = Message(
        id=uuid.uuid4(),
        conversation_id=conversation_id,
        sender_id=sender_id,
        text=text,
        rich_content=rich_content,
        created_at=clock.now(),
    )
    msg = await uow.messages_w.create(msg)
    await uow.commit()
    return msg


async def get_message(message_id: uuid.UUID, uow: UnitOfWork) -> Message:
    msg = await uow.messages.get_by_id(message_id)
    if msg is None:
        raise NotFoundError("Message not found")
    return msg


async def delete_message(message_id: uuid.UUID, uow: UnitOfWork) -> Message:
    """Soft-delete a message.

    Deletion is terminal and idempotent: deleting an already deleted message
    returns it unchanged.
    """
    msg = await get_message(message_id, uow)
    if msg.deleted:
        return msg

    deleted = await uow.messages_w.mark_deleted(message_id)
    if deleted is None:
        raise NotFoundError("Message not found")
    await uow.commit()
    logger.info("Message %s in conversation %s deleted", message_id, msg.conversation_id)
    return deleted


async def replace_tags(
    message_id: uuid.UUID,
    tags: Iterable[Tag],
    uow: UnitOfWork,
) -> Message:
    """Overwrite the tag set of a message. Duplicate (id, type) pairs collapse to one."""
    new_tags = unique_tags(tags)
    updated = await uow.messages_w.set_tags(message_id, new_tags)
    if updated is None:
        raise NotFoundError("Message not found")
    await uow.commit()
    return updated


async def resolve_message(
    message_id: uuid.UUID,
    resolved: bool,
    uow: UnitOfWork,
) -> Message:
    updated = await uow.messages_w.set_resolved(message_id, resolved)
    if updated is None:
        raise NotFoundError("Message not found")
    await uow.commit()
    return updated


async def list_messages(
    conversation_id: uuid.UUID,
    cursor: str | None,
    limit: int,
    uow: UnitOfWork,
) -> list[Message]:
    if not await uow.conversations.exists(conversation_id):
        raise NotFoundError("Conversation not found")
    return await uow.messages.list_messages(
        conversation_id, cursor=cursor, limit=limit,
    )
