from __future__ import annotations

import uuid
from collections.abc import Sequence

from conversation_service.application.exceptions import NotFoundError
from conversation_service.application.uow import UnitOfWork
from conversation_service.domain.entities.unread_count import UnreadCount


async def unread_counts(
    user_id: uuid.UUID,
    conversation_ids: Sequence[uuid.UUID],
    uow: UnitOfWork,
) -> list[UnreadCount]:
    """One count per requested conversation, in request order.

    Soft-deleted messages still count: the reader missed them before they
    were deleted. Messages the user sent never count.
    """
    result: list[UnreadCount] = []
    for conversation_id in conversation_ids:
        member = await uow.members.get(conversation_id, user_id)
        marker = member.last_read_at if member is not None else None
        count = await uow.messages.count_unread(conversation_id, user_id, after=marker)
        result.append(
            UnreadCount(conversation_id=conversation_id, user_id=user_id, count=count)
        )
    return result


async def mark_read(
    conversation_id: uuid.UUID,
    user_id: uuid.UUID,
    message_id: uuid.UUID,
    uow: UnitOfWork,
) -> None:
    """Move the user's read marker up to ``message_id``. The marker never moves back."""
    member = await uow.members.get(conversation_id, user_id)
    if member is None:
        raise NotFoundError("Member not found in conversation")

    msg = await uow.messages.get_by_id(message_id)
    if msg is None or msg.conversation_id != conversation_id:
        raise NotFoundError("Message not found")

    await uow.members_w.advance_last_read(conversation_id, user_id, msg.created_at)
    await uow.commit()
