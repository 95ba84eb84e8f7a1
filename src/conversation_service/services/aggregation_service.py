from __future__ import annotations

import uuid
from collections.abc import Iterable
from datetime import datetime

from conversation_service.application.dto.conversation import ConversationMessages
from conversation_service.application.exceptions import InvalidRangeError, NotFoundError
from conversation_service.application.policies.tag_filter import TagFilter
from conversation_service.application.uow import UnitOfWork
from conversation_service.domain.entities.message import Message


async def group_messages_by_conversation(
    conversation_ids: Iterable[uuid.UUID],
    start_date: datetime,
    end_date: datetime,
    tag_filter: TagFilter | None,
    uow: UnitOfWork,
) -> list[ConversationMessages]:
    """Return non-deleted messages inside [start_date, end_date], grouped per conversation.

    Groups follow the first-seen order of ``conversation_ids``; a conversation
    without any matching message produces no group at all.
    """
    ids = list(dict.fromkeys(conversation_ids))
    if not ids:
        raise NotFoundError("No conversation ids supplied")
    if start_date > end_date:
        raise InvalidRangeError("start_date must not be after end_date")

    messages = await uow.messages.list_in_window(
        ids, start_date, end_date, tag_filter=tag_filter,
    )

    grouped: dict[uuid.UUID, list[Message]] = {}
    for msg in sorted(messages, key=lambda m: (m.created_at, m.id)):
        # Same rules as the store query; applied again on the loaded rows.
        if msg.deleted or not start_date <= msg.created_at <= end_date:
            continue
        if tag_filter is not None and not tag_filter.matches(msg.tags):
            continue
        grouped.setdefault(msg.conversation_id, []).append(msg)

    return [
        ConversationMessages(conversation_id=cid, messages=grouped[cid])
        for cid in ids
        if cid in grouped
    ]
