from __future__ import annotations

import logging
import uuid
from collections.abc import Iterable, Sequence
from datetime import datetime, timezone

from conversation_service.application.dto.conversation import (
    CreateConversationDTO,
    DirectConversationDTO,
)
from conversation_service.application.exceptions import NotFoundError, ValidationError
from conversation_service.application.uow import UnitOfWork
from conversation_service.domain.entities.conversation import Conversation
from conversation_service.domain.entities.member import Member
from conversation_service.domain.value_objects.tag import Tag, unique_tags

logger = logging.getLogger(__name__)


async def create_conversation(
    data: CreateConversationDTO,
    uow: UnitOfWork,
) -> Conversation:
    now = datetime.now(timezone.utc)
    conversation = Conversation(
        id=uuid.uuid4(),
        name=data.name,
        product=data.product,
        permissions=tuple(dict.fromkeys(data.permissions)),
        tags=unique_tags(data.tags),
        blocked_members=(),
        last_message_id=None,
        created_at=now,
        updated_at=now,
    )
    return await _persist(conversation, data.member_ids, uow)


async def create_direct_conversation(
    data: DirectConversationDTO,
    uow: UnitOfWork,
) -> Conversation:
    """Return the direct conversation between two users, creating it on first use."""
    if data.user_id == data.other_user_id:
        raise ValidationError("A direct conversation needs two different users")

    existing = await uow.conversations.find_direct(
        data.product, data.user_id, data.other_user_id,
    )
    if existing is not None:
        return existing

    now = datetime.now(timezone.utc)
    conversation = Conversation(
        id=uuid.uuid4(),
        name=data.name,
        product=data.product,
        permissions=tuple(dict.fromkeys(data.permissions)),
        tags=(),
        blocked_members=(),
        last_message_id=None,
        created_at=now,
        updated_at=now,
        direct=True,
    )
    return await _persist(conversation, [data.user_id, data.other_user_id], uow)


async def _persist(
    conversation: Conversation,
    member_ids: Iterable[uuid.UUID],
    uow: UnitOfWork,
) -> Conversation:
    conversation = await uow.conversations_w.create(conversation)
    member_ids = list(dict.fromkeys(member_ids))
    for user_id in member_ids:
        await uow.members_w.add(
            Member(
                conversation_id=conversation.id,
                user_id=user_id,
                joined_at=conversation.created_at,
            )
        )

    await uow.commit()
    logger.info(
        "Created conversation %s (%s) with %d members",
        conversation.id, conversation.product, len(member_ids),
    )
    return conversation


async def get_conversation(
    conversation_id: uuid.UUID,
    uow: UnitOfWork,
) -> Conversation:
    conversation = await uow.conversations.get_by_id(conversation_id)
    if conversation is None:
        raise NotFoundError("Conversation not found")
    return conversation


async def update_tags(
    conversation_id: uuid.UUID,
    tags: Iterable[Tag],
    uow: UnitOfWork,
) -> Conversation:
    await get_conversation(conversation_id, uow)
    await uow.conversations_w.set_tags(conversation_id, unique_tags(tags))
    await uow.commit()
    return await get_conversation(conversation_id, uow)


async def add_member(
    conversation_id: uuid.UUID,
    user_id: uuid.UUID,
    uow: UnitOfWork,
) -> Member:
    """Add a user to a conversation. Adding an existing member returns it unchanged."""
    await get_conversation(conversation_id, uow)
    existing = await uow.members.get(conversation_id, user_id)
    if existing is not None:
        return existing

    member = Member(
        conversation_id=conversation_id,
        user_id=user_id,
        joined_at=datetime.now(timezone.utc),
    )
    await uow.members_w.add(member)
    await uow.commit()
    return member


async def list_members(
    conversation_id: uuid.UUID,
    uow: UnitOfWork,
) -> list[Member]:
    """Members of a conversation with their read markers."""
    await get_conversation(conversation_id, uow)
    return await uow.members.list_members(conversation_id)


async def remove_member(
    conversation_id: uuid.UUID,
    user_id: uuid.UUID,
    uow: UnitOfWork,
) -> None:
    await get_conversation(conversation_id, uow)
    if await uow.members.get(conversation_id, user_id) is None:
        return
    await uow.members_w.remove(conversation_id, user_id)
    await uow.commit()


async def block_member(
    conversation_ids: Sequence[uuid.UUID],
    user_id: uuid.UUID,
    uow: UnitOfWork,
) -> list[Conversation]:
    """Block a user in each existing conversation; unknown ids are ignored."""
    updated: list[Conversation] = []
    for conversation_id in dict.fromkeys(conversation_ids):
        conversation = await uow.conversations.get_by_id(conversation_id)
        if conversation is None:
            logger.debug("Skipping block in missing conversation %s", conversation_id)
            continue
        if not conversation.is_blocked(user_id):
            await uow.conversations_w.block_member(conversation_id, user_id)
        updated.append(await get_conversation(conversation_id, uow))
    await uow.commit()
    return updated


async def unblock_member(
    conversation_ids: Sequence[uuid.UUID],
    user_id: uuid.UUID,
    uow: UnitOfWork,
) -> list[Conversation]:
    updated: list[Conversation] = []
    for conversation_id in dict.fromkeys(conversation_ids):
        conversation = await uow.conversations.get_by_id(conversation_id)
        if conversation is None:
            continue
        if conversation.is_blocked(user_id):
            await uow.conversations_w.unblock_member(conversation_id, user_id)
        updated.append(await get_conversation(conversation_id, uow))
    await uow.commit()
    return updated
