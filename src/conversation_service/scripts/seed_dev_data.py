"""Seed development data: creates a sample conversation with tagged messages."""
from __future__ import annotations

import asyncio
import logging
import uuid
from datetime import datetime, timedelta, timezone

from conversation_service.application.ports.clock import FixedClock
from conversation_service.domain.entities.conversation import Conversation
from conversation_service.domain.entities.member import Member
from conversation_service.domain.value_objects.enums import ConversationPermission, Product, TagType
from conversation_service.domain.value_objects.tag import Tag
from conversation_service.infrastructure.db.session import AsyncSessionLocal
from conversation_service.infrastructure.db.uow import SqlAlchemyUoW
from conversation_service.logging_config import configure_logging
from conversation_service.services import message_service, migration_service

logger = logging.getLogger(__name__)


async def seed() -> None:
    async with AsyncSessionLocal() as session:
        uow = SqlAlchemyUoW(session)
        now = datetime.now(timezone.utc)
        alice, bob = uuid.uuid4(), uuid.uuid4()

        conv_id = uuid.uuid4()
        await uow.conversations_w.create(
            Conversation(
                id=conv_id,
                name="Morning check-in",
                product=Product.COMMUNITY,
                permissions=(
                    ConversationPermission.READ_CONVERSATION,
                    ConversationPermission.CREATE_MESSAGE,
                    ConversationPermission.READ_MESSAGE,
                ),
                tags=(),
                blocked_members=(),
                last_message_id=None,
                created_at=now,
                updated_at=now,
            )
        )
        for user_id in (alice, bob):
            await uow.members_w.add(Member(conversation_id=conv_id, user_id=user_id, joined_at=now))

        sleep_tag = Tag(id="sleep", type=TagType.SUB_TOPIC)
        messages_data = [
            (alice, "How did everyone sleep?", (sleep_tag,)),
            (bob, "Not great, woke up twice.", (sleep_tag,)),
            (alice, "Anyone joining the walk later?", ()),
        ]
        await uow.commit()

        for offset, (sender_id, text, tags) in enumerate(messages_data):
            msg = await message_service.create_message(
                conv_id, sender_id, text, None, uow,
                clock=FixedClock(now + timedelta(seconds=offset)),
            )
            if tags:
                await message_service.replace_tags(msg.id, tags, uow)
        await migration_service.backfill_last_message(conv_id, uow)
        logger.info("Seeded conversation %s with %d messages", conv_id, len(messages_data))


def main() -> None:
    configure_logging()
    asyncio.run(seed())


if __name__ == "__main__":
    main()
