from __future__ import annotations

import uuid

import pytest

from conversation_service.application.exceptions import ForbiddenError, NotFoundError
from conversation_service.application.ports.clock import FixedClock
from conversation_service.domain.value_objects.enums import TagType
from conversation_service.domain.value_objects.tag import Tag
from conversation_service.services import message_service
from tests.conftest import T0, make_conversation, make_message

TAG1 = Tag("tag1", TagType.SUB_TOPIC)
TAG2 = Tag("tag2", TagType.SUB_TOPIC)


@pytest.mark.asyncio
async def test_create_message_initialises_defaults(uow, user_id):
    conv = uow.add_conversation()

    msg = await message_service.create_message(
        conv.id, user_id, "Hello world", None, uow, clock=FixedClock(T0),
    )

    assert msg.conversation_id == conv.id
    assert msg.sender_id == user_id
    assert msg.text == "Hello world"
    assert msg.created_at == T0
    assert msg.tags == ()
    assert msg.likes == ()
    assert msg.reactions == ()
    assert msg.resolved is False
    assert msg.deleted is False
    assert uow.commits == 1


@pytest.mark.asyncio
async def test_create_message_keeps_rich_content_opaque(uow, user_id):
    conv = uow.add_conversation()
    rich = {"poll": {"question": "Tea or coffee?", "options": []}}

    msg = await message_service.create_message(conv.id, user_id, "", rich, uow)

    assert msg.rich_content == rich


@pytest.mark.asyncio
async def test_create_message_unknown_conversation(uow, user_id):
    with pytest.raises(NotFoundError):
        await message_service.create_message(uuid.uuid4(), user_id, "hi", None, uow)
    assert uow.commits == 0


@pytest.mark.asyncio
async def test_create_message_rejected_for_blocked_user(uow, user_id):
    conv = uow.add_conversation(make_conversation(blocked_members=(user_id,)))

    with pytest.raises(ForbiddenError):
        await message_service.create_message(conv.id, user_id, "hi", None, uow)


@pytest.mark.asyncio
async def test_get_message_not_found(uow):
    with pytest.raises(NotFoundError):
        await message_service.get_message(uuid.uuid4(), uow)


@pytest.mark.asyncio
async def test_get_message_returns_deleted_message(uow):
    msg = make_message(deleted=True)
    uow.add_messages(msg)

    got = await message_service.get_message(msg.id, uow)

    assert got.id == msg.id
    assert got.deleted is True


@pytest.mark.asyncio
async def test_delete_message_is_idempotent(uow):
    msg = make_message()
    uow.add_messages(msg)

    first = await message_service.delete_message(msg.id, uow)
    second = await message_service.delete_message(msg.id, uow)

    assert first.deleted is True
    assert second.deleted is True
    assert uow.commits == 1
    assert (await message_service.get_message(msg.id, uow)).deleted is True


@pytest.mark.asyncio
async def test_delete_message_not_found(uow):
    with pytest.raises(NotFoundError):
        await message_service.delete_message(uuid.uuid4(), uow)


@pytest.mark.asyncio
async def test_replace_tags_overwrites_and_collapses_duplicates(uow):
    msg = make_message(tags=(Tag("old", TagType.SUB_TOPIC),))
    uow.add_messages(msg)

    updated = await message_service.replace_tags(msg.id, [TAG1, TAG2, TAG1], uow)

    assert set(updated.tags) == {TAG1, TAG2}
    assert len(updated.tags) == 2


@pytest.mark.asyncio
async def test_replace_tags_with_subset_drops_only_missing_members(uow):
    msg = make_message()
    uow.add_messages(msg)

    await message_service.replace_tags(msg.id, [TAG1, TAG2], uow)
    updated = await message_service.replace_tags(msg.id, [TAG1], uow)

    assert set(updated.tags) == {TAG1}


@pytest.mark.asyncio
async def test_replace_tags_twice_with_same_set_is_stable(uow):
    msg = make_message()
    uow.add_messages(msg)

    first = await message_service.replace_tags(msg.id, [TAG1, TAG2], uow)
    second = await message_service.replace_tags(msg.id, [TAG1, TAG2], uow)

    assert set(first.tags) == set(second.tags) == {TAG1, TAG2}


@pytest.mark.asyncio
async def test_replace_tags_with_empty_set_clears(uow):
    msg = make_message(tags=(TAG1,))
    uow.add_messages(msg)

    updated = await message_service.replace_tags(msg.id, [], uow)

    assert updated.tags == ()


@pytest.mark.asyncio
async def test_replace_tags_not_found(uow):
    with pytest.raises(NotFoundError):
        await message_service.replace_tags(uuid.uuid4(), [TAG1], uow)


@pytest.mark.asyncio
async def test_resolve_message_toggles_flag(uow):
    msg = make_message()
    uow.add_messages(msg)

    resolved = await message_service.resolve_message(msg.id, True, uow)
    reopened = await message_service.resolve_message(msg.id, False, uow)

    assert resolved.resolved is True
    assert reopened.resolved is False


@pytest.mark.asyncio
async def test_list_messages_includes_deleted_in_timeline_order(uow):
    conv = uow.add_conversation()
    later = make_message(conversation_id=conv.id, created_at=T0.replace(hour=12))
    earlier = make_message(conversation_id=conv.id, created_at=T0, deleted=True)
    uow.add_messages(later, earlier)

    result = await message_service.list_messages(conv.id, None, 40, uow)

    assert [m.id for m in result] == [earlier.id, later.id]


@pytest.mark.asyncio
async def test_list_messages_unknown_conversation(uow):
    with pytest.raises(NotFoundError):
        await message_service.list_messages(uuid.uuid4(), None, 40, uow)
