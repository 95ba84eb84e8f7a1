"""Shared test fixtures."""
from __future__ import annotations

import dataclasses
import uuid
from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from uuid import UUID

import pytest

from conversation_service.application.policies.tag_filter import TagFilter
from conversation_service.domain.entities.conversation import Conversation
from conversation_service.domain.entities.member import Member
from conversation_service.domain.entities.message import Message
from conversation_service.domain.value_objects.enums import Product
from conversation_service.domain.value_objects.tag import Tag
from conversation_service.infrastructure.db.repositories._cursor import decode_cursor

T0 = datetime(2024, 3, 1, 9, 0, tzinfo=timezone.utc)


def at(minutes: int) -> datetime:
    """Timestamp ``minutes`` after T0."""
    return T0 + timedelta(minutes=minutes)


@pytest.fixture
def user_id() -> UUID:
    return uuid.uuid4()


def make_conversation(
    *,
    conversation_id: UUID | None = None,
    product: str = Product.COMMUNITY,
    permissions: tuple[str, ...] = (),
    blocked_members: tuple[UUID, ...] = (),
    last_message_id: UUID | None = None,
    direct: bool = False,
) -> Conversation:
    now = datetime.now(timezone.utc)
    return Conversation(
        id=conversation_id or uuid.uuid4(),
        name="General",
        product=product,
        permissions=permissions,
        tags=(),
        blocked_members=blocked_members,
        last_message_id=last_message_id,
        created_at=now,
        updated_at=now,
        direct=direct,
    )


def make_message(
    *,
    conversation_id: UUID | None = None,
    sender_id: UUID | None = None,
    created_at: datetime | None = None,
    tags: tuple[Tag, ...] = (),
    deleted: bool = False,
    text: str = "hello",
) -> Message:
    return Message(
        id=uuid.uuid4(),
        conversation_id=conversation_id or uuid.uuid4(),
        sender_id=sender_id or uuid.uuid4(),
        text=text,
        rich_content=None,
        created_at=created_at or datetime.now(timezone.utc),
        tags=tags,
        deleted=deleted,
    )


@dataclass
class FakeConversationReader:
    _store: dict[UUID, Conversation] = field(default_factory=dict)
    _members: list[Member] = field(default_factory=list)

    async def get_by_id(self, conversation_id: UUID) -> Conversation | None:
        return self._store.get(conversation_id)

    async def exists(self, conversation_id: UUID) -> bool:
        return conversation_id in self._store

    async def list_ids(self, *, after: UUID | None = None, limit: int = 100) -> list[UUID]:
        ids = sorted(self._store)
        if after is not None:
            ids = [cid for cid in ids if cid > after]
        return ids[:limit]

    async def find_direct(self, product: str, user_id: UUID, other_user_id: UUID) -> Conversation | None:
        def joined(uid: UUID) -> set[UUID]:
            return {m.conversation_id for m in self._members if m.user_id == uid}

        shared = joined(user_id) & joined(other_user_id)
        found = [
            c for c in self._store.values()
            if c.direct and c.product == product and c.id in shared
        ]
        return min(found, key=lambda c: (c.created_at, c.id)) if found else None


@dataclass
class FakeConversationWriter:
    _reader: FakeConversationReader
    fail_for: set[UUID] = field(default_factory=set)

    def _replace(self, conversation_id: UUID, **changes: object) -> None:
        if conversation_id in self.fail_for:
            raise RuntimeError(f"write failed for {conversation_id}")
        current = self._reader._store.get(conversation_id)
        if current is None:
            return
        updated = dataclasses.replace(current, **changes)
        if updated != current:
            self._reader._store[conversation_id] = dataclasses.replace(
                updated, updated_at=datetime.now(timezone.utc),
            )

    async def create(self, conversation: Conversation) -> Conversation:
        self._reader._store[conversation.id] = conversation
        return conversation

    async def set_tags(self, conversation_id: UUID, tags: tuple[Tag, ...]) -> None:
        self._replace(conversation_id, tags=tags)

    async def set_permissions(self, conversation_id: UUID, permissions: tuple[str, ...]) -> None:
        self._replace(conversation_id, permissions=permissions)

    async def block_member(self, conversation_id: UUID, user_id: UUID) -> None:
        current = self._reader._store[conversation_id]
        if user_id not in current.blocked_members:
            self._replace(conversation_id, blocked_members=current.blocked_members + (user_id,))

    async def unblock_member(self, conversation_id: UUID, user_id: UUID) -> None:
        current = self._reader._store[conversation_id]
        self._replace(
            conversation_id,
            blocked_members=tuple(u for u in current.blocked_members if u != user_id),
        )

    async def set_last_message(self, conversation_id: UUID, message_id: UUID | None) -> None:
        self._replace(conversation_id, last_message_id=message_id)


@dataclass
class FakeMemberReader:
    _members: list[Member] = field(default_factory=list)

    async def get(self, conversation_id: UUID, user_id: UUID) -> Member | None:
        for m in self._members:
            if m.conversation_id == conversation_id and m.user_id == user_id:
                return m
        return None

    async def list_members(self, conversation_id: UUID) -> list[Member]:
        return [m for m in self._members if m.conversation_id == conversation_id]


@dataclass
class FakeMemberWriter:
    _reader: FakeMemberReader

    async def add(self, member: Member) -> None:
        self._reader._members.append(member)

    async def remove(self, conversation_id: UUID, user_id: UUID) -> None:
        self._reader._members[:] = [
            m for m in self._reader._members
            if not (m.conversation_id == conversation_id and m.user_id == user_id)
        ]

    async def advance_last_read(self, conversation_id: UUID, user_id: UUID, ts: datetime) -> None:
        for i, m in enumerate(self._reader._members):
            if m.conversation_id == conversation_id and m.user_id == user_id:
                if m.last_read_at is None or m.last_read_at < ts:
                    self._reader._members[i] = dataclasses.replace(m, last_read_at=ts)


def _timeline_key(m: Message) -> tuple[datetime, UUID]:
    return m.created_at, m.id


@dataclass
class FakeMessageReader:
    _messages: list[Message] = field(default_factory=list)

    async def get_by_id(self, message_id: UUID) -> Message | None:
        for m in self._messages:
            if m.id == message_id:
                return m
        return None

    async def list_messages(self, conversation_id: UUID, *, cursor: str | None = None, limit: int = 40) -> list[Message]:
        msgs = sorted(
            (m for m in self._messages if m.conversation_id == conversation_id),
            key=_timeline_key,
        )
        if cursor:
            position = decode_cursor(cursor)
            msgs = [m for m in msgs if _timeline_key(m) > position]
        return msgs[:limit]

    async def list_in_window(
        self,
        conversation_ids: Sequence[UUID],
        start: datetime,
        end: datetime,
        *,
        tag_filter: TagFilter | None = None,
    ) -> list[Message]:
        ids = set(conversation_ids)
        return sorted(
            (
                m for m in self._messages
                if m.conversation_id in ids
                and start <= m.created_at <= end
                and not m.deleted
                and (tag_filter is None or tag_filter.matches(m.tags))
            ),
            key=_timeline_key,
        )

    async def count_unread(self, conversation_id: UUID, user_id: UUID, *, after: datetime | None) -> int:
        return sum(
            1 for m in self._messages
            if m.conversation_id == conversation_id
            and m.sender_id != user_id
            and (after is None or m.created_at > after)
        )

    async def get_latest(self, conversation_id: UUID) -> Message | None:
        msgs = [m for m in self._messages if m.conversation_id == conversation_id and not m.deleted]
        return max(msgs, key=_timeline_key) if msgs else None


@dataclass
class FakeMessageWriter:
    _reader: FakeMessageReader

    def _replace(self, message_id: UUID, **changes: object) -> Message | None:
        for i, m in enumerate(self._reader._messages):
            if m.id == message_id:
                updated = dataclasses.replace(m, **changes)
                self._reader._messages[i] = updated
                return updated
        return None

    async def create(self, message: Message) -> Message:
        self._reader._messages.append(message)
        return message

    async def mark_deleted(self, message_id: UUID) -> Message | None:
        return self._replace(message_id, deleted=True)

    async def set_tags(self, message_id: UUID, tags: tuple[Tag, ...]) -> Message | None:
        return self._replace(message_id, tags=tags)

    async def set_resolved(self, message_id: UUID, resolved: bool) -> Message | None:
        return self._replace(message_id, resolved=resolved)


@dataclass
class FakeUoW:
    """In-memory UoW for unit tests."""
    conversations: FakeConversationReader = field(default_factory=FakeConversationReader)
    conversations_w: FakeConversationWriter | None = None
    members: FakeMemberReader = field(default_factory=FakeMemberReader)
    members_w: FakeMemberWriter | None = None
    messages: FakeMessageReader = field(default_factory=FakeMessageReader)
    messages_w: FakeMessageWriter | None = None
    commits: int = 0
    rollbacks: int = 0

    def __post_init__(self) -> None:
        self.conversations._members = self.members._members
        if self.conversations_w is None:
            self.conversations_w = FakeConversationWriter(self.conversations)
        if self.members_w is None:
            self.members_w = FakeMemberWriter(self.members)
        if self.messages_w is None:
            self.messages_w = FakeMessageWriter(self.messages)

    def add_conversation(self, conversation: Conversation | None = None) -> Conversation:
        conversation = conversation or make_conversation()
        self.conversations._store[conversation.id] = conversation
        return conversation

    def add_messages(self, *messages: Message) -> None:
        self.messages._messages.extend(messages)

    async def flush(self) -> None:
        pass

    async def commit(self) -> None:
        self.commits += 1

    async def rollback(self) -> None:
        self.rollbacks += 1


@pytest.fixture
def uow() -> FakeUoW:
    return FakeUoW()
