from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime
from uuid import UUID

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from conversation_service.application.policies.tag_filter import TagFilter
from conversation_service.domain.entities.message import Message
from conversation_service.domain.value_objects.tag import Tag
from conversation_service.infrastructure.db.mappers import message as mapper
from conversation_service.infrastructure.db.models.message import MessageModel
from conversation_service.infrastructure.db.repositories._cursor import decode_cursor


class MessageReaderRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get_by_id(self, message_id: UUID) -> Message | None:
        stmt = (
            select(MessageModel)
            .where(MessageModel.id == message_id)
            .execution_options(populate_existing=True)
        )
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return mapper.model_to_entity(model) if model else None

    async def list_messages(
        self,
        conversation_id: UUID,
        *,
        cursor: str | None = None,
        limit: int = 40,
    ) -> list[Message]:
        stmt = (
            select(MessageModel)
            .where(MessageModel.conversation_id == conversation_id)
            .order_by(MessageModel.created_at.asc(), MessageModel.id.asc())
            .limit(limit)
        )
        if cursor:
            ts, mid = decode_cursor(cursor)
            stmt = stmt.where(
                (MessageModel.created_at > ts)
                | ((MessageModel.created_at == ts) & (MessageModel.id > mid))
            )
        result = await self._session.execute(stmt)
        return [mapper.model_to_entity(m) for m in result.scalars().all()]

    async def list_in_window(
        self,
        conversation_ids: Sequence[UUID],
        start: datetime,
        end: datetime,
        *,
        tag_filter: TagFilter | None = None,
    ) -> list[Message]:
        stmt = (
            select(MessageModel)
            .where(
                MessageModel.conversation_id.in_(list(conversation_ids)),
                MessageModel.created_at >= start,
                MessageModel.created_at <= end,
                MessageModel.deleted.is_(False),
            )
            .order_by(MessageModel.created_at.asc(), MessageModel.id.asc())
        )
        if tag_filter is not None:
            # JSONB containment: tags @> '[{"id": ..., "type": ...}]'
            stmt = stmt.where(MessageModel.tags.contains([tag_filter.tag.to_dict()]))
        result = await self._session.execute(stmt)
        return [mapper.model_to_entity(m) for m in result.scalars().all()]

    async def count_unread(
        self,
        conversation_id: UUID,
        user_id: UUID,
        *,
        after: datetime | None,
    ) -> int:
        stmt = select(func.count()).select_from(MessageModel).where(
            MessageModel.conversation_id == conversation_id,
            MessageModel.sender_id != user_id,
        )
        if after is not None:
            stmt = stmt.where(MessageModel.created_at > after)
        result = await self._session.execute(stmt)
        return int(result.scalar_one())

    async def get_latest(self, conversation_id: UUID) -> Message | None:
        stmt = (
            select(MessageModel)
            .where(
                MessageModel.conversation_id == conversation_id,
                MessageModel.deleted.is_(False),
            )
            .order_by(MessageModel.created_at.desc(), MessageModel.id.desc())
            .limit(1)
        )
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return mapper.model_to_entity(model) if model else None


class MessageWriterRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def create(self, message: Message) -> Message:
        model = mapper.entity_to_model(message)
        self._session.add(model)
        await self._session.flush()
        return mapper.model_to_entity(model)

    async def _update_returning(self, message_id: UUID, **values: object) -> Message | None:
        stmt = (
            update(MessageModel)
            .where(MessageModel.id == message_id)
            .values(**values)
            .returning(MessageModel)
            .execution_options(synchronize_session=False, populate_existing=True)
        )
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return mapper.model_to_entity(model) if model else None

    async def mark_deleted(self, message_id: UUID) -> Message | None:
        return await self._update_returning(message_id, deleted=True)

    async def set_tags(self, message_id: UUID, tags: tuple[Tag, ...]) -> Message | None:
        return await self._update_returning(message_id, tags=[t.to_dict() for t in tags])

    async def set_resolved(self, message_id: UUID, resolved: bool) -> Message | None:
        return await self._update_returning(message_id, resolved=resolved)
