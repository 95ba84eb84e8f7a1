from __future__ import annotations

from uuid import UUID

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from conversation_service.domain.entities.conversation import Conversation
from conversation_service.domain.value_objects.tag import Tag
from conversation_service.infrastructure.db.mappers import conversation as mapper
from conversation_service.infrastructure.db.models.conversation import ConversationModel
from conversation_service.infrastructure.db.models.member import MemberModel


class ConversationReaderRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get_by_id(self, conversation_id: UUID) -> Conversation | None:
        stmt = (
            select(ConversationModel)
            .where(ConversationModel.id == conversation_id)
            .execution_options(populate_existing=True)
        )
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return mapper.model_to_entity(model) if model else None

    async def exists(self, conversation_id: UUID) -> bool:
        stmt = (
            select(ConversationModel.id)
            .where(ConversationModel.id == conversation_id)
            .limit(1)
        )
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none() is not None

    async def list_ids(
        self,
        *,
        after: UUID | None = None,
        limit: int = 100,
    ) -> list[UUID]:
        stmt = select(ConversationModel.id).order_by(ConversationModel.id).limit(limit)
        if after is not None:
            stmt = stmt.where(ConversationModel.id > after)
        result = await self._session.execute(stmt)
        return list(result.scalars().all())

    async def find_direct(
        self,
        product: str,
        user_id: UUID,
        other_user_id: UUID,
    ) -> Conversation | None:
        def _joined(uid: UUID):
            return select(MemberModel.conversation_id).where(MemberModel.user_id == uid)

        stmt = (
            select(ConversationModel)
            .where(
                ConversationModel.direct.is_(True),
                ConversationModel.product == product,
                ConversationModel.id.in_(_joined(user_id)),
                ConversationModel.id.in_(_joined(other_user_id)),
            )
            .order_by(ConversationModel.created_at, ConversationModel.id)
            .limit(1)
        )
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return mapper.model_to_entity(model) if model else None


class ConversationWriterRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def create(self, conversation: Conversation) -> Conversation:
        model = mapper.entity_to_model(conversation)
        self._session.add(model)
        await self._session.flush()
        return mapper.model_to_entity(model)

    async def _update(self, conversation_id: UUID, *where: object, **values: object) -> None:
        stmt = (
            update(ConversationModel)
            .where(ConversationModel.id == conversation_id, *where)
            .values(updated_at=func.now(), **values)
            .execution_options(synchronize_session=False)
        )
        await self._session.execute(stmt)

    async def set_tags(self, conversation_id: UUID, tags: tuple[Tag, ...]) -> None:
        await self._update(conversation_id, tags=[t.to_dict() for t in tags])

    async def set_permissions(
        self,
        conversation_id: UUID,
        permissions: tuple[str, ...],
    ) -> None:
        await self._update(conversation_id, permissions=list(permissions))

    async def block_member(self, conversation_id: UUID, user_id: UUID) -> None:
        await self._update(
            conversation_id,
            ~ConversationModel.blocked_members.contains([user_id]),
            blocked_members=func.array_append(ConversationModel.blocked_members, user_id),
        )

    async def unblock_member(self, conversation_id: UUID, user_id: UUID) -> None:
        await self._update(
            conversation_id,
            ConversationModel.blocked_members.contains([user_id]),
            blocked_members=func.array_remove(ConversationModel.blocked_members, user_id),
        )

    async def set_last_message(
        self,
        conversation_id: UUID,
        message_id: UUID | None,
    ) -> None:
        await self._update(
            conversation_id,
            ConversationModel.last_message_id.is_distinct_from(message_id),
            last_message_id=message_id,
        )
