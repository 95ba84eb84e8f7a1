from __future__ import annotations

from datetime import datetime
from uuid import UUID

from sqlalchemy import delete, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from conversation_service.domain.entities.member import Member
from conversation_service.infrastructure.db.mappers import member as mapper
from conversation_service.infrastructure.db.models.member import MemberModel


class MemberReaderRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get(self, conversation_id: UUID, user_id: UUID) -> Member | None:
        stmt = (
            select(MemberModel)
            .where(
                MemberModel.conversation_id == conversation_id,
                MemberModel.user_id == user_id,
            )
            .execution_options(populate_existing=True)
        )
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return mapper.model_to_entity(model) if model else None

    async def list_members(self, conversation_id: UUID) -> list[Member]:
        stmt = (
            select(MemberModel)
            .where(MemberModel.conversation_id == conversation_id)
            .order_by(MemberModel.joined_at)
        )
        result = await self._session.execute(stmt)
        return [mapper.model_to_entity(m) for m in result.scalars().all()]


class MemberWriterRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def add(self, member: Member) -> None:
        model = mapper.entity_to_model(member)
        self._session.add(model)
        await self._session.flush()

    async def remove(self, conversation_id: UUID, user_id: UUID) -> None:
        stmt = (
            delete(MemberModel)
            .where(
                MemberModel.conversation_id == conversation_id,
                MemberModel.user_id == user_id,
            )
            .execution_options(synchronize_session=False)
        )
        await self._session.execute(stmt)

    async def advance_last_read(
        self,
        conversation_id: UUID,
        user_id: UUID,
        ts: datetime,
    ) -> None:
        stmt = (
            update(MemberModel)
            .where(
                MemberModel.conversation_id == conversation_id,
                MemberModel.user_id == user_id,
                or_(MemberModel.last_read_at.is_(None), MemberModel.last_read_at < ts),
            )
            .values(last_read_at=ts)
            .execution_options(synchronize_session=False)
        )
        await self._session.execute(stmt)
