from __future__ import annotations

from conversation_service.domain.entities.member import Member
from conversation_service.infrastructure.db.models.member import MemberModel


def model_to_entity(model: MemberModel) -> Member:
    return Member(
        conversation_id=model.conversation_id,
        user_id=model.user_id,
        joined_at=model.joined_at,
        last_read_at=model.last_read_at,
    )


def entity_to_model(entity: Member) -> MemberModel:
    return MemberModel(
        conversation_id=entity.conversation_id,
        user_id=entity.user_id,
        joined_at=entity.joined_at,
        last_read_at=entity.last_read_at,
    )
