from __future__ import annotations

from conversation_service.domain.entities.conversation import Conversation
from conversation_service.domain.value_objects.tag import Tag
from conversation_service.infrastructure.db.models.conversation import ConversationModel


def model_to_entity(model: ConversationModel) -> Conversation:
    return Conversation(
        id=model.id,
        name=model.name,
        product=model.product,
        permissions=tuple(model.permissions or []),
        tags=tuple(Tag.from_dict(t) for t in model.tags or []),
        blocked_members=tuple(model.blocked_members or []),
        last_message_id=model.last_message_id,
        created_at=model.created_at,
        updated_at=model.updated_at,
        direct=model.direct,
    )


def entity_to_model(entity: Conversation) -> ConversationModel:
    return ConversationModel(
        id=entity.id,
        name=entity.name,
        product=entity.product,
        permissions=list(entity.permissions),
        tags=[t.to_dict() for t in entity.tags],
        blocked_members=list(entity.blocked_members),
        last_message_id=entity.last_message_id,
        created_at=entity.created_at,
        updated_at=entity.updated_at,
        direct=entity.direct,
    )
