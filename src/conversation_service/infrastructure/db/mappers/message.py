from __future__ import annotations

from conversation_service.domain.entities.message import Message
from conversation_service.domain.value_objects.tag import Tag
from conversation_service.infrastructure.db.models.message import MessageModel


def model_to_entity(model: MessageModel) -> Message:
    return Message(
        id=model.id,
        conversation_id=model.conversation_id,
        sender_id=model.sender_id,
        text=model.text,
        rich_content=model.rich_content,
        created_at=model.created_at,
        tags=tuple(Tag.from_dict(t) for t in model.tags or []),
        likes=tuple(model.likes or []),
        reactions=tuple(model.reactions or []),
        resolved=model.resolved,
        deleted=model.deleted,
    )


def entity_to_model(entity: Message) -> MessageModel:
    return MessageModel(
        id=entity.id,
        conversation_id=entity.conversation_id,
        sender_id=entity.sender_id,
        text=entity.text,
        rich_content=entity.rich_content,
        created_at=entity.created_at,
        tags=[t.to_dict() for t in entity.tags],
        likes=list(entity.likes),
        reactions=list(entity.reactions),
        resolved=entity.resolved,
        deleted=entity.deleted,
    )
