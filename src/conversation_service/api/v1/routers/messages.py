from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, status

from conversation_service.api.deps import UoWDep, require_api_key
from conversation_service.api.v1.schemas.common import TagSchema
from conversation_service.api.v1.schemas.message import (
    CreateMessageRequest,
    MessageResponse,
    ResolveMessageRequest,
)
from conversation_service.domain.value_objects.tag import Tag
from conversation_service.services import message_service

router = APIRouter(
    prefix="/api/v1/chat/messages",
    tags=["messages"],
    dependencies=[Depends(require_api_key)],
)


@router.post("", response_model=MessageResponse, status_code=status.HTTP_201_CREATED)
async def create_message(body: CreateMessageRequest, uow: UoWDep) -> MessageResponse:
    rich_content = (
        body.rich_content.model_dump(mode="json", by_alias=True, exclude_none=True)
        if body.rich_content is not None
        else None
    )
    msg = await message_service.create_message(
        body.conversation_id, body.sender_id, body.text, rich_content, uow,
    )
    return MessageResponse.model_validate(msg, from_attributes=True)


@router.get("/{message_id}", response_model=MessageResponse)
async def get_message(message_id: UUID, uow: UoWDep) -> MessageResponse:
    msg = await message_service.get_message(message_id, uow)
    return MessageResponse.model_validate(msg, from_attributes=True)


@router.delete("/{message_id}", response_model=MessageResponse)
async def delete_message(message_id: UUID, uow: UoWDep) -> MessageResponse:
    msg = await message_service.delete_message(message_id, uow)
    return MessageResponse.model_validate(msg, from_attributes=True)


@router.put("/{message_id}/tags", response_model=MessageResponse)
async def replace_tags(
    message_id: UUID,
    tags: list[TagSchema],
    uow: UoWDep,
) -> MessageResponse:
    msg = await message_service.replace_tags(
        message_id, [Tag(id=t.id, type=t.type) for t in tags], uow,
    )
    return MessageResponse.model_validate(msg, from_attributes=True)


@router.put("/{message_id}/resolved", response_model=MessageResponse)
async def resolve_message(
    message_id: UUID,
    body: ResolveMessageRequest,
    uow: UoWDep,
) -> MessageResponse:
    msg = await message_service.resolve_message(message_id, body.resolved, uow)
    return MessageResponse.model_validate(msg, from_attributes=True)
