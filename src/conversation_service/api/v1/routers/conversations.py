from __future__ import annotations

from datetime import datetime, timedelta
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status

from conversation_service.api.deps import UoWDep, require_api_key
from conversation_service.api.v1.schemas.common import PaginatedResponse, TagSchema
from conversation_service.api.v1.schemas.conversation import (
    AddMemberRequest,
    BlockUserRequest,
    ConversationResponse,
    CreateConversationRequest,
    DirectConversationRequest,
    MarkReadRequest,
    MemberResponse,
    UnreadCountResponse,
)
from conversation_service.api.v1.schemas.message import (
    ConversationMessagesResponse,
    MessageResponse,
)
from conversation_service.application.dto.conversation import (
    CreateConversationDTO,
    DirectConversationDTO,
)
from conversation_service.application.exceptions import InvalidRangeError
from conversation_service.application.policies.tag_filter import build_tag_filter
from conversation_service.application.ports.clock import ensure_utc
from conversation_service.config import settings
from conversation_service.domain.value_objects.tag import Tag
from conversation_service.infrastructure.db.repositories._cursor import encode_cursor
from conversation_service.services import (
    aggregation_service,
    conversation_service,
    message_service,
    unread_service,
)

router = APIRouter(
    prefix="/api/v1/chat/conversations",
    tags=["conversations"],
    dependencies=[Depends(require_api_key)],
)


def _parse_date(name: str, value: str) -> datetime:
    try:
        return ensure_utc(datetime.fromisoformat(value))
    except ValueError:
        raise InvalidRangeError(f"Invalid date for {name}: {value!r}") from None


def _check_window(start: datetime, end: datetime) -> None:
    max_days = settings.MESSAGES_MAX_WINDOW_DAYS
    if end - start > timedelta(days=max_days):
        raise InvalidRangeError(f"Duration must be within {max_days} days")


@router.post("", response_model=ConversationResponse, status_code=status.HTTP_201_CREATED)
async def create_conversation(
    body: CreateConversationRequest,
    uow: UoWDep,
) -> ConversationResponse:
    data = CreateConversationDTO(
        name=body.name,
        product=body.product,
        member_ids=body.member_ids,
        permissions=[p.value for p in body.permissions],
        tags=[Tag(id=t.id, type=t.type) for t in body.tags],
    )
    conv = await conversation_service.create_conversation(data, uow)
    return ConversationResponse.model_validate(conv, from_attributes=True)


@router.post("/direct", response_model=ConversationResponse)
async def create_direct_conversation(
    body: DirectConversationRequest,
    uow: UoWDep,
) -> ConversationResponse:
    data = DirectConversationDTO(
        product=body.product,
        user_id=body.user_id,
        other_user_id=body.other_user_id,
        name=body.name,
        permissions=[p.value for p in body.permissions],
    )
    conv = await conversation_service.create_direct_conversation(data, uow)
    return ConversationResponse.model_validate(conv, from_attributes=True)


@router.post("/block-user", response_model=list[ConversationResponse])
async def block_user(body: BlockUserRequest, uow: UoWDep) -> list[ConversationResponse]:
    convs = await conversation_service.block_member(body.conversation_ids, body.member_id, uow)
    return [ConversationResponse.model_validate(c, from_attributes=True) for c in convs]


@router.post("/unblock-user", response_model=list[ConversationResponse])
async def unblock_user(body: BlockUserRequest, uow: UoWDep) -> list[ConversationResponse]:
    convs = await conversation_service.unblock_member(body.conversation_ids, body.member_id, uow)
    return [ConversationResponse.model_validate(c, from_attributes=True) for c in convs]


@router.get("/messages", response_model=list[ConversationMessagesResponse])
async def get_messages_grouped_by_conversation(
    uow: UoWDep,
    conversation_ids: list[UUID] = Query(...),
    start_date: str = Query(...),
    end_date: str = Query(...),
    tag_id: str | None = Query(None),
    tag_type: str | None = Query(None),
) -> list[ConversationMessagesResponse]:
    tag_filter = build_tag_filter(tag_id, tag_type)
    start = _parse_date("start_date", start_date)
    end = _parse_date("end_date", end_date)
    _check_window(start, end)
    groups = await aggregation_service.group_messages_by_conversation(
        conversation_ids, start, end, tag_filter, uow,
    )
    return [ConversationMessagesResponse.model_validate(g, from_attributes=True) for g in groups]


@router.get("/unread-message-count/{user_id}", response_model=list[UnreadCountResponse])
async def get_unread_message_counts(
    user_id: UUID,
    uow: UoWDep,
    conversation_ids: list[UUID] = Query(...),
) -> list[UnreadCountResponse]:
    counts = await unread_service.unread_counts(user_id, conversation_ids, uow)
    return [UnreadCountResponse.model_validate(c, from_attributes=True) for c in counts]


@router.get("/{conversation_id}", response_model=ConversationResponse)
async def get_conversation(conversation_id: UUID, uow: UoWDep) -> ConversationResponse:
    conv = await conversation_service.get_conversation(conversation_id, uow)
    return ConversationResponse.model_validate(conv, from_attributes=True)


@router.put("/{conversation_id}/tags", response_model=ConversationResponse)
async def update_tags(
    conversation_id: UUID,
    tags: list[TagSchema],
    uow: UoWDep,
) -> ConversationResponse:
    conv = await conversation_service.update_tags(
        conversation_id, [Tag(id=t.id, type=t.type) for t in tags], uow,
    )
    return ConversationResponse.model_validate(conv, from_attributes=True)


@router.post("/{conversation_id}/members", response_model=MemberResponse)
async def add_member(
    conversation_id: UUID,
    body: AddMemberRequest,
    uow: UoWDep,
) -> MemberResponse:
    member = await conversation_service.add_member(conversation_id, body.user_id, uow)
    return MemberResponse.model_validate(member, from_attributes=True)


@router.get("/{conversation_id}/members", response_model=list[MemberResponse])
async def list_members(conversation_id: UUID, uow: UoWDep) -> list[MemberResponse]:
    members = await conversation_service.list_members(conversation_id, uow)
    return [MemberResponse.model_validate(m, from_attributes=True) for m in members]


@router.delete("/{conversation_id}/members/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_member(conversation_id: UUID, user_id: UUID, uow: UoWDep) -> None:
    await conversation_service.remove_member(conversation_id, user_id, uow)


@router.post("/{conversation_id}/read", status_code=status.HTTP_204_NO_CONTENT)
async def mark_read(conversation_id: UUID, body: MarkReadRequest, uow: UoWDep) -> None:
    await unread_service.mark_read(conversation_id, body.user_id, body.message_id, uow)


@router.get("/{conversation_id}/messages", response_model=PaginatedResponse[MessageResponse])
async def list_messages(
    conversation_id: UUID,
    uow: UoWDep,
    cursor: str | None = Query(None),
    limit: int = Query(40, ge=1, le=200),
) -> PaginatedResponse[MessageResponse]:
    messages = await message_service.list_messages(conversation_id, cursor, limit, uow)
    next_cursor = (
        encode_cursor(messages[-1].created_at, messages[-1].id)
        if len(messages) == limit
        else None
    )
    return PaginatedResponse[MessageResponse](
        items=[MessageResponse.model_validate(m, from_attributes=True) for m in messages],
        next_cursor=next_cursor,
    )
