from __future__ import annotations

from fastapi import APIRouter, Depends

from conversation_service.api.deps import MigrationGateDep, UoWDep, require_api_key
from conversation_service.api.v1.schemas.migration import (
    MigratePermissionsRequest,
    MigrationResultResponse,
)
from conversation_service.config import settings
from conversation_service.services import migration_service

router = APIRouter(
    prefix="/api/v1/chat/migrations",
    tags=["migrations"],
    dependencies=[Depends(require_api_key)],
)


@router.post("/permissions", response_model=MigrationResultResponse)
async def migrate_permissions(
    body: MigratePermissionsRequest,
    uow: UoWDep,
    gate: MigrationGateDep,
) -> MigrationResultResponse:
    result = await migration_service.migrate_permissions(
        [p.value for p in body.permissions],
        body.product,
        body.conversation_ids,
        uow,
        gate,
    )
    return MigrationResultResponse.model_validate(result, from_attributes=True)


@router.post("/last-messages", response_model=MigrationResultResponse)
async def migrate_last_messages(
    uow: UoWDep,
    gate: MigrationGateDep,
) -> MigrationResultResponse:
    result = await migration_service.migrate_last_messages_for_every_conversation(
        uow, gate, batch_size=settings.MIGRATION_BATCH_SIZE,
    )
    return MigrationResultResponse.model_validate(result, from_attributes=True)
