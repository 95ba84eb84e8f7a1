from __future__ import annotations

from uuid import UUID

from pydantic import BaseModel

from conversation_service.domain.value_objects.enums import ConversationPermission


class MigratePermissionsRequest(BaseModel):
    permissions: list[ConversationPermission]
    product: str
    conversation_ids: list[UUID]


class MigrationFailureResponse(BaseModel):
    conversation_id: UUID
    reason: str

    model_config = {"from_attributes": True}


class MigrationResultResponse(BaseModel):
    processed: int
    updated: int
    skipped: int
    failed: int
    failures: list[MigrationFailureResponse]

    model_config = {"from_attributes": True}
