"""One-off data migrations over the conversation corpus.

Every step recomputes its target from source data and commits on its own,
so a run can be interrupted and started again from the beginning.
"""
from __future__ import annotations

import logging
import uuid
from collections.abc import Sequence

from conversation_service.application.dto.migration import MigrationResult
from conversation_service.application.exceptions import (
    MigrationsDisabledError,
    UnsupportedScopeError,
)
from conversation_service.application.ports.migrations import MigrationGate
from conversation_service.application.uow import UnitOfWork
from conversation_service.domain.value_objects.enums import Product

logger = logging.getLogger(__name__)

SUPPORTED_MIGRATION_PRODUCT = Product.COMMUNITY
DEFAULT_BATCH_SIZE = 100


def _ensure_allowed(gate: MigrationGate) -> None:
    if not gate.migrations_allowed():
        raise MigrationsDisabledError("Migrations are not enabled")


async def migrate_permissions(
    permissions: Sequence[str],
    product: str,
    conversation_ids: Sequence[uuid.UUID],
    uow: UnitOfWork,
    gate: MigrationGate,
) -> MigrationResult:
    """Overwrite the permission set of each listed conversation.

    Only the community product is supported. Unknown conversation ids are
    skipped, not treated as failures.
    """
    _ensure_allowed(gate)
    if product != SUPPORTED_MIGRATION_PRODUCT:
        raise UnsupportedScopeError(
            f"Migrations are currently allowed only for {SUPPORTED_MIGRATION_PRODUCT}"
        )

    new_permissions = tuple(dict.fromkeys(permissions))
    result = MigrationResult()
    for conversation_id in dict.fromkeys(conversation_ids):
        result.processed += 1
        try:
            if not await uow.conversations.exists(conversation_id):
                result.skipped += 1
                continue
            await uow.conversations_w.set_permissions(conversation_id, new_permissions)
            await uow.commit()
            result.updated += 1
        except Exception as exc:
            logger.exception("Permission migration failed for conversation %s", conversation_id)
            await uow.rollback()
            result.record_failure(conversation_id, exc)

    logger.info(
        "Permission migration done: processed=%d updated=%d skipped=%d failed=%d",
        result.processed, result.updated, result.skipped, result.failed,
    )
    return result


async def backfill_last_message(conversation_id: uuid.UUID, uow: UnitOfWork) -> uuid.UUID | None:
    """Point the conversation at its newest non-deleted message, or clear the pointer."""
    latest = await uow.messages.get_latest(conversation_id)
    last_message_id = latest.id if latest is not None else None
    await uow.conversations_w.set_last_message(conversation_id, last_message_id)
    await uow.commit()
    return last_message_id


async def migrate_last_messages_for_every_conversation(
    uow: UnitOfWork,
    gate: MigrationGate,
    batch_size: int = DEFAULT_BATCH_SIZE,
) -> MigrationResult:
    _ensure_allowed(gate)

    result = MigrationResult()
    after: uuid.UUID | None = None
    while True:
        batch = await uow.conversations.list_ids(after=after, limit=batch_size)
        if not batch:
            break
        for conversation_id in batch:
            result.processed += 1
            try:
                await backfill_last_message(conversation_id, uow)
                result.updated += 1
            except Exception as exc:
                logger.exception("Last message backfill failed for conversation %s", conversation_id)
                await uow.rollback()
                result.record_failure(conversation_id, exc)
        after = batch[-1]
        logger.debug("Last message backfill progressed to %s (%d so far)", after, result.processed)

    logger.info(
        "Last message backfill done: processed=%d updated=%d failed=%d",
        result.processed, result.updated, result.failed,
    )
    return result
