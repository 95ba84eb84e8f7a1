"""Backfill conversations.last_message_id from the messages table.

Safe to re-run: every conversation is recomputed from its messages.
"""
from __future__ import annotations

import argparse
import asyncio
import logging

from conversation_service.application.ports.migrations import StaticMigrationGate
from conversation_service.config import settings
from conversation_service.infrastructure.db.session import AsyncSessionLocal, engine
from conversation_service.infrastructure.db.uow import SqlAlchemyUoW
from conversation_service.logging_config import configure_logging
from conversation_service.services import migration_service

logger = logging.getLogger(__name__)


async def run(batch_size: int) -> int:
    try:
        async with AsyncSessionLocal() as session:
            uow = SqlAlchemyUoW(session)
            result = await migration_service.migrate_last_messages_for_every_conversation(
                uow,
                StaticMigrationGate(settings.ALLOW_MIGRATIONS),
                batch_size=batch_size,
            )
    finally:
        await engine.dispose()

    for failure in result.failures:
        logger.error("Conversation %s not migrated: %s", failure.conversation_id, failure.reason)
    return 1 if result.failed else 0


def main() -> None:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--batch-size", type=int, default=settings.MIGRATION_BATCH_SIZE)
    args = parser.parse_args()

    configure_logging(settings.LOG_LEVEL)
    raise SystemExit(asyncio.run(run(args.batch_size)))


if __name__ == "__main__":
    main()
