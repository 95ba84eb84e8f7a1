"""FastAPI dependency injection helpers."""
from __future__ import annotations

import hmac
from typing import Annotated, AsyncIterator

from fastapi import Depends, HTTPException, status
from fastapi.security import APIKeyHeader

from conversation_service.application.ports.migrations import MigrationGate, StaticMigrationGate
from conversation_service.config import settings
from conversation_service.infrastructure.db.session import AsyncSessionLocal
from conversation_service.infrastructure.db.uow import SqlAlchemyUoW

_api_key_scheme = APIKeyHeader(name="X-API-KEY", auto_error=False)


async def get_uow() -> AsyncIterator[SqlAlchemyUoW]:
    async with AsyncSessionLocal() as session:
        uow = SqlAlchemyUoW(session)
        try:
            yield uow
        finally:
            await session.close()


UoWDep = Annotated[SqlAlchemyUoW, Depends(get_uow)]


async def require_api_key(
    api_key: Annotated[str | None, Depends(_api_key_scheme)],
) -> None:
    if not settings.API_KEY or api_key is None or not hmac.compare_digest(
        api_key.encode(), settings.API_KEY.encode(),
    ):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or missing API key",
        )


def get_migration_gate() -> MigrationGate:
    return StaticMigrationGate(settings.ALLOW_MIGRATIONS)


MigrationGateDep = Annotated[MigrationGate, Depends(get_migration_gate)]
