from __future__ import annotations

from typing import Protocol


class MigrationGate(Protocol):
    def migrations_allowed(self) -> bool: ...


class StaticMigrationGate:
    """Gate with a fixed answer, typically built from settings."""

    def __init__(self, allowed: bool) -> None:
        self._allowed = allowed

    def migrations_allowed(self) -> bool:
        return self._allowed
