from __future__ import annotations

from dataclasses import dataclass, field
from uuid import UUID


@dataclass(frozen=True, slots=True)
class MigrationFailure:
    conversation_id: UUID
    reason: str


@dataclass(slots=True)
class MigrationResult:
    """Summary of a batch migration run."""

    processed: int = 0
    updated: int = 0
    skipped: int = 0
    failed: int = 0
    failures: list[MigrationFailure] = field(default_factory=list)

    def record_failure(self, conversation_id: UUID, exc: Exception) -> None:
        self.failed += 1
        self.failures.append(MigrationFailure(conversation_id, str(exc) or type(exc).__name__))
