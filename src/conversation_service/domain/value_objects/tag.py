from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any

from conversation_service.domain.value_objects.enums import TagType


@dataclass(frozen=True, slots=True)
class Tag:
    id: str
    type: TagType

    def to_dict(self) -> dict[str, str]:
        return {"id": self.id, "type": str(self.type)}

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> Tag:
        return cls(id=str(raw["id"]), type=TagType(raw["type"]))


def unique_tags(tags: Iterable[Tag]) -> tuple[Tag, ...]:
    """Collapse duplicate (id, type) pairs, keeping the first occurrence."""
    return tuple(dict.fromkeys(tags))
