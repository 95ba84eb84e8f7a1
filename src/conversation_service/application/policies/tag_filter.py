from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from conversation_service.application.exceptions import ValidationError
from conversation_service.domain.value_objects.enums import TagType
from conversation_service.domain.value_objects.tag import Tag


@dataclass(frozen=True, slots=True)
class TagFilter:
    tag_id: str
    tag_type: TagType

    @property
    def tag(self) -> Tag:
        return Tag(id=self.tag_id, type=self.tag_type)

    def matches(self, tags: Iterable[Tag]) -> bool:
        """True if any tag equals both the filter id and type."""
        return any(t.id == self.tag_id and t.type == self.tag_type for t in tags)


def build_tag_filter(tag_id: str | None, tag_type: str | None) -> TagFilter | None:
    """Turn optional query values into a filter, or None when no filtering is requested."""
    if tag_id is None and tag_type is None:
        return None
    if tag_id is None or tag_type is None:
        raise ValidationError("tag_id and tag_type must be supplied together")
    if tag_type not in TagType.__members__.values():
        available = ", ".join(t.value for t in TagType)
        raise ValidationError(f"Invalid tag type. Available tag types are [{available}]")
    return TagFilter(tag_id=tag_id, tag_type=TagType(tag_type))
