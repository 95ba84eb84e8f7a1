from __future__ import annotations

from typing import Generic, TypeVar

from pydantic import BaseModel

from conversation_service.domain.value_objects.enums import TagType

T = TypeVar("T")


class PaginatedResponse(BaseModel, Generic[T]):
    items: list[T]  # type: ignore[type-var]
    next_cursor: str | None = None


class TagSchema(BaseModel):
    id: str
    type: TagType

    model_config = {"from_attributes": True}
