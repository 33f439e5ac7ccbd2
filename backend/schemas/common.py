from typing import Generic, List, Literal, Optional, TypeVar

from fastapi import Query
from pydantic import BaseModel, ConfigDict

from repositories.base import ListParams

T = TypeVar("T")


# Base configuration for ORM compatibility
class ORMBase(BaseModel):
    model_config = ConfigDict(from_attributes=True)


# Paginated response wrapper shared by every listing endpoint
class Page(ORMBase, Generic[T]):
    items: List[T]
    total: int
    page: int
    per_page: int
    last_page: int


class Message(BaseModel):
    message: str


def list_params(
    page: int = Query(1, ge=1),
    per_page: Optional[int] = Query(None, ge=1, le=100),
    sort_by: Optional[str] = Query(None, description="Column to sort by"),
    sort_order: Optional[Literal["asc", "desc"]] = Query(None),
) -> ListParams:
    return ListParams(page=page, per_page=per_page, sort_by=sort_by, sort_order=sort_order)


def reject_null(value):
    """Used by update schemas: a supplied field may not be null when its column is required."""
    if value is None:
        raise ValueError("This field may not be null.")
    return value
