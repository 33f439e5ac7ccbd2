"""
Shared plumbing for the per-entity repositories.

Each repository wraps one SQLAlchemy model and receives the request's
Session in its constructor. Routes build the repositories they need
(``CartRepository(db)``); nothing is registered globally.
"""
import math
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from typing import Any, Dict, Iterable, Optional

from sqlalchemy.orm import Query, Session

from utils.errors import NotFoundError

DEFAULT_PER_PAGE = 15
NESTED_PER_PAGE = 10


@dataclass
class ListParams:
    page: int = 1
    per_page: Optional[int] = None
    sort_by: Optional[str] = None
    sort_order: Optional[str] = None


class BaseRepository:
    model = None
    resource_name = "Resource"

    # Columns a client may sort by; anything else falls back to default_sort
    sortable: Iterable[str] = ("id",)
    default_sort = ("id", "asc")

    def __init__(self, db: Session):
        self.db = db

    def query(self) -> Query:
        return self.db.query(self.model)

    def find_by_id(self, id: int, *options) -> Optional[Any]:
        query = self.query()
        if options:
            query = query.options(*options)
        return query.filter(self.model.id == id).first()

    def find_or_fail(self, id: int, *options) -> Any:
        obj = self.find_by_id(id, *options)
        if obj is None:
            raise NotFoundError(self.resource_name)
        return obj

    def exists(self, id: int) -> bool:
        return self.db.query(self.model.id).filter(self.model.id == id).first() is not None

    def create(self, data: Dict[str, Any]) -> Any:
        obj = self.model(**data)
        self.db.add(obj)
        self.db.commit()
        self.db.refresh(obj)
        return obj

    def update(self, obj, data: Dict[str, Any]) -> Any:
        for key, value in data.items():
            setattr(obj, key, value)
        self.db.commit()
        self.db.refresh(obj)
        return obj

    def delete(self, obj) -> None:
        self.db.delete(obj)
        self.db.commit()

    # --- listing helpers ---

    def order(self, query: Query, params: ListParams) -> Query:
        default_field, default_order = self.default_sort
        field = params.sort_by if params.sort_by in self.sortable else default_field
        direction = (params.sort_order or default_order).lower()
        column = getattr(self.model, field)
        query = query.order_by(column.desc() if direction == "desc" else column.asc())
        # Stable ordering for rows sharing the same sort value
        if field != "id":
            query = query.order_by(self.model.id.desc() if direction == "desc" else self.model.id.asc())
        return query

    def filter_dates(self, query: Query, column, from_date: Optional[date], to_date: Optional[date]) -> Query:
        # Whole-day bounds, inclusive on both ends
        if from_date is not None:
            query = query.filter(column >= datetime.combine(from_date, time.min))
        if to_date is not None:
            query = query.filter(column < datetime.combine(to_date + timedelta(days=1), time.min))
        return query

    def paginate(self, query: Query, params: ListParams, default_per_page: int = DEFAULT_PER_PAGE) -> Dict[str, Any]:
        per_page = params.per_page or default_per_page
        page = params.page or 1
        total = query.count()
        items = query.offset((page - 1) * per_page).limit(per_page).all()
        return {
            "items": items,
            "total": total,
            "page": page,
            "per_page": per_page,
            "last_page": max(1, math.ceil(total / per_page)),
        }
