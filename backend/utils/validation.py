from typing import Dict, List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from utils.errors import ValidationFailed


class FieldErrors:
    """Collects database-backed field checks (existence, uniqueness) and
    raises them together as a single ValidationFailed.

    Shape checks (types, ranges, required fields) are left to the pydantic
    schemas; this covers the rules that need a query.
    """

    def __init__(self, db: Session):
        self.db = db
        self.errors: Dict[str, List[str]] = {}

    def add(self, field: str, message: str) -> "FieldErrors":
        self.errors.setdefault(field, []).append(message)
        return self

    def exists(self, field: str, model, value) -> "FieldErrors":
        if value is None:
            return self
        found = self.db.query(model.id).filter(model.id == value).first()
        if found is None:
            self.add(field, f"The selected {field} is invalid.")
        return self

    def unique(self, field: str, column, value, ignore_id: Optional[int] = None, case_insensitive: bool = False) -> "FieldErrors":
        if value is None:
            return self
        model = column.class_
        if case_insensitive:
            query = self.db.query(model.id).filter(func.lower(column) == str(value).lower())
        else:
            query = self.db.query(model.id).filter(column == value)
        if ignore_id is not None:
            query = query.filter(model.id != ignore_id)
        if query.first() is not None:
            self.add(field, f"The {field} has already been taken.")
        return self

    def check(self) -> None:
        if self.errors:
            raise ValidationFailed(self.errors)
