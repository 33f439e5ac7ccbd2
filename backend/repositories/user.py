from datetime import date
from typing import Any, Dict, Iterable, Optional

from sqlalchemy import func
from sqlalchemy.orm import selectinload

from models.cart import Cart
from models.users import User
from repositories.base import BaseRepository, ListParams
from repositories.role import RoleRepository
from utils.hashing import get_password_hash


class UserRepository(BaseRepository):
    model = User
    resource_name = "User"
    sortable = ("id", "name", "email", "created_at")
    default_sort = ("name", "asc")

    def list(
        self,
        params: ListParams,
        name: Optional[str] = None,
        email: Optional[str] = None,
        address: Optional[str] = None,
        from_date: Optional[date] = None,
        to_date: Optional[date] = None,
    ) -> Dict[str, Any]:
        query = self.query().options(selectinload(User.roles))
        if name:
            query = query.filter(User.name.ilike(f"%{name}%"))
        if email:
            query = query.filter(User.email.ilike(f"%{email}%"))
        if address:
            query = query.filter(User.address.ilike(f"%{address}%"))
        query = self.filter_dates(query, User.created_at, from_date, to_date)
        return self.paginate(self.order(query, params), params)

    def find_with_roles(self, id: int) -> Optional[User]:
        return self.find_by_id(id, selectinload(User.roles))

    def find_by_email(self, email: str) -> Optional[User]:
        return self.query().options(selectinload(User.roles)).filter(func.lower(User.email) == email.strip().lower()).first()

    def find_with_reviews(self, id: int) -> Optional[User]:
        return self.find_by_id(id, selectinload(User.roles), selectinload(User.reviews))

    def find_with_carts(self, id: int) -> Optional[User]:
        return self.find_by_id(id, selectinload(User.roles), selectinload(User.carts).selectinload(Cart.product))

    def _columns(self, data: Dict[str, Any]) -> Dict[str, Any]:
        # The plain password never reaches the model
        data = dict(data)
        if "password" in data:
            data["password_hash"] = get_password_hash(data.pop("password"))
        if data.get("email"):
            data["email"] = data["email"].strip().lower()
        return data

    def create(self, data: Dict[str, Any], role_names: Iterable[str] = ("customer",)) -> User:
        """Insert the user and attach its roles in a single transaction."""
        roles = RoleRepository(self.db)
        try:
            user = User(**self._columns(data))
            user.roles = [roles.get_or_create(name, commit=False) for name in role_names]
            self.db.add(user)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        self.db.refresh(user)
        return user

    def update(self, user: User, data: Dict[str, Any]) -> User:
        return super().update(user, self._columns(data))

    def sync_roles(self, user: User, role_names: Iterable[str]) -> User:
        """Replace (not merge) the user's role set."""
        user.roles = RoleRepository(self.db).find_by_names(set(role_names))
        self.db.commit()
        self.db.refresh(user)
        return user
