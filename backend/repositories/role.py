from typing import Iterable, List

from models.users import Role
from repositories.base import BaseRepository

DEFAULT_ROLES = {
    "admin": "Administrator with full access",
    "customer": "Regular customer",
    "seller": "Store owner managing products",
}


class RoleRepository(BaseRepository):
    model = Role
    resource_name = "Role"

    def find_by_name(self, name: str):
        return self.query().filter(Role.name == name).first()

    def find_by_names(self, names: Iterable[str]) -> List[Role]:
        return self.query().filter(Role.name.in_(list(names))).all()

    def get_or_create(self, name: str, commit: bool = True) -> Role:
        role = self.find_by_name(name)
        if role is None:
            role = Role(name=name, description=DEFAULT_ROLES.get(name))
            self.db.add(role)
            if commit:
                self.db.commit()
                self.db.refresh(role)
            else:
                self.db.flush()
        return role

    def seed_defaults(self) -> None:
        for name in DEFAULT_ROLES:
            self.get_or_create(name, commit=False)
        self.db.commit()
