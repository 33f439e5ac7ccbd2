# backend/models/users.py
from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, Table, func
from sqlalchemy.orm import relationship
from database import Base

# Association table linking users to their roles
role_user = Table(
    "role_user",
    Base.metadata,
    Column("user_id", Integer, ForeignKey("users.id", ondelete="CASCADE"), primary_key=True),
    Column("role_id", Integer, ForeignKey("roles.id", ondelete="CASCADE"), primary_key=True),
)


# Named permission group (admin, customer, seller)
class Role(Base):
    __tablename__ = "roles"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(50), unique=True, nullable=False, index=True)
    description = Column(String, nullable=True)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())


# Represents a user account with authentication details and assigned roles
class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False, index=True)
    email = Column(String(255), unique=True, nullable=False, index=True)
    password_hash = Column(String, nullable=False)
    address = Column(String, nullable=True)
    profile_image = Column(String, nullable=True)
    created_at = Column(DateTime, server_default=func.now(), index=True)
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    roles = relationship("Role", secondary=role_user, order_by="Role.id")

    # Dependents are removed by the database (ON DELETE CASCADE)
    carts = relationship("Cart", back_populates="user", cascade="all, delete-orphan", passive_deletes=True)
    # Live (not soft-deleted) reviews only
    reviews = relationship(
        "Review",
        primaryjoin="and_(User.id == Review.user_id, Review.deleted_at.is_(None))",
        order_by="Review.id",
        viewonly=True,
    )
    tokens = relationship("AccessToken", back_populates="user", cascade="all, delete-orphan", passive_deletes=True)

    @property
    def role_names(self) -> set:
        return {role.name for role in self.roles}

    def has_role(self, *names: str) -> bool:
        return bool(self.role_names.intersection(names))
