# backend/routes/users.py
from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Request, status
from sqlalchemy.orm import Session

from database import get_db
from models.users import User, Role
from repositories.base import ListParams
from repositories.cart import CartRepository
from repositories.order import OrderRepository
from repositories.review import ReviewRepository
from repositories.user import UserRepository
from schemas import user as schemas
from schemas.common import Message, Page, list_params
from schemas.details import CartWithProduct, OrderDetail, ReviewWithProduct, UserWithCarts, UserWithReviews
from utils.audit import write_log, client_ip
from utils.errors import NotFoundError
from utils.tokenJWT import get_current_user, role_required
from utils.validation import FieldErrors

router = APIRouter(prefix="/users", tags=["Users"])

admin_only = role_required("admin")


# Retrieve a list of users with filtering, sorting, and pagination (Admin only)
@router.get("", response_model=Page[schemas.UserOut])
def list_users(
    name: Optional[str] = Query(None, description="Search by name"),
    email: Optional[str] = Query(None, description="Search by e-mail"),
    address: Optional[str] = Query(None, description="Search by address"),
    from_date: Optional[date] = Query(None, description="Created on or after (YYYY-MM-DD)"),
    to_date: Optional[date] = Query(None, description="Created on or before (YYYY-MM-DD)"),
    params: ListParams = Depends(list_params),
    db: Session = Depends(get_db),
    current_user: User = Depends(admin_only),
):
    return UserRepository(db).list(params, name=name, email=email, address=address, from_date=from_date, to_date=to_date)


@router.post("", response_model=schemas.UserOut, status_code=status.HTTP_201_CREATED)
def create_user(
    payload: schemas.UserCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(admin_only),
):
    FieldErrors(db).unique("email", User.email, payload.email, case_insensitive=True).check()
    return UserRepository(db).create(payload.model_dump())


@router.get("/{user_id}", response_model=schemas.UserOut)
def get_user(user_id: int, db: Session = Depends(get_db), current_user: User = Depends(admin_only)):
    return UserRepository(db).find_or_fail(user_id)


@router.put("/{user_id}", response_model=schemas.UserOut)
def update_user(
    user_id: int,
    payload: schemas.UserUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(admin_only),
):
    repo = UserRepository(db)
    user = repo.find_or_fail(user_id)

    data = payload.model_dump(exclude_unset=True)
    FieldErrors(db).unique("email", User.email, data.get("email"), ignore_id=user.id, case_insensitive=True).check()
    return repo.update(user, data)


# Delete a user account; carts, reviews and tokens go with it
@router.delete("/{user_id}", response_model=Message)
def delete_user(
    user_id: int,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(admin_only),
):
    repo = UserRepository(db)
    user = repo.find_or_fail(user_id)
    email = user.email
    # An admin removing their own account leaves no actor row to reference
    actor_id = None if current_user.id == user.id else current_user.id
    repo.delete(user)

    write_log(db, user_id=actor_id, action="USER_DELETE", resource="users",
              status="SUCCESS", ip=client_ip(request), meta={"id": user_id, "email": email})
    return {"message": "User deleted successfully"}


# Replace the user's role set (Admin only)
@router.put("/{user_id}/roles", response_model=schemas.UserRolesUpdated)
def update_user_roles(
    user_id: int,
    payload: schemas.RolesUpdate,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(admin_only),
):
    repo = UserRepository(db)
    user = repo.find_or_fail(user_id)

    errors = FieldErrors(db)
    known = {name for (name,) in db.query(Role.name).filter(Role.name.in_(payload.roles)).all()}
    for index, name in enumerate(payload.roles):
        if name not in known:
            errors.add(f"roles.{index}", f"The selected roles.{index} is invalid.")
    errors.check()

    user = repo.sync_roles(user, payload.roles)
    write_log(db, user_id=current_user.id, action="USER_ROLES_UPDATE", resource="users",
              status="SUCCESS", ip=client_ip(request), meta={"id": user.id, "roles": sorted(user.role_names)})
    return {"message": "User roles updated successfully", "user": user}


@router.get("/{user_id}/with-reviews", response_model=UserWithReviews)
def get_user_with_reviews(user_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    user = UserRepository(db).find_with_reviews(user_id)
    if user is None:
        raise NotFoundError("User")
    return user


@router.get("/{user_id}/with-carts", response_model=UserWithCarts)
def get_user_with_carts(user_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    user = UserRepository(db).find_with_carts(user_id)
    if user is None:
        raise NotFoundError("User")
    return user


@router.get("/{user_id}/carts", response_model=List[CartWithProduct])
def get_user_carts(user_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    if not UserRepository(db).exists(user_id):
        raise NotFoundError("User")
    return CartRepository(db).by_user(user_id)


@router.get("/{user_id}/orders", response_model=List[OrderDetail])
def get_user_orders(user_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    if not UserRepository(db).exists(user_id):
        raise NotFoundError("User")
    return OrderRepository(db).by_user(user_id)


# Public: reviews written by a user
@router.get("/{user_id}/reviews", response_model=Page[ReviewWithProduct])
def get_user_reviews(
    user_id: int,
    rating: Optional[int] = Query(None, ge=1, le=5),
    params: ListParams = Depends(list_params),
    db: Session = Depends(get_db),
):
    return ReviewRepository(db).by_user(user_id, params, rating=rating)
