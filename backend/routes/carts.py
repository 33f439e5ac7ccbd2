# backend/routes/carts.py
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from database import get_db
from models.users import User
from repositories.base import ListParams
from repositories.cart import CartRepository
from schemas.cart import CartCreate, CartUpdate
from schemas.common import Message, Page, list_params
from schemas.details import CartDetail
from utils.errors import ConflictError, NotFoundError
from utils.tokenJWT import get_current_user
from utils.validation import FieldErrors

router = APIRouter(prefix="/carts", tags=["Carts"])


@router.get("", response_model=Page[CartDetail])
def list_carts(
    user_id: Optional[int] = Query(None),
    product_id: Optional[int] = Query(None),
    params: ListParams = Depends(list_params),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return CartRepository(db).list(params, user_id=user_id, product_id=product_id)


# total_price is calculated from the current product price
@router.post("", response_model=CartDetail, status_code=status.HTTP_201_CREATED)
def create_cart(payload: CartCreate, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    FieldErrors(db).exists("user_id", User, payload.user_id).check()
    return CartRepository(db).create(payload.model_dump())


@router.get("/{cart_id}", response_model=CartDetail)
def get_cart(cart_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    cart = CartRepository(db).find_with_relations(cart_id)
    if cart is None:
        raise NotFoundError("Cart")
    return cart


@router.put("/{cart_id}", response_model=CartDetail)
def update_cart(
    cart_id: int,
    payload: CartUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    repo = CartRepository(db)
    cart = repo.find_or_fail(cart_id)

    data = payload.model_dump(exclude_unset=True)
    FieldErrors(db).exists("user_id", User, data.get("user_id")).check()
    return repo.update(cart, data)


@router.delete("/{cart_id}", response_model=Message)
def delete_cart(cart_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    repo = CartRepository(db)
    cart = repo.find_or_fail(cart_id)
    if repo.has_order(cart.id):
        raise ConflictError("Cannot delete cart with existing orders")

    repo.delete(cart)
    return {"message": "Cart deleted"}
