# backend/routes/orders.py
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query, Request, status
from sqlalchemy.orm import Session

from database import get_db
from models.cart import Cart
from models.payment import Payment
from models.users import User
from repositories.base import ListParams
from repositories.order import OrderRepository
from schemas.common import Message, Page, list_params
from schemas.details import OrderDetail
from schemas.order import OrderCreate, OrderUpdate
from utils.audit import write_log, client_ip
from utils.errors import NotFoundError
from utils.tokenJWT import get_current_user
from utils.validation import FieldErrors

router = APIRouter(prefix="/orders", tags=["Orders"])


def _check_references(db: Session, data: dict) -> None:
    FieldErrors(db) \
        .exists("cart_id", Cart, data.get("cart_id")) \
        .exists("payment_id", Payment, data.get("payment_id")) \
        .check()


# =========================
# ORDER LIST
# =========================
@router.get("", response_model=Page[OrderDetail])
def list_orders(
    payment_id: Optional[int] = Query(None),
    cart_id: Optional[int] = Query(None),
    from_date: Optional[date] = Query(None, description="Order date on or after"),
    to_date: Optional[date] = Query(None, description="Order date on or before"),
    params: ListParams = Depends(list_params),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return OrderRepository(db).list(params, payment_id=payment_id, cart_id=cart_id, from_date=from_date, to_date=to_date)


# =========================
# CREATE ORDER
# =========================
# A cart can be ordered once; a second order for it is a 409
@router.post("", response_model=OrderDetail, status_code=status.HTTP_201_CREATED)
def create_order(
    payload: OrderCreate,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    data = payload.model_dump()
    _check_references(db, data)
    order = OrderRepository(db).create(data)
    write_log(db, user_id=current_user.id, action="ORDER_CREATE", resource="orders",
              status="SUCCESS", ip=client_ip(request), meta={"id": order.id, "cart_id": order.cart_id})
    return order


@router.get("/{order_id}", response_model=OrderDetail)
def get_order(order_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    order = OrderRepository(db).find_with_relations(order_id)
    if order is None:
        raise NotFoundError("Order")
    return order


@router.put("/{order_id}", response_model=OrderDetail)
def update_order(
    order_id: int,
    payload: OrderUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    repo = OrderRepository(db)
    order = repo.find_or_fail(order_id)

    data = payload.model_dump(exclude_unset=True)
    _check_references(db, data)
    return repo.update(order, data)


@router.delete("/{order_id}", response_model=Message)
def delete_order(
    order_id: int,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    repo = OrderRepository(db)
    repo.delete(repo.find_or_fail(order_id))
    write_log(db, user_id=current_user.id, action="ORDER_DELETE", resource="orders",
              status="SUCCESS", ip=client_ip(request), meta={"id": order_id})
    return {"message": "Order deleted"}
