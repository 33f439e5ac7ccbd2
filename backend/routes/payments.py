from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from database import get_db
from models.users import User
from repositories.base import ListParams
from repositories.payment import PaymentRepository
from schemas.common import Message, Page, list_params
from schemas.details import PaymentDetail
from schemas.payment import PaymentCreate, PaymentOut, PaymentStatus, PaymentUpdate
from utils.errors import ConflictError, NotFoundError
from utils.tokenJWT import get_current_user

router = APIRouter(prefix="/payments", tags=["Payments"])


@router.get("", response_model=Page[PaymentOut])
def list_payments(
    status: Optional[PaymentStatus] = Query(None),
    payment_method: Optional[str] = Query(None),
    params: ListParams = Depends(list_params),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return PaymentRepository(db).list(params, status=status, payment_method=payment_method)


@router.post("", response_model=PaymentOut, status_code=status.HTTP_201_CREATED)
def create_payment(payload: PaymentCreate, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return PaymentRepository(db).create(payload.model_dump())


@router.get("/{payment_id}", response_model=PaymentDetail)
def get_payment(payment_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    payment = PaymentRepository(db).find_with_order(payment_id)
    if payment is None:
        raise NotFoundError("Payment")
    return payment


# Any status may move to any other status
@router.put("/{payment_id}", response_model=PaymentOut)
def update_payment(
    payment_id: int,
    payload: PaymentUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    repo = PaymentRepository(db)
    payment = repo.find_or_fail(payment_id)
    return repo.update(payment, payload.model_dump(exclude_unset=True))


@router.delete("/{payment_id}", response_model=Message)
def delete_payment(payment_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    repo = PaymentRepository(db)
    payment = repo.find_or_fail(payment_id)
    if repo.has_order(payment.id):
        raise ConflictError("Cannot delete payment with associated orders")

    repo.delete(payment)
    return {"message": "Payment deleted"}
