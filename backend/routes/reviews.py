from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query, Request, status
from sqlalchemy.orm import Session

from database import get_db
from models.product import Product
from models.users import User
from repositories.base import ListParams
from repositories.review import ReviewRepository
from schemas.common import Message, Page, list_params
from schemas.details import ReviewDetail
from schemas.review import ReviewCreate, ReviewUpdate
from utils.audit import write_log, client_ip
from utils.errors import NotFoundError
from utils.tokenJWT import get_current_user
from utils.validation import FieldErrors

router = APIRouter(prefix="/reviews", tags=["Reviews"])


@router.get("", response_model=Page[ReviewDetail])
def list_reviews(
    rating: Optional[int] = Query(None, ge=1, le=5),
    user_id: Optional[int] = Query(None),
    product_id: Optional[int] = Query(None),
    from_date: Optional[date] = Query(None),
    to_date: Optional[date] = Query(None),
    params: ListParams = Depends(list_params),
    db: Session = Depends(get_db),
):
    return ReviewRepository(db).list(
        params, rating=rating, user_id=user_id, product_id=product_id, from_date=from_date, to_date=to_date,
    )


# One live review per (user, product); a second one is a 409
@router.post("", response_model=ReviewDetail, status_code=status.HTTP_201_CREATED)
def create_review(payload: ReviewCreate, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    FieldErrors(db) \
        .exists("user_id", User, payload.user_id) \
        .exists("product_id", Product, payload.product_id) \
        .check()
    return ReviewRepository(db).create(payload.model_dump())


@router.get("/{review_id}", response_model=ReviewDetail)
def get_review(review_id: int, db: Session = Depends(get_db)):
    review = ReviewRepository(db).find_with_relations(review_id)
    if review is None:
        raise NotFoundError("Review")
    return review


@router.put("/{review_id}", response_model=ReviewDetail)
def update_review(
    review_id: int,
    payload: ReviewUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    repo = ReviewRepository(db)
    review = repo.find_or_fail(review_id)
    return repo.update(review, payload.model_dump(exclude_unset=True))


# Soft delete unless force=true
@router.delete("/{review_id}", response_model=Message)
def delete_review(
    review_id: int,
    request: Request,
    force: bool = Query(False, description="Remove the row instead of marking it deleted"),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    repo = ReviewRepository(db)
    repo.delete(repo.find_or_fail(review_id), force=force)
    write_log(db, user_id=current_user.id, action="REVIEW_DELETE", resource="reviews",
              status="SUCCESS", ip=client_ip(request), meta={"id": review_id, "force": force})
    return {"message": "Review deleted"}
