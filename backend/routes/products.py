# backend/routes/products.py
from typing import Optional

from fastapi import APIRouter, Depends, Query, Request, status
from sqlalchemy.orm import Session

from database import get_db
from models.category import Category
from models.store import Store
from models.users import User
from repositories.base import ListParams
from repositories.product import ProductRepository, ProductImageRepository
from repositories.review import ReviewRepository
from schemas.common import Message, Page, list_params
from schemas.details import ProductDetail, ProductListItem, ProductReviews
from schemas.product import ProductCreate, ProductImageOut, ProductOut, ProductStatus, ProductUpdate
from utils.audit import write_log, client_ip
from utils.errors import NotFoundError
from utils.tokenJWT import role_required
from utils.validation import FieldErrors

router = APIRouter(prefix="/products", tags=["Products"])

# ---- HELPERS ----
product_managers = role_required("admin", "seller")


def _check_references(db: Session, data: dict) -> None:
    FieldErrors(db) \
        .exists("store_id", Store, data.get("store_id")) \
        .exists("category_id", Category, data.get("category_id")) \
        .check()


# =========================
# PRODUCT LIST
# =========================
@router.get("", response_model=Page[ProductListItem])
def list_products(
    name: Optional[str] = Query(None),
    status: Optional[ProductStatus] = Query(None),
    store_id: Optional[int] = Query(None),
    category_id: Optional[int] = Query(None),
    min_price: Optional[float] = Query(None, ge=0),
    max_price: Optional[float] = Query(None, ge=0),
    params: ListParams = Depends(list_params),
    db: Session = Depends(get_db),
):
    return ProductRepository(db).list(
        params, name=name, status=status, store_id=store_id,
        category_id=category_id, min_price=min_price, max_price=max_price,
    )


# =========================
# SINGLE PRODUCT
# =========================
@router.get("/{product_id}", response_model=ProductDetail)
def get_product(product_id: int, db: Session = Depends(get_db)):
    product = ProductRepository(db).find_with_relations(product_id)
    if product is None:
        raise NotFoundError("Product")
    return product


@router.get("/{product_id}/images", response_model=Page[ProductImageOut])
def product_images(product_id: int, params: ListParams = Depends(list_params), db: Session = Depends(get_db)):
    if not ProductRepository(db).exists(product_id):
        raise NotFoundError("Product")
    return ProductImageRepository(db).by_product(product_id, params)


# Reviews of a product with the average rating of all live reviews
@router.get("/{product_id}/reviews", response_model=ProductReviews)
def product_reviews(
    product_id: int,
    rating: Optional[int] = Query(None, ge=1, le=5),
    params: ListParams = Depends(list_params),
    db: Session = Depends(get_db),
):
    if not ProductRepository(db).exists(product_id):
        raise NotFoundError("Product")
    repo = ReviewRepository(db)
    return {
        "average_rating": repo.average_rating(product_id),
        "reviews": repo.by_product(product_id, params, rating=rating),
    }


# =========================
# CREATE PRODUCT
# =========================
@router.post("", response_model=ProductOut, status_code=status.HTTP_201_CREATED)
def add_product(payload: ProductCreate, db: Session = Depends(get_db), current_user: User = Depends(product_managers)):
    data = payload.model_dump()
    _check_references(db, data)
    return ProductRepository(db).create(data)


# =========================
# PARTIAL UPDATE
# =========================
@router.put("/{product_id}", response_model=ProductOut)
def update_product(
    product_id: int,
    payload: ProductUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(product_managers),
):
    repo = ProductRepository(db)
    product = repo.find_or_fail(product_id)

    data = payload.model_dump(exclude_unset=True)
    _check_references(db, data)
    return repo.update(product, data)


@router.delete("/{product_id}", response_model=Message)
def delete_product(
    product_id: int,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(product_managers),
):
    repo = ProductRepository(db)
    repo.delete(repo.find_or_fail(product_id))
    write_log(db, user_id=current_user.id, action="PRODUCT_DELETE", resource="products",
              status="SUCCESS", ip=client_ip(request), meta={"id": product_id})
    return {"message": "Product deleted"}
