from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from database import get_db
from models.product import Product
from models.users import User
from repositories.base import ListParams
from repositories.product import ProductImageRepository
from schemas.common import Message, Page, list_params
from schemas.details import ProductImageDetail
from schemas.product import ProductImageCreate, ProductImageOut, ProductImageUpdate
from utils.errors import NotFoundError
from utils.tokenJWT import role_required
from utils.validation import FieldErrors

router = APIRouter(prefix="/product-images", tags=["Product images"])

product_managers = role_required("admin", "seller")


@router.get("", response_model=Page[ProductImageOut])
def list_images(
    product_id: Optional[int] = Query(None),
    params: ListParams = Depends(list_params),
    db: Session = Depends(get_db),
):
    return ProductImageRepository(db).list(params, product_id=product_id)


@router.post("", response_model=ProductImageOut, status_code=status.HTTP_201_CREATED)
def create_image(payload: ProductImageCreate, db: Session = Depends(get_db), current_user: User = Depends(product_managers)):
    FieldErrors(db).exists("product_id", Product, payload.product_id).check()
    return ProductImageRepository(db).create(payload.model_dump())


@router.get("/{image_id}", response_model=ProductImageDetail)
def get_image(image_id: int, db: Session = Depends(get_db)):
    image = ProductImageRepository(db).find_with_product(image_id)
    if image is None:
        raise NotFoundError("ProductImage")
    return image


@router.put("/{image_id}", response_model=ProductImageOut)
def update_image(
    image_id: int,
    payload: ProductImageUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(product_managers),
):
    repo = ProductImageRepository(db)
    image = repo.find_or_fail(image_id)

    data = payload.model_dump(exclude_unset=True)
    FieldErrors(db).exists("product_id", Product, data.get("product_id")).check()
    return repo.update(image, data)


@router.delete("/{image_id}", response_model=Message)
def delete_image(image_id: int, db: Session = Depends(get_db), current_user: User = Depends(product_managers)):
    repo = ProductImageRepository(db)
    repo.delete(repo.find_or_fail(image_id))
    return {"message": "ProductImage deleted"}
