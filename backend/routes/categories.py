from typing import Optional

from fastapi import APIRouter, Depends, Query, Request, status
from sqlalchemy.orm import Session

from database import get_db
from models.category import Category
from models.users import User
from repositories.base import ListParams
from repositories.category import CategoryRepository
from repositories.product import ProductRepository
from schemas.category import CategoryCreate, CategoryOut, CategoryUpdate
from schemas.common import Message, Page, list_params
from schemas.details import CategoryWithProducts, ProductListItem
from utils.audit import write_log, client_ip
from utils.errors import ConflictError, NotFoundError
from utils.tokenJWT import role_required
from utils.validation import FieldErrors

router = APIRouter(prefix="/categories", tags=["Categories"])

admin_only = role_required("admin")


@router.get("", response_model=Page[CategoryOut])
def list_categories(
    name: Optional[str] = Query(None),
    params: ListParams = Depends(list_params),
    db: Session = Depends(get_db),
):
    return CategoryRepository(db).list(params, name=name)


@router.post("", response_model=CategoryOut, status_code=status.HTTP_201_CREATED)
def create_category(payload: CategoryCreate, db: Session = Depends(get_db), current_user: User = Depends(admin_only)):
    FieldErrors(db).unique("name", Category.name, payload.name).check()
    return CategoryRepository(db).create(payload.model_dump())


# Response shape depends on with_products, so the schema is applied by hand
@router.get("/{category_id}", response_model=None)
def get_category(
    category_id: int,
    with_products: bool = Query(False, description="Embed the category's products"),
    db: Session = Depends(get_db),
):
    repo = CategoryRepository(db)
    if with_products:
        category = repo.find_with_products(category_id)
        if category is None:
            raise NotFoundError("Category")
        return CategoryWithProducts.model_validate(category).model_dump()
    return CategoryOut.model_validate(repo.find_or_fail(category_id)).model_dump()


@router.get("/{category_id}/products", response_model=Page[ProductListItem])
def category_products(category_id: int, params: ListParams = Depends(list_params), db: Session = Depends(get_db)):
    if not CategoryRepository(db).exists(category_id):
        raise NotFoundError("Category")
    return ProductRepository(db).by_category(category_id, params)


@router.put("/{category_id}", response_model=CategoryOut)
def update_category(
    category_id: int,
    payload: CategoryUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(admin_only),
):
    repo = CategoryRepository(db)
    category = repo.find_or_fail(category_id)

    data = payload.model_dump(exclude_unset=True)
    FieldErrors(db).unique("name", Category.name, data.get("name"), ignore_id=category.id).check()
    return repo.update(category, data)


# Blocked while any product still references the category
@router.delete("/{category_id}", response_model=Message)
def delete_category(
    category_id: int,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(admin_only),
):
    repo = CategoryRepository(db)
    category = repo.find_or_fail(category_id)
    if repo.has_products(category.id):
        raise ConflictError("Cannot delete category that has products. Remove products first or reassign them.")

    repo.delete(category)
    write_log(db, user_id=current_user.id, action="CATEGORY_DELETE", resource="categories",
              status="SUCCESS", ip=client_ip(request), meta={"id": category_id})
    return {"message": "Category deleted"}
