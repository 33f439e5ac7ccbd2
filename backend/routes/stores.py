from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query, Request, status
from sqlalchemy.orm import Session

from database import get_db
from models.users import User
from repositories.base import ListParams
from repositories.product import ProductRepository
from repositories.store import StoreRepository
from schemas.common import Message, Page, list_params
from schemas.details import ProductListItem
from schemas.store import StoreCreate, StoreOut, StoreUpdate
from utils.audit import write_log, client_ip
from utils.errors import NotFoundError
from utils.tokenJWT import role_required

router = APIRouter(prefix="/stores", tags=["Stores"])

store_managers = role_required("admin", "seller")


@router.get("", response_model=Page[StoreOut])
def list_stores(
    name: Optional[str] = Query(None),
    city: Optional[str] = Query(None),
    from_date: Optional[date] = Query(None),
    to_date: Optional[date] = Query(None),
    params: ListParams = Depends(list_params),
    db: Session = Depends(get_db),
):
    return StoreRepository(db).list(params, name=name, city=city, from_date=from_date, to_date=to_date)


# Declared before /{store_id} so the literal paths win
@router.get("/search", response_model=Page[StoreOut])
def search_stores(
    name: str = Query(..., min_length=1),
    params: ListParams = Depends(list_params),
    db: Session = Depends(get_db),
):
    return StoreRepository(db).search_by_name(name, params)


@router.get("/city/{city}", response_model=Page[StoreOut])
def stores_by_city(city: str, params: ListParams = Depends(list_params), db: Session = Depends(get_db)):
    return StoreRepository(db).get_by_city(city, params)


@router.post("", response_model=StoreOut, status_code=status.HTTP_201_CREATED)
def create_store(payload: StoreCreate, db: Session = Depends(get_db), current_user: User = Depends(store_managers)):
    return StoreRepository(db).create(payload.model_dump())


@router.get("/{store_id}", response_model=StoreOut)
def get_store(store_id: int, db: Session = Depends(get_db)):
    return StoreRepository(db).find_or_fail(store_id)


@router.get("/{store_id}/products", response_model=Page[ProductListItem])
def store_products(store_id: int, params: ListParams = Depends(list_params), db: Session = Depends(get_db)):
    if not StoreRepository(db).exists(store_id):
        raise NotFoundError("Store")
    return ProductRepository(db).by_store(store_id, params)


@router.put("/{store_id}", response_model=StoreOut)
def update_store(
    store_id: int,
    payload: StoreUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(store_managers),
):
    repo = StoreRepository(db)
    store = repo.find_or_fail(store_id)
    return repo.update(store, payload.model_dump(exclude_unset=True))


# Deleting a store removes its products
@router.delete("/{store_id}", response_model=Message)
def delete_store(
    store_id: int,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(store_managers),
):
    repo = StoreRepository(db)
    repo.delete(repo.find_or_fail(store_id))
    write_log(db, user_id=current_user.id, action="STORE_DELETE", resource="stores",
              status="SUCCESS", ip=client_ip(request), meta={"id": store_id})
    return {"message": "Store deleted"}
