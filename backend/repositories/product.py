from typing import Any, Dict, Optional

from sqlalchemy.orm import joinedload, selectinload

from models.product import Product, ProductImage
from repositories.base import BaseRepository, ListParams, NESTED_PER_PAGE


class ProductRepository(BaseRepository):
    model = Product
    resource_name = "Product"
    sortable = ("id", "name", "price", "stock", "status", "created_at")

    def list(
        self,
        params: ListParams,
        name: Optional[str] = None,
        status: Optional[str] = None,
        store_id: Optional[int] = None,
        category_id: Optional[int] = None,
        min_price: Optional[float] = None,
        max_price: Optional[float] = None,
        default_per_page: Optional[int] = None,
    ) -> Dict[str, Any]:
        query = self.query().options(joinedload(Product.store), joinedload(Product.category))
        if name:
            query = query.filter(Product.name.ilike(f"%{name}%"))
        if status:
            query = query.filter(Product.status == status)
        if store_id is not None:
            query = query.filter(Product.store_id == store_id)
        if category_id is not None:
            query = query.filter(Product.category_id == category_id)
        if min_price is not None:
            query = query.filter(Product.price >= min_price)
        if max_price is not None:
            query = query.filter(Product.price <= max_price)
        query = self.order(query, params)
        if default_per_page:
            return self.paginate(query, params, default_per_page)
        return self.paginate(query, params)

    def by_store(self, store_id: int, params: ListParams) -> Dict[str, Any]:
        return self.list(params, store_id=store_id, default_per_page=NESTED_PER_PAGE)

    def by_category(self, category_id: int, params: ListParams) -> Dict[str, Any]:
        return self.list(params, category_id=category_id, default_per_page=NESTED_PER_PAGE)

    def find_with_relations(self, id: int) -> Optional[Product]:
        return self.find_by_id(
            id,
            joinedload(Product.store),
            joinedload(Product.category),
            selectinload(Product.reviews),
            selectinload(Product.images),
        )


class ProductImageRepository(BaseRepository):
    model = ProductImage
    resource_name = "ProductImage"
    sortable = ("id", "name", "created_at")

    def list(self, params: ListParams, product_id: Optional[int] = None) -> Dict[str, Any]:
        query = self.query()
        if product_id is not None:
            query = query.filter(ProductImage.product_id == product_id)
        return self.paginate(self.order(query, params), params)

    def by_product(self, product_id: int, params: ListParams) -> Dict[str, Any]:
        query = self.query().filter(ProductImage.product_id == product_id)
        return self.paginate(self.order(query, params), params, NESTED_PER_PAGE)

    def find_with_product(self, id: int) -> Optional[ProductImage]:
        return self.find_by_id(id, joinedload(ProductImage.product))
