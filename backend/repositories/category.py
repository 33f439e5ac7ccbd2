from typing import Any, Dict, Optional

from sqlalchemy.orm import selectinload

from models.category import Category
from models.product import Product
from repositories.base import BaseRepository, ListParams


class CategoryRepository(BaseRepository):
    model = Category
    resource_name = "Category"
    sortable = ("id", "name", "created_at")

    def list(self, params: ListParams, name: Optional[str] = None) -> Dict[str, Any]:
        query = self.query()
        if name:
            query = query.filter(Category.name.ilike(f"%{name}%"))
        return self.paginate(self.order(query, params), params)

    def find_with_products(self, id: int) -> Optional[Category]:
        return self.find_by_id(id, selectinload(Category.products))

    def has_products(self, id: int) -> bool:
        return self.db.query(Product.id).filter(Product.category_id == id).first() is not None
