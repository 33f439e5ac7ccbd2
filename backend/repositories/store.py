from datetime import date
from typing import Any, Dict, Optional

from models.store import Store
from repositories.base import BaseRepository, ListParams, NESTED_PER_PAGE


class StoreRepository(BaseRepository):
    model = Store
    resource_name = "Store"
    sortable = ("id", "name", "city", "created_at")
    default_sort = ("name", "asc")

    def list(
        self,
        params: ListParams,
        name: Optional[str] = None,
        city: Optional[str] = None,
        from_date: Optional[date] = None,
        to_date: Optional[date] = None,
    ) -> Dict[str, Any]:
        query = self.query()
        if city:
            query = query.filter(Store.city.ilike(f"%{city}%"))
        if name:
            query = query.filter(Store.name.ilike(f"%{name}%"))
        query = self.filter_dates(query, Store.created_at, from_date, to_date)
        return self.paginate(self.order(query, params), params)

    def search_by_name(self, name: str, params: ListParams) -> Dict[str, Any]:
        query = self.query().filter(Store.name.ilike(f"%{name}%"))
        return self.paginate(self.order(query, params), params, NESTED_PER_PAGE)

    def get_by_city(self, city: str, params: ListParams) -> Dict[str, Any]:
        query = self.query().filter(Store.city.ilike(f"%{city}%"))
        return self.paginate(self.order(query, params), params, NESTED_PER_PAGE)
