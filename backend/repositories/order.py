from datetime import date
from typing import Any, Dict, List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import joinedload

from models.cart import Cart
from models.order import Order
from repositories.base import BaseRepository, ListParams
from utils.errors import ConflictError

CART_HAS_ORDER = "This cart already has an associated order"


class OrderRepository(BaseRepository):
    model = Order
    resource_name = "Order"
    sortable = ("id", "final_price", "order_date", "created_at")

    def _with_relations(self):
        return (
            joinedload(Order.cart).joinedload(Cart.user),
            joinedload(Order.cart).joinedload(Cart.product),
            joinedload(Order.payment),
        )

    def list(
        self,
        params: ListParams,
        payment_id: Optional[int] = None,
        cart_id: Optional[int] = None,
        from_date: Optional[date] = None,
        to_date: Optional[date] = None,
    ) -> Dict[str, Any]:
        query = self.query().options(*self._with_relations())
        if payment_id is not None:
            query = query.filter(Order.payment_id == payment_id)
        if cart_id is not None:
            query = query.filter(Order.cart_id == cart_id)
        if from_date is not None:
            query = query.filter(Order.order_date >= from_date)
        if to_date is not None:
            query = query.filter(Order.order_date <= to_date)
        return self.paginate(self.order(query, params), params)

    def find_with_relations(self, id: int) -> Optional[Order]:
        return self.find_by_id(id, *self._with_relations())

    def by_user(self, user_id: int) -> List[Order]:
        return (
            self.query()
            .options(*self._with_relations())
            .join(Cart, Order.cart_id == Cart.id)
            .filter(Cart.user_id == user_id)
            .order_by(Order.id)
            .all()
        )

    def cart_has_order(self, cart_id: int, exclude_order_id: Optional[int] = None) -> bool:
        query = self.db.query(Order.id).filter(Order.cart_id == cart_id)
        if exclude_order_id is not None:
            query = query.filter(Order.id != exclude_order_id)
        return query.first() is not None

    def _commit_guarded(self):
        # orders.cart_id is unique: a concurrent insert for the same cart lands here
        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            raise ConflictError(CART_HAS_ORDER)

    def create(self, data: Dict[str, Any]) -> Order:
        if self.cart_has_order(data["cart_id"]):
            raise ConflictError(CART_HAS_ORDER)
        order = Order(**data)
        self.db.add(order)
        self._commit_guarded()
        return self.find_with_relations(order.id)

    def update(self, order: Order, data: Dict[str, Any]) -> Order:
        cart_id = data.get("cart_id")
        if cart_id is not None and cart_id != order.cart_id and self.cart_has_order(cart_id, exclude_order_id=order.id):
            raise ConflictError(CART_HAS_ORDER)
        for key, value in data.items():
            setattr(order, key, value)
        self._commit_guarded()
        return self.find_with_relations(order.id)
