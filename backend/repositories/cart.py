from typing import Any, Dict, List, Optional

from sqlalchemy.orm import joinedload

from models.cart import Cart
from models.order import Order
from models.product import Product
from repositories.base import BaseRepository, ListParams
from utils.errors import NotFoundError


class CartRepository(BaseRepository):
    model = Cart
    resource_name = "Cart"
    sortable = ("id", "quantity", "total_price", "created_at")

    def _with_relations(self):
        return (joinedload(Cart.user), joinedload(Cart.product), joinedload(Cart.order))

    def list(self, params: ListParams, user_id: Optional[int] = None, product_id: Optional[int] = None) -> Dict[str, Any]:
        query = self.query().options(*self._with_relations())
        if user_id is not None:
            query = query.filter(Cart.user_id == user_id)
        if product_id is not None:
            query = query.filter(Cart.product_id == product_id)
        return self.paginate(self.order(query, params), params)

    def find_with_relations(self, id: int) -> Optional[Cart]:
        return self.find_by_id(id, *self._with_relations())

    def by_user(self, user_id: int) -> List[Cart]:
        return (
            self.query()
            .options(joinedload(Cart.product), joinedload(Cart.order))
            .filter(Cart.user_id == user_id)
            .order_by(Cart.id)
            .all()
        )

    def calculate_total_price(self, product_id: int, quantity: int) -> float:
        """Snapshot of product.price * quantity; raises NotFoundError for an unknown product."""
        product = self.db.query(Product).filter(Product.id == product_id).first()
        if product is None:
            raise NotFoundError("Product")
        return round(product.price * quantity, 2)

    def create(self, data: Dict[str, Any]) -> Cart:
        total_price = self.calculate_total_price(data["product_id"], data["quantity"])
        cart = super().create({
            "quantity": data["quantity"],
            "total_price": total_price,
            "product_id": data["product_id"],
            "user_id": data["user_id"],
        })
        return self.find_with_relations(cart.id)

    def update(self, cart: Cart, data: Dict[str, Any]) -> Cart:
        product_id = data.get("product_id", cart.product_id)
        quantity = data.get("quantity", cart.quantity)

        # The total is only recomputed when one of its inputs is written
        changes = dict(data)
        if "quantity" in data or "product_id" in data:
            changes["total_price"] = self.calculate_total_price(product_id, quantity)

        super().update(cart, changes)
        return self.find_with_relations(cart.id)

    def has_order(self, id: int) -> bool:
        return self.db.query(Order.id).filter(Order.cart_id == id).first() is not None
