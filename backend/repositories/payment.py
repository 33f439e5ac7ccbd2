from typing import Any, Dict, Optional

from sqlalchemy.orm import joinedload

from models.order import Order
from models.payment import Payment
from repositories.base import BaseRepository, ListParams


class PaymentRepository(BaseRepository):
    model = Payment
    resource_name = "Payment"
    sortable = ("id", "payment_method", "status", "created_at")

    def list(self, params: ListParams, status: Optional[str] = None, payment_method: Optional[str] = None) -> Dict[str, Any]:
        query = self.query()
        if status:
            query = query.filter(Payment.status == status)
        if payment_method:
            query = query.filter(Payment.payment_method.ilike(f"%{payment_method}%"))
        return self.paginate(self.order(query, params), params)

    def find_with_order(self, id: int) -> Optional[Payment]:
        return self.find_by_id(id, joinedload(Payment.order))

    def has_order(self, id: int) -> bool:
        return self.db.query(Order.id).filter(Order.payment_id == id).first() is not None
