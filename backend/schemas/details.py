# Response schemas that embed related entities (eager-loaded relations)
from typing import List, Optional

from pydantic import BaseModel

from schemas.cart import CartOut
from schemas.category import CategoryOut
from schemas.common import Page
from schemas.order import OrderOut
from schemas.payment import PaymentOut
from schemas.product import ProductOut, ProductImageOut
from schemas.review import ReviewOut
from schemas.store import StoreOut
from schemas.user import UserBrief, UserOut


# Product with its store and category, used in listings
class ProductListItem(ProductOut):
    store: Optional[StoreOut] = None
    category: Optional[CategoryOut] = None


class ProductDetail(ProductListItem):
    reviews: List[ReviewOut] = []
    images: List[ProductImageOut] = []


class ProductImageDetail(ProductImageOut):
    product: Optional[ProductOut] = None


class CategoryWithProducts(CategoryOut):
    products: List[ProductOut] = []


class ReviewDetail(ReviewOut):
    user: Optional[UserBrief] = None
    product: Optional[ProductOut] = None


class ReviewWithUser(ReviewOut):
    user: Optional[UserBrief] = None


class ReviewWithProduct(ReviewOut):
    product: Optional[ProductOut] = None


# Product reviews plus the aggregate rating
class ProductReviews(BaseModel):
    average_rating: float
    reviews: Page[ReviewWithUser]


class CartWithProduct(CartOut):
    product: Optional[ProductOut] = None
    order: Optional[OrderOut] = None


class CartDetail(CartWithProduct):
    user: Optional[UserBrief] = None


class PaymentDetail(PaymentOut):
    order: Optional[OrderOut] = None


class OrderCart(CartOut):
    user: Optional[UserBrief] = None
    product: Optional[ProductOut] = None


class OrderDetail(OrderOut):
    cart: Optional[OrderCart] = None
    payment: Optional[PaymentOut] = None


class UserWithReviews(UserOut):
    reviews: List[ReviewOut] = []


class UserWithCarts(UserOut):
    carts: List[CartWithProduct] = []
