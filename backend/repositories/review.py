from datetime import date, datetime, timezone
from typing import Any, Dict, Optional

from sqlalchemy import func
from sqlalchemy.orm import joinedload

from models.review import Review
from repositories.base import BaseRepository, ListParams, NESTED_PER_PAGE
from utils.errors import ConflictError

ALREADY_REVIEWED = "User has already reviewed this product. Please update the existing review instead."


class ReviewRepository(BaseRepository):
    model = Review
    resource_name = "Review"
    sortable = ("id", "rating", "created_at")
    default_sort = ("created_at", "desc")

    def query(self):
        # Soft-deleted reviews are invisible everywhere
        return self.db.query(Review).filter(Review.deleted_at.is_(None))

    def list(
        self,
        params: ListParams,
        rating: Optional[int] = None,
        user_id: Optional[int] = None,
        product_id: Optional[int] = None,
        from_date: Optional[date] = None,
        to_date: Optional[date] = None,
    ) -> Dict[str, Any]:
        query = self.query().options(joinedload(Review.user), joinedload(Review.product))
        if rating is not None:
            query = query.filter(Review.rating == rating)
        if user_id is not None:
            query = query.filter(Review.user_id == user_id)
        if product_id is not None:
            query = query.filter(Review.product_id == product_id)
        query = self.filter_dates(query, Review.created_at, from_date, to_date)
        return self.paginate(self.order(query, params), params)

    def by_product(self, product_id: int, params: ListParams, rating: Optional[int] = None) -> Dict[str, Any]:
        query = self.query().options(joinedload(Review.user)).filter(Review.product_id == product_id)
        if rating is not None:
            query = query.filter(Review.rating == rating)
        return self.paginate(self.order(query, params), params, NESTED_PER_PAGE)

    def by_user(self, user_id: int, params: ListParams, rating: Optional[int] = None) -> Dict[str, Any]:
        query = self.query().options(joinedload(Review.product)).filter(Review.user_id == user_id)
        if rating is not None:
            query = query.filter(Review.rating == rating)
        return self.paginate(self.order(query, params), params, NESTED_PER_PAGE)

    def find_with_relations(self, id: int) -> Optional[Review]:
        return self.find_by_id(id, joinedload(Review.user), joinedload(Review.product))

    def average_rating(self, product_id: int) -> float:
        avg = self.db.query(func.avg(Review.rating)).filter(
            Review.product_id == product_id, Review.deleted_at.is_(None)
        ).scalar()
        return round(float(avg), 1) if avg is not None else 0.0

    def user_has_reviewed(self, user_id: int, product_id: int) -> bool:
        return self.query().filter(Review.user_id == user_id, Review.product_id == product_id).first() is not None

    def create(self, data: Dict[str, Any]) -> Review:
        if self.user_has_reviewed(data["user_id"], data["product_id"]):
            raise ConflictError(ALREADY_REVIEWED)
        review = super().create(data)
        return self.find_with_relations(review.id)

    def update(self, review: Review, data: Dict[str, Any]) -> Review:
        # Only the rating and text are editable once a review exists
        changes = {key: value for key, value in data.items() if key in ("rating", "review")}
        super().update(review, changes)
        return self.find_with_relations(review.id)

    def delete(self, review: Review, force: bool = False) -> None:
        if force:
            return super().delete(review)
        review.deleted_at = datetime.now(timezone.utc).replace(tzinfo=None)
        self.db.commit()
