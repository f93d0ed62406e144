"""
Отзывы о маршрутах и пересчет рейтинга маршрута
"""

import logging
from decimal import Decimal, ROUND_HALF_UP
from typing import Optional

from sqlalchemy import select, update, func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from cyclehub.constants import POINTS
from cyclehub.errors import NotFoundError, ForbiddenError, BadRequestError, ConflictError
from cyclehub.models.route import Route, Review
from cyclehub.models.user import User
from cyclehub.pagination import fetch_page, paginate_result
from cyclehub.schemas.common import PaginationParams
from cyclehub.schemas.route import ReviewCreate, ReviewUpdate
from cyclehub.services.rewards import grant_rewards_best_effort

logger = logging.getLogger(__name__)


def round_rating(value) -> float:
    """Один знак после запятой, половина - вверх (2.25 -> 2.3)"""
    return float(Decimal(str(value)).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))


async def recalculate_route_rating(db: AsyncSession, route_id: int) -> None:
    """Средняя оценка (1 знак) и число отзывов по всем отзывам маршрута. Нет отзывов - 0"""
    result = await db.execute(
        select(func.avg(Review.rating), func.count(Review.id)).where(Review.route_id == route_id)
    )
    avg_rating, review_count = result.one()

    await db.execute(
        update(Route)
        .where(Route.id == route_id)
        .values(
            average_rating=round_rating(avg_rating) if review_count else 0,
            review_count=review_count or 0,
        )
    )


async def _load_review(db: AsyncSession, review_id: int) -> Review:
    result = await db.execute(
        select(Review).where(Review.id == review_id).execution_options(populate_existing=True)
    )
    review = result.scalar_one_or_none()
    if review is None:
        raise NotFoundError("Review not found")
    return review


async def create_review(db: AsyncSession, data: ReviewCreate, user_id: int) -> Review:
    route = await db.get(Route, data.route_id)
    if route is None or not route.is_active:
        raise NotFoundError("Route not found")

    if route.created_by == user_id:
        raise BadRequestError("You cannot review your own route")

    review = Review(reviewer_id=user_id, **data.model_dump())
    db.add(review)
    try:
        await db.flush()
    except IntegrityError:
        await db.rollback()
        raise ConflictError("You have already reviewed this route")

    await recalculate_route_rating(db, route.id)
    await db.execute(
        update(User).where(User.id == user_id).values(total_points=User.total_points + POINTS.REVIEW_WRITTEN)
    )
    await db.commit()
    review_id = review.id
    logger.info(f"Пользователь {user_id} оставил отзыв {review_id} на маршрут {route.id}")

    await grant_rewards_best_effort(db, user_id)

    return await _load_review(db, review_id)


async def list_reviews(db: AsyncSession, params: PaginationParams,
                       route_id: Optional[int] = None,
                       reviewer_id: Optional[int] = None,
                       min_rating: Optional[int] = None,
                       max_rating: Optional[int] = None):
    query = select(Review)
    if route_id:
        query = query.where(Review.route_id == route_id)
    if reviewer_id:
        query = query.where(Review.reviewer_id == reviewer_id)
    if min_rating:
        query = query.where(Review.rating >= min_rating)
    if max_rating:
        query = query.where(Review.rating <= max_rating)

    items, total = await fetch_page(db, query, Review, params, allowed_sort=("rating", "created_at"))
    return paginate_result(items, total, params)


async def get_review(db: AsyncSession, review_id: int) -> Review:
    return await _load_review(db, review_id)


async def update_review(db: AsyncSession, review_id: int, data: ReviewUpdate, user_id: int) -> Review:
    review = await _load_review(db, review_id)
    if review.reviewer_id != user_id:
        raise ForbiddenError("You can only update your own reviews")

    update_data = data.model_dump(exclude_unset=True)
    if "comment" in update_data and update_data["comment"] != review.comment:
        review.is_edited = True
    for field, value in update_data.items():
        setattr(review, field, value)

    if "rating" in update_data:
        await db.flush()
        await recalculate_route_rating(db, review.route_id)

    await db.commit()
    return await _load_review(db, review_id)


async def delete_review(db: AsyncSession, review_id: int, user: User) -> None:
    review = await _load_review(db, review_id)
    if review.reviewer_id != user.id and not user.is_admin:
        raise ForbiddenError("You can only delete your own reviews")

    route_id = review.route_id
    await db.delete(review)
    await db.flush()
    await recalculate_route_rating(db, route_id)
    await db.commit()
    logger.info(f"Отзыв {review_id} удален, рейтинг маршрута {route_id} пересчитан")
