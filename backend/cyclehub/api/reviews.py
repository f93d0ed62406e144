"""
API endpoints для отзывов о маршрутах
"""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Optional

from cyclehub.database import get_db
from cyclehub.models.user import User
from cyclehub.pagination import pagination_params
from cyclehub.schemas.common import ok, PaginationParams
from cyclehub.schemas.route import ReviewCreate, ReviewUpdate, ReviewResponse
from cyclehub.security import get_current_user
from cyclehub.services import reviews as review_service

router = APIRouter()


@router.post("/", status_code=201)
async def create_review(
    review_data: ReviewCreate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Отзыв на чужой маршрут, один на пользователя"""
    review = await review_service.create_review(db, review_data, user.id)
    return ok({"review": ReviewResponse.model_validate(review)}, "Review created successfully")


@router.get("/")
async def list_reviews(
    route_id: Optional[int] = Query(None),
    reviewer_id: Optional[int] = Query(None),
    min_rating: Optional[int] = Query(None, ge=1, le=5),
    max_rating: Optional[int] = Query(None, ge=1, le=5),
    params: PaginationParams = Depends(pagination_params),
    db: AsyncSession = Depends(get_db)
):
    result = await review_service.list_reviews(
        db, params,
        route_id=route_id,
        reviewer_id=reviewer_id,
        min_rating=min_rating,
        max_rating=max_rating,
    )
    result["items"] = [ReviewResponse.model_validate(review) for review in result["items"]]
    return ok(result)


@router.get("/{review_id}")
async def get_review(review_id: int, db: AsyncSession = Depends(get_db)):
    review = await review_service.get_review(db, review_id)
    return ok({"review": ReviewResponse.model_validate(review)})


@router.put("/{review_id}")
async def update_review(
    review_id: int,
    review_update: ReviewUpdate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    review = await review_service.update_review(db, review_id, review_update, user.id)
    return ok({"review": ReviewResponse.model_validate(review)}, "Review updated successfully")


@router.delete("/{review_id}")
async def delete_review(
    review_id: int,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    await review_service.delete_review(db, review_id, user)
    return ok(None, "Review deleted successfully")
