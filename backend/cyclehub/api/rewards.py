"""
API endpoints для наград
"""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List, Optional

from cyclehub.constants import RewardCategory, RewardTier
from cyclehub.database import get_db
from cyclehub.pagination import pagination_params
from cyclehub.schemas.common import ok, PaginationParams
from cyclehub.schemas.reward import RewardCreate, RewardUpdate, RewardResponse, GrantResponse
from cyclehub.security import get_current_user, require_admin
from cyclehub.services import rewards as reward_service

router = APIRouter()


async def _to_responses(db: AsyncSession, rewards) -> List[RewardResponse]:
    """Схемы ответа с earned_by_ids, получатели - одним запросом"""
    earners = await reward_service.earned_by_ids(db, rewards)
    return [
        RewardResponse.model_validate(reward).model_copy(update={"earned_by_ids": earners[reward.id]})
        for reward in rewards
    ]


async def _to_response(db: AsyncSession, reward) -> RewardResponse:
    responses = await _to_responses(db, [reward])
    return responses[0]


@router.get("/", dependencies=[Depends(get_current_user)])
async def list_rewards(
    category: Optional[RewardCategory] = Query(None),
    tier: Optional[RewardTier] = Query(None),
    params: PaginationParams = Depends(pagination_params),
    db: AsyncSession = Depends(get_db)
):
    """Каталог активных наград"""
    result = await reward_service.list_rewards(
        db, params,
        category=category.value if category else None,
        tier=tier.value if tier else None,
    )
    result["items"] = await _to_responses(db, result["items"])
    return ok(result)


@router.post("/", status_code=201, dependencies=[Depends(require_admin)])
async def create_reward(
    reward_data: RewardCreate,
    db: AsyncSession = Depends(get_db)
):
    reward = await reward_service.create_reward(db, reward_data)
    return ok({"reward": await _to_response(db, reward)}, "Reward created successfully")


@router.post("/check/{user_id}", dependencies=[Depends(require_admin)])
async def check_rewards(
    user_id: int,
    db: AsyncSession = Depends(get_db)
):
    """Проверить и выдать награды пользователю"""
    result = await reward_service.check_and_grant(db, user_id)
    data = GrantResponse(
        granted=await _to_responses(db, result.granted),
        total_achievements=result.total_achievements,
    )
    return ok(data, f"{len(result.granted)} new reward(s) granted")


@router.get("/{reward_id}", dependencies=[Depends(get_current_user)])
async def get_reward(
    reward_id: int,
    db: AsyncSession = Depends(get_db)
):
    reward = await reward_service.get_reward(db, reward_id)
    return ok({"reward": await _to_response(db, reward)})


@router.put("/{reward_id}", dependencies=[Depends(require_admin)])
async def update_reward(
    reward_id: int,
    reward_update: RewardUpdate,
    db: AsyncSession = Depends(get_db)
):
    reward = await reward_service.update_reward(db, reward_id, reward_update)
    return ok({"reward": await _to_response(db, reward)}, "Reward updated successfully")


@router.delete("/{reward_id}", dependencies=[Depends(require_admin)])
async def delete_reward(
    reward_id: int,
    db: AsyncSession = Depends(get_db)
):
    """Удаление = деактивация"""
    await reward_service.deactivate_reward(db, reward_id)
    return ok(None, "Reward deleted successfully")
