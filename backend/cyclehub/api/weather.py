"""
API endpoint погоды для велосипедистов
"""

from fastapi import APIRouter, Depends, Query

from cyclehub.schemas.common import ok
from cyclehub.security import get_current_user
from cyclehub.services.weather import get_cycling_weather

router = APIRouter()


@router.get("/", dependencies=[Depends(get_current_user)])
async def get_weather(
    lat: float = Query(..., ge=-90, le=90),
    lng: float = Query(..., ge=-180, le=180),
):
    """Текущая погода и оценка пригодности для велопоездки"""
    weather = await get_cycling_weather(lat, lng)
    return ok({"weather": weather})
