"""
Клиент OpenRouteService для построения велосипедных маршрутов
"""

import logging
import time
from typing import List, Optional, Dict, Any

import requests
from fastapi.concurrency import run_in_threadpool

from cyclehub.config import settings

logger = logging.getLogger(__name__)

ORS_BASE_URL = "https://api.openrouteservice.org/v2"


def _request_directions(coordinates: List[List[float]], profile: str) -> Optional[Dict[str, Any]]:
    """Синхронный запрос к ORS. None - сервис недоступен или не настроен"""
    if not settings.ORS_API_KEY:
        return None

    try:
        start_time = time.time()
        response = requests.post(
            f"{ORS_BASE_URL}/directions/{profile}/json",
            json={"coordinates": coordinates, "elevation": True},
            headers={
                "Authorization": settings.ORS_API_KEY,
                "Content-Type": "application/json",
            },
            timeout=settings.EXTERNAL_TIMEOUT_SECONDS,
        )
        load_time = time.time() - start_time

        if response.status_code != 200:
            logger.error(f"OpenRouteService вернул ошибку: {response.status_code}")
            return None

        route = response.json()["routes"][0]
        summary = route["summary"]
        logger.info(f"Маршрут ORS получен за {load_time:.2f}с: {summary.get('distance')} м")
        return {
            "distance": round(summary["distance"] / 1000, 2),
            "duration": round(summary["duration"] / 60, 1),
            "elevation_gain": round(summary["ascent"]) if summary.get("ascent") else 0,
            "polyline": route.get("geometry") or "",
        }
    except (requests.RequestException, KeyError, IndexError, ValueError) as e:
        logger.error(f"Ошибка OpenRouteService: {e}")
        return None


async def get_directions(coordinates: List[List[float]], profile: str = "cycling-regular") -> Optional[Dict[str, Any]]:
    """
    Маршрут через ORS. coordinates - список [lng, lat].
    Возвращает {distance км, duration мин, elevation_gain м, polyline} или None.
    """
    return await run_in_threadpool(_request_directions, coordinates, profile)
