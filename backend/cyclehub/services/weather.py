"""
Погода для велосипедистов (OpenWeatherMap) и оценка пригодности для поездки
"""

import logging
import time
from typing import Any, Dict

import requests
from fastapi.concurrency import run_in_threadpool

from cyclehub.config import settings
from cyclehub.errors import InternalError

logger = logging.getLogger(__name__)

OWM_URL = "https://api.openweathermap.org/data/2.5/weather"

SUITABILITY_LABELS = {
    5: "Excellent",
    4: "Good",
    3: "Fair",
    2: "Poor",
    1: "Not Recommended",
}


def calculate_cycling_suitability(weather: Dict[str, Any]) -> Dict[str, Any]:
    """Оценка 1-5 по температуре, ветру, дождю и видимости с советами"""
    score = 5
    advisories = []

    temp = weather["main"]["temp"]
    if temp < 0:
        score -= 3
        advisories.append("Freezing conditions. Not safe for cycling.")
    elif temp < 5:
        score -= 2
        advisories.append("Very cold. Wear heavy layers.")
    elif temp < 10:
        score -= 1
        advisories.append("Cool. Dress warmly.")
    elif temp > 35:
        score -= 2
        advisories.append("Extreme heat. Risk of dehydration.")
    elif temp > 30:
        score -= 1
        advisories.append("Hot conditions. Stay hydrated.")

    # м/с -> км/ч
    wind_kmh = weather["wind"]["speed"] * 3.6
    if wind_kmh > 50:
        score -= 3
        advisories.append("Dangerously high winds.")
    elif wind_kmh > 30:
        score -= 2
        advisories.append("Strong winds. Difficult cycling.")
    elif wind_kmh > 20:
        score -= 1
        advisories.append("Moderate winds. Some resistance.")

    if weather.get("rain"):
        score -= 2
        advisories.append("Rain expected. Roads may be slippery.")

    visibility = weather.get("visibility", 10000)
    if visibility < 1000:
        score -= 2
        advisories.append("Low visibility. Use lights.")
    elif visibility < 3000:
        score -= 1
        advisories.append("Reduced visibility. Stay alert.")

    score = max(1, min(5, score))
    if not advisories:
        advisories.append("Great day for cycling!")

    return {"score": score, "label": SUITABILITY_LABELS[score], "advisories": advisories}


def _fetch_weather(lat: float, lng: float) -> Dict[str, Any]:
    if not settings.OWM_API_KEY:
        raise InternalError("Weather service is not configured")

    try:
        start_time = time.time()
        response = requests.get(
            OWM_URL,
            params={"lat": lat, "lon": lng, "appid": settings.OWM_API_KEY, "units": "metric"},
            timeout=settings.EXTERNAL_TIMEOUT_SECONDS,
        )
    except requests.RequestException as e:
        logger.error(f"Ошибка OpenWeatherMap: {e}")
        raise InternalError("Failed to fetch weather data")

    if response.status_code == 401:
        raise InternalError("Weather API key is invalid")
    if response.status_code != 200:
        logger.error(f"OpenWeatherMap вернул ошибку: {response.status_code}")
        raise InternalError("Failed to fetch weather data")

    weather = response.json()
    logger.info(f"Погода для ({lat}, {lng}) получена за {time.time() - start_time:.2f}с")

    conditions = (weather.get("weather") or [{}])[0]
    return {
        "location": weather.get("name", ""),
        "temperature": weather["main"]["temp"],
        "feels_like": weather["main"].get("feels_like"),
        "humidity": weather["main"].get("humidity"),
        "wind_speed": round(weather["wind"]["speed"] * 3.6, 1),
        "wind_direction": weather["wind"].get("deg"),
        "description": conditions.get("description", ""),
        "icon": conditions.get("icon", ""),
        "visibility": weather.get("visibility"),
        "cycling": calculate_cycling_suitability(weather),
    }


async def get_cycling_weather(lat: float, lng: float) -> Dict[str, Any]:
    return await run_in_threadpool(_fetch_weather, lat, lng)
