"""
FastAPI бэкенд сообщества велосипедистов
Маршруты, поездки, отзывы, сообщения о проблемах и система наград
"""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
import uvicorn
from contextlib import asynccontextmanager

from cyclehub.api import auth, routes, rides, reviews, reports, rewards, users, weather
from cyclehub.database import engine, init_models
from cyclehub.config import settings
from cyclehub.errors import ApiError

logging.basicConfig(level=settings.LOG_LEVEL)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Создаем таблицы при запуске
    await init_models()
    logger.info(f"{settings.APP_NAME} запущен")
    yield
    # Очистка при завершении
    await engine.dispose()


# Создаем FastAPI приложение
app = FastAPI(
    title=settings.APP_NAME,
    description="API сообщества велосипедистов: маршруты, поездки и награды",
    version="1.0.0",
    lifespan=lifespan
)

# Настройка CORS для фронтенда
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _error_body(message: str, errors=None) -> dict:
    return {"success": False, "message": message, "errors": errors or []}


@app.exception_handler(ApiError)
async def api_error_handler(request: Request, exc: ApiError):
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path}: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content=_error_body(exc.message, exc.errors))


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    """Ошибки валидации - 400 со списком полей"""
    errors = []
    for error in exc.errors():
        field = ".".join(str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path"))
        errors.append(f"{field}: {error.get('msg')}" if field else error.get("msg"))
    return JSONResponse(status_code=400, content=_error_body("Validation failed", errors))


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception(f"Необработанная ошибка {request.method} {request.url.path}: {exc}")
    return JSONResponse(status_code=500, content=_error_body("Internal server error"))


# Подключаем роуты API
app.include_router(auth.router, prefix="/api/auth", tags=["authentication"])
app.include_router(routes.router, prefix="/api/routes", tags=["routes"])
app.include_router(rides.router, prefix="/api/rides", tags=["rides"])
app.include_router(reviews.router, prefix="/api/reviews", tags=["reviews"])
app.include_router(reports.router, prefix="/api/reports", tags=["reports"])
app.include_router(rewards.router, prefix="/api/rewards", tags=["rewards"])
app.include_router(users.router, prefix="/api/users", tags=["users"])
app.include_router(weather.router, prefix="/api/weather", tags=["weather"])


@app.get("/")
async def root():
    """Корневой эндпоинт для проверки работы API"""
    return {
        "message": f"{settings.APP_NAME} работает",
        "version": "1.0.0",
        "docs": "/docs",
        "endpoints": {
            "auth": "/api/auth",
            "routes": "/api/routes",
            "rides": "/api/rides",
            "reviews": "/api/reviews",
            "reports": "/api/reports",
            "rewards": "/api/rewards",
            "users": "/api/users",
            "weather": "/api/weather"
        }
    }


@app.get("/health")
async def health_check():
    """Проверка здоровья сервиса"""
    return {"status": "healthy", "service": "cyclehub-api"}


if __name__ == "__main__":
    uvicorn.run(
        "cyclehub.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG,
        log_level=settings.LOG_LEVEL.lower()
    )
