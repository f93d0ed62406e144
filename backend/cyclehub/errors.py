"""
Типизированные ошибки сервисного слоя

Сервисы бросают ApiError и его наследников, HTTP-слой (cyclehub.main)
превращает их в ответ {success, message, errors} с нужным статус-кодом.
"""

from typing import List, Optional


class ApiError(Exception):
    """Базовая ошибка с машинно-проверяемым видом и HTTP статусом"""

    kind: str = "internal"
    status_code: int = 500

    def __init__(self, message: str, errors: Optional[List[str]] = None):
        super().__init__(message)
        self.message = message
        self.errors = errors or []

    def __repr__(self):
        return f"<{self.__class__.__name__}(kind='{self.kind}', message='{self.message}')>"


class BadRequestError(ApiError):
    kind = "bad_request"
    status_code = 400


class UnauthorizedError(ApiError):
    kind = "unauthorized"
    status_code = 401


class ForbiddenError(ApiError):
    kind = "forbidden"
    status_code = 403


class NotFoundError(ApiError):
    kind = "not_found"
    status_code = 404


class ConflictError(ApiError):
    kind = "conflict"
    status_code = 409


class InternalError(ApiError):
    kind = "internal"
    status_code = 500
