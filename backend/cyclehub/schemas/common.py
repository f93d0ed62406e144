"""
Общие схемы ответа API и пагинации
"""

from pydantic import BaseModel, Field
from typing import Any, Dict, Optional


class Pagination(BaseModel):
    total: int
    page: int
    limit: int
    total_pages: int
    has_next_page: bool
    has_prev_page: bool


class PaginationParams(BaseModel):
    """Параметры страницы из query-строки"""
    page: int = Field(1, ge=1, description="Номер страницы")
    limit: int = Field(10, ge=1, le=100, description="Размер страницы")
    sort: Optional[str] = Field(None, max_length=50, description="Поле сортировки")
    order: str = Field("desc", pattern="^(asc|desc)$")

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


def ok(data: Any = None, message: str = "Success") -> Dict[str, Any]:
    """Единый формат успешного ответа: {success, message, data}"""
    return {"success": True, "message": message, "data": data}
