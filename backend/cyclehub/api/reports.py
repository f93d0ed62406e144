"""
API endpoints для сообщений о проблемах на маршрутах
"""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Optional

from cyclehub.constants import ReportCategory, ReportSeverity, ReportStatus
from cyclehub.database import get_db
from cyclehub.models.user import User
from cyclehub.pagination import pagination_params
from cyclehub.schemas.common import ok, PaginationParams
from cyclehub.schemas.report import (
    ReportCreate, ReportUpdate, ReportConfirm, ReportStatusUpdate, ReportResponse,
)
from cyclehub.security import get_current_user, require_admin
from cyclehub.services import reports as report_service

router = APIRouter()


@router.post("/", status_code=201)
async def create_report(
    report_data: ReportCreate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    report = await report_service.create_report(db, report_data, user.id)
    return ok({"report": ReportResponse.model_validate(report)}, "Report submitted successfully")


@router.get("/")
async def list_reports(
    category: Optional[ReportCategory] = Query(None),
    severity: Optional[ReportSeverity] = Query(None),
    status: Optional[ReportStatus] = Query(None),
    route_id: Optional[int] = Query(None),
    reported_by: Optional[int] = Query(None),
    params: PaginationParams = Depends(pagination_params),
    db: AsyncSession = Depends(get_db)
):
    result = await report_service.list_reports(
        db, params,
        category=category.value if category else None,
        severity=severity.value if severity else None,
        status=status.value if status else None,
        route_id=route_id,
        reported_by=reported_by,
    )
    result["items"] = [ReportResponse.model_validate(report) for report in result["items"]]
    return ok(result)


@router.get("/{report_id}")
async def get_report(report_id: int, db: AsyncSession = Depends(get_db)):
    report = await report_service.get_report(db, report_id)
    return ok({"report": ReportResponse.model_validate(report)})


@router.put("/{report_id}")
async def update_report(
    report_id: int,
    report_update: ReportUpdate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Редактирование автором, пока сообщение открыто"""
    report = await report_service.update_report(db, report_id, report_update, user.id)
    return ok({"report": ReportResponse.model_validate(report)}, "Report updated successfully")


@router.delete("/{report_id}")
async def delete_report(
    report_id: int,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    await report_service.delete_report(db, report_id, user)
    return ok(None, "Report deleted successfully")


@router.post("/{report_id}/confirm")
async def confirm_report(
    report_id: int,
    body: ReportConfirm,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Подтверждение сообщения сообществом (still_exists / resolved)"""
    report = await report_service.confirm_report(db, report_id, user.id, body.status.value)
    return ok({"report": ReportResponse.model_validate(report)}, "Confirmation recorded")


@router.patch("/{report_id}/status", dependencies=[Depends(require_admin)])
async def update_report_status(
    report_id: int,
    body: ReportStatusUpdate,
    db: AsyncSession = Depends(get_db)
):
    """Смена статуса администратором"""
    report = await report_service.update_report_status(db, report_id, body.status.value, body.admin_notes)
    return ok({"report": ReportResponse.model_validate(report)}, "Report status updated")
