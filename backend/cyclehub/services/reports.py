"""
Отчеты об опасностях: создание, подтверждения сообщества, модерация
"""

import logging
from typing import Optional

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from cyclehub.constants import (
    POINTS, ReportStatus, AUTO_RESOLVE_THRESHOLD, AUTO_RESOLVE_NOTE, REPORT_TRANSITIONS,
)
from cyclehub.errors import NotFoundError, ForbiddenError, BadRequestError
from cyclehub.models.report import Report, ReportConfirmation
from cyclehub.models.route import Route
from cyclehub.models.user import User
from cyclehub.pagination import fetch_page, paginate_result
from cyclehub.schemas.common import PaginationParams
from cyclehub.schemas.report import ReportCreate, ReportUpdate
from cyclehub.services.rewards import grant_rewards_best_effort
from cyclehub.timeutils import utcnow

logger = logging.getLogger(__name__)

TERMINAL_STATUSES = {ReportStatus.RESOLVED.value, ReportStatus.DISMISSED.value}


def _append_note(existing: Optional[str], note: str) -> str:
    return f"{existing}\n{note}" if existing else note


def _mark_resolved(report: Report) -> None:
    report.status = ReportStatus.RESOLVED.value
    if report.resolved_at is None:
        report.resolved_at = utcnow()


async def _load_report(db: AsyncSession, report_id: int) -> Report:
    result = await db.execute(
        select(Report).where(Report.id == report_id).execution_options(populate_existing=True)
    )
    report = result.scalar_one_or_none()
    if report is None:
        raise NotFoundError("Report not found")
    return report


async def create_report(db: AsyncSession, data: ReportCreate, user_id: int) -> Report:
    if data.route_id:
        route = await db.get(Route, data.route_id)
        if route is None:
            raise NotFoundError("Route not found")
        if route.created_by == user_id:
            raise BadRequestError("You cannot report hazards on your own route")

    report = Report(
        reported_by=user_id,
        route_id=data.route_id,
        title=data.title,
        description=data.description,
        category=data.category.value,
        severity=data.severity.value,
        lat=data.lat,
        lng=data.lng,
        address=data.address,
        image_url=data.image_url,
    )
    db.add(report)
    await db.execute(
        update(User).where(User.id == user_id).values(total_points=User.total_points + POINTS.REPORT_SUBMITTED)
    )
    await db.commit()
    report_id = report.id
    logger.info(f"Пользователь {user_id} создал отчет {report_id} ({report.category}, {report.severity})")

    await grant_rewards_best_effort(db, user_id)

    return await _load_report(db, report_id)


async def list_reports(db: AsyncSession, params: PaginationParams,
                       category: Optional[str] = None,
                       severity: Optional[str] = None,
                       status: Optional[str] = None,
                       route_id: Optional[int] = None,
                       reported_by: Optional[int] = None):
    query = select(Report)
    if category:
        query = query.where(Report.category == category)
    if severity:
        query = query.where(Report.severity == severity)
    if status:
        query = query.where(Report.status == status)
    if route_id:
        query = query.where(Report.route_id == route_id)
    if reported_by:
        query = query.where(Report.reported_by == reported_by)

    items, total = await fetch_page(db, query, Report, params, allowed_sort=("severity", "status", "created_at"))
    return paginate_result(items, total, params)


async def get_report(db: AsyncSession, report_id: int) -> Report:
    return await _load_report(db, report_id)


async def update_report(db: AsyncSession, report_id: int, data: ReportUpdate, user_id: int) -> Report:
    """Автор может редактировать отчет, пока он в статусе open"""
    report = await _load_report(db, report_id)
    if report.reported_by != user_id:
        raise ForbiddenError("You can only update your own reports")
    if report.status != ReportStatus.OPEN.value:
        raise BadRequestError("Can only edit reports with open status")

    for field, value in data.model_dump(exclude_unset=True).items():
        setattr(report, field, getattr(value, "value", value))

    await db.commit()
    return await _load_report(db, report_id)


async def delete_report(db: AsyncSession, report_id: int, user: User) -> None:
    """Жесткое удаление (вместе с подтверждениями)"""
    report = await _load_report(db, report_id)
    if report.reported_by != user.id and not user.is_admin:
        raise ForbiddenError("You can only delete your own reports")

    await db.delete(report)
    await db.commit()
    logger.info(f"Отчет {report_id} удален пользователем {user.id}")


async def confirm_report(db: AsyncSession, report_id: int, user_id: int, status: str) -> Report:
    """
    Подтверждение отчета другим пользователем.

    Одно подтверждение на пользователя: повторное обновляет существующее.
    Новое подтверждение приносит очки. При AUTO_RESOLVE_THRESHOLD
    подтверждениях "resolved" отчет закрывается автоматически.
    """
    report = await _load_report(db, report_id)

    if report.reported_by == user_id:
        raise ForbiddenError("You cannot confirm your own report")

    if report.status in TERMINAL_STATUSES:
        raise BadRequestError("Cannot confirm a report that is already resolved or dismissed")

    existing = next((c for c in report.confirmations if c.user_id == user_id), None)
    if existing is not None:
        existing.status = status
    else:
        report.confirmations.append(ReportConfirmation(user_id=user_id, status=status))
        await db.execute(
            update(User).where(User.id == user_id).values(total_points=User.total_points + POINTS.REPORT_CONFIRMED)
        )

    if report.resolved_confirmations >= AUTO_RESOLVE_THRESHOLD and report.status != ReportStatus.RESOLVED.value:
        _mark_resolved(report)
        report.admin_notes = _append_note(report.admin_notes, AUTO_RESOLVE_NOTE)
        logger.info(f"Отчет {report_id} закрыт автоматически по подтверждениям сообщества")

    await db.commit()
    return await _load_report(db, report_id)


async def update_report_status(db: AsyncSession, report_id: int, status: str,
                               admin_notes: Optional[str] = None) -> Report:
    """Модерация: только допустимые переходы, resolved/dismissed - терминальные"""
    report = await _load_report(db, report_id)

    allowed = {s.value for s in REPORT_TRANSITIONS.get(ReportStatus(report.status), set())}
    if status not in allowed:
        raise BadRequestError(f"Cannot transition from '{report.status}' to '{status}'")

    if status == ReportStatus.RESOLVED.value:
        _mark_resolved(report)
    else:
        report.status = status
    if admin_notes is not None:
        report.admin_notes = admin_notes

    await db.commit()
    logger.info(f"Статус отчета {report_id} изменен на '{status}'")
    return await _load_report(db, report_id)
