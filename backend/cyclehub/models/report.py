"""
Модель отчета об опасности на дороге и подтверждений сообщества
"""

from sqlalchemy import Column, Integer, String, Text, DateTime, Float, ForeignKey, UniqueConstraint, Index
from sqlalchemy.orm import relationship
from cyclehub.database import Base
from cyclehub.constants import ReportStatus
from cyclehub.timeutils import utcnow


class Report(Base):
    __tablename__ = "reports"
    __table_args__ = (
        Index("ix_reports_status_severity", "status", "severity"),
        Index("ix_reports_category_created", "category", "created_at"),
    )

    id = Column(Integer, primary_key=True, index=True)
    reported_by = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    route_id = Column(Integer, ForeignKey("routes.id"), index=True)

    title = Column(String(150), nullable=False)
    description = Column(Text, nullable=False)
    category = Column(String(30), nullable=False)
    severity = Column(String(20), nullable=False)

    # Местоположение
    lat = Column(Float, nullable=False)
    lng = Column(Float, nullable=False)
    address = Column(String(300), default="")

    # open -> under_review -> resolved | dismissed
    status = Column(String(20), nullable=False, default=ReportStatus.OPEN.value)
    image_url = Column(String(500), default="")
    admin_notes = Column(Text, default="")
    resolved_at = Column(DateTime(timezone=True))

    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    # Связи
    confirmations = relationship(
        "ReportConfirmation",
        back_populates="report",
        cascade="all, delete-orphan",
        lazy="selectin",
        order_by="ReportConfirmation.id",
    )

    def __repr__(self):
        return f"<Report(id={self.id}, category='{self.category}', status='{self.status}')>"

    @property
    def resolved_confirmations(self):
        return sum(1 for c in self.confirmations if c.status == "resolved")


class ReportConfirmation(Base):
    __tablename__ = "report_confirmations"
    __table_args__ = (
        UniqueConstraint("report_id", "user_id", name="uq_confirmations_report_user"),
    )

    id = Column(Integer, primary_key=True, index=True)
    report_id = Column(Integer, ForeignKey("reports.id"), nullable=False)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)

    # still_exists | resolved
    status = Column(String(20), nullable=False)

    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    # Связи
    report = relationship("Report", back_populates="confirmations")

    def __repr__(self):
        return f"<ReportConfirmation(report_id={self.report_id}, user_id={self.user_id}, status='{self.status}')>"
