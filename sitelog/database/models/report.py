from sqlalchemy import Column, Integer, String, Float, Date, DateTime, ForeignKey, func
from sqlalchemy.orm import relationship
from ..database import Base

class DailyReport(Base):
    """
    현장 감독(MANDOR) 또는 건축가(ARCHITECT)가 작성하는 일일 현장 보고서입니다.
    작성자(user_id)만 수정/삭제할 수 있으며, 작업 내역(Task)과 사진(Media)을 가집니다.
    """
    __tablename__ = "daily_reports"
    id = Column(Integer, primary_key=True, index=True)
    slug = Column(String, unique=True, nullable=False, index=True)
    project_id = Column(Integer, ForeignKey("projects.id"), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    report_date = Column(Date, nullable=False)
    task_description = Column(String, nullable=False)
    progress_percent = Column(Float, nullable=False, default=0)
    weather = Column(String)
    total_workers = Column(Integer, nullable=False, default=0)
    location = Column(String)
    issues = Column(String)
    created_at = Column(DateTime, server_default=func.now())

    project = relationship("Project", back_populates="daily_reports")
    user = relationship("User")
    tasks = relationship("DailyReportTask", back_populates="report", cascade="all, delete-orphan", order_by="DailyReportTask.id")
    media = relationship("ReportMedia", back_populates="report", cascade="all, delete-orphan", order_by="ReportMedia.id")
    comments = relationship("ReportComment", back_populates="report", cascade="all, delete-orphan")


class DailyReportTask(Base):
    """보고서에 포함된 세부 작업 내역입니다. 소유권은 상위 보고서를 따릅니다."""
    __tablename__ = "daily_report_tasks"
    id = Column(Integer, primary_key=True, index=True)
    report_id = Column(Integer, ForeignKey("daily_reports.id"), nullable=False)
    task_name = Column(String, nullable=False)
    worker_count = Column(Integer, nullable=False, default=0)
    progress = Column(Float, nullable=False, default=0)
    notes = Column(String)
    created_at = Column(DateTime, server_default=func.now())

    report = relationship("DailyReport", back_populates="tasks")


class ReportMedia(Base):
    """보고서에 첨부된 사진입니다. 파일은 외부 저장소에 있고, 여기에는 URL만 저장합니다."""
    __tablename__ = "report_media"
    id = Column(Integer, primary_key=True, index=True)
    report_id = Column(Integer, ForeignKey("daily_reports.id"), nullable=False)
    public_id = Column(String, nullable=False)
    url = Column(String, nullable=False)
    created_at = Column(DateTime, server_default=func.now())

    report = relationship("DailyReport", back_populates="media")


class ReportComment(Base):
    __tablename__ = "report_comments"
    id = Column(Integer, primary_key=True, index=True)
    report_id = Column(Integer, ForeignKey("daily_reports.id"), nullable=False)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    content = Column(String, nullable=False)
    created_at = Column(DateTime, server_default=func.now())

    report = relationship("DailyReport", back_populates="comments")
    author = relationship("User")
