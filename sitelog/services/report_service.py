import logging
import uuid
from datetime import date
from typing import Dict, Any, List, Optional

from sitelog.database import models
from sitelog.repositories.interfaces import IReportRepository
from sitelog.services.authorization import AuthContext, require_ownership
from sitelog.services.exceptions import ReportNotFoundError, NotFoundError
from sitelog.utils.serializers import iso, user_summary
from sitelog.utils.validators import parse_date, require_text, require_range, require_url

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 100


def _task_to_dict(task: models.DailyReportTask) -> Dict[str, Any]:
    return {
        "id": task.id,
        "report_id": task.report_id,
        "task_name": task.task_name,
        "worker_count": task.worker_count,
        "progress": task.progress,
        "notes": task.notes,
    }


def _media_to_dict(media: models.ReportMedia) -> Dict[str, Any]:
    return {"id": media.id, "report_id": media.report_id, "public_id": media.public_id, "url": media.url}


def _report_to_dict(report: models.DailyReport) -> Dict[str, Any]:
    return {
        "id": report.id,
        "slug": report.slug,
        "project_id": report.project_id,
        "user_id": report.user_id,
        "user": user_summary(report.user),
        "report_date": iso(report.report_date),
        "task_description": report.task_description,
        "progress_percent": report.progress_percent,
        "weather": report.weather,
        "total_workers": report.total_workers,
        "location": report.location,
        "issues": report.issues,
        "tasks": [_task_to_dict(t) for t in report.tasks],
        "media": [_media_to_dict(m) for m in report.media],
        "created_at": iso(report.created_at),
    }


class ReportService:
    """
    일일 현장 보고서와 그 하위 작업 내역, 첨부 사진을 관리합니다.

    모든 핸들러는 프로젝트 게이트를 통과한 AuthContext를 받으며, 보고서 조회는 항상
    ctx.project_id 범위 안에서만 수행됩니다. 수정/삭제는 보고서 작성자(또는 ADMIN)만 가능합니다.
    """

    def __init__(self, report_repo: IReportRepository):
        self.report_repo = report_repo

    def _get_report(self, ctx: AuthContext, report_id: int) -> models.DailyReport:
        report = self.report_repo.find_in_project(report_id, ctx.project_id)
        if not report:
            raise ReportNotFoundError("Report not found")
        return report

    def _get_owned_report(self, ctx: AuthContext, report_id: int) -> models.DailyReport:
        report = self._get_report(ctx, report_id)
        require_ownership(report, ctx.principal)
        return report

    def _check_parent(self, ctx: AuthContext, child, label: str) -> models.DailyReport:
        # 하위 리소스는 상위 보고서의 프로젝트와 작성자를 따릅니다.
        if child is None or child.report is None or child.report.project_id != ctx.project_id:
            raise NotFoundError(f"{label} not found")
        require_ownership(child.report, ctx.principal)
        return child.report

    def create_report(self, ctx: AuthContext, task_description: str, report_date: Optional[str] = None,
                      progress_percent: float = 0, weather: Optional[str] = None, total_workers: int = 0,
                      location: Optional[str] = None, issues: Optional[str] = None) -> Dict[str, Any]:
        """
        새 일일 보고서를 작성합니다. 작성자는 호출자로 기록됩니다.

        Args:
            ctx: 프로젝트 게이트를 통과한 컨텍스트.
            task_description: 오늘 진행한 작업 요약. (필수)
            report_date: 'YYYY-MM-DD'. 지정하지 않으면 오늘 날짜.
            progress_percent: 0~100 사이의 진척도.
            total_workers: 투입 인원 (0 이상의 정수).

        Returns:
            생성된 보고서 정보를 담은 딕셔너리.
        """
        require_text(task_description, "task_description")
        require_range(progress_percent, "progress_percent", 0, 100)
        require_range(total_workers, "total_workers", 0)
        day = parse_date(report_date) or date.today()

        new_report = models.DailyReport(
            slug=f"report-{day.isoformat()}-{uuid.uuid4().hex[:8]}",
            project_id=ctx.project_id,
            user_id=ctx.principal.id,
            report_date=day,
            task_description=task_description,
            progress_percent=progress_percent,
            weather=weather,
            total_workers=int(total_workers),
            location=location,
            issues=issues,
        )
        created_report = self.report_repo.create(new_report)
        logger.info("Report %s created in project %s by %s.", created_report.id, ctx.project_id, ctx.principal.id)
        return _report_to_dict(created_report)

    def get_report(self, ctx: AuthContext, report_id: int) -> Dict[str, Any]:
        return _report_to_dict(self._get_report(ctx, report_id))

    def get_report_by_slug(self, ctx: AuthContext, report_slug: str) -> Dict[str, Any]:
        report = self.report_repo.find_by_slug_in_project(report_slug, ctx.project_id)
        if not report:
            raise ReportNotFoundError("Report not found")
        return _report_to_dict(report)

    def list_reports(self, ctx: AuthContext, limit: int = DEFAULT_PAGE_SIZE, cursor: Optional[int] = None) -> Dict[str, Any]:
        """
        프로젝트의 보고서를 최신순(report_date, id 내림차순)으로 조회합니다.

        Returns:
            {"reports": [...], "next_cursor": 다음 페이지의 첫 보고서 ID 또는 None}
        """
        require_range(limit, "limit", 1, MAX_PAGE_SIZE)
        reports = self.report_repo.list_by_project(ctx.project_id, limit + 1, cursor)

        next_cursor = None
        if len(reports) > limit:
            next_cursor = reports[limit].id
            reports = reports[:limit]
        return {"reports": [_report_to_dict(r) for r in reports], "next_cursor": next_cursor}

    def update_report(self, ctx: AuthContext, report_id: int, task_description: Optional[str] = None,
                      progress_percent: Optional[float] = None, weather: Optional[str] = None,
                      total_workers: Optional[int] = None, location: Optional[str] = None,
                      issues: Optional[str] = None) -> Dict[str, Any]:
        report = self._get_owned_report(ctx, report_id)
        if task_description is not None:
            report.task_description = require_text(task_description, "task_description")
        if progress_percent is not None:
            report.progress_percent = require_range(progress_percent, "progress_percent", 0, 100)
        if total_workers is not None:
            report.total_workers = int(require_range(total_workers, "total_workers", 0))
        if weather is not None:
            report.weather = weather
        if location is not None:
            report.location = location
        if issues is not None:
            report.issues = issues
        self.report_repo.save(report)
        return _report_to_dict(report)

    def delete_report(self, ctx: AuthContext, report_id: int) -> bool:
        """보고서를 삭제합니다. 작업 내역, 사진, 댓글도 함께 삭제됩니다."""
        report = self._get_owned_report(ctx, report_id)
        self.report_repo.delete(report)
        logger.info("Report %s deleted by %s.", report_id, ctx.principal.id)
        return True

    def add_task(self, ctx: AuthContext, report_id: int, task_name: str, worker_count: int = 0,
                 progress: float = 0, notes: Optional[str] = None) -> Dict[str, Any]:
        report = self._get_owned_report(ctx, report_id)
        require_text(task_name, "task_name")
        require_range(worker_count, "worker_count", 0)
        require_range(progress, "progress", 0, 100)

        task = self.report_repo.create_task(models.DailyReportTask(
            report_id=report.id,
            task_name=task_name,
            worker_count=int(worker_count),
            progress=progress,
            notes=notes,
        ))
        return _task_to_dict(task)

    def update_task(self, ctx: AuthContext, task_id: int, task_name: Optional[str] = None,
                    worker_count: Optional[int] = None, progress: Optional[float] = None,
                    notes: Optional[str] = None) -> Dict[str, Any]:
        task = self.report_repo.find_task_by_id(task_id)
        self._check_parent(ctx, task, "Task")
        if task_name is not None:
            task.task_name = require_text(task_name, "task_name")
        if worker_count is not None:
            task.worker_count = int(require_range(worker_count, "worker_count", 0))
        if progress is not None:
            task.progress = require_range(progress, "progress", 0, 100)
        if notes is not None:
            task.notes = notes
        self.report_repo.save_task(task)
        return _task_to_dict(task)

    def delete_task(self, ctx: AuthContext, task_id: int) -> bool:
        task = self.report_repo.find_task_by_id(task_id)
        self._check_parent(ctx, task, "Task")
        return self.report_repo.delete_task(task)

    def add_media(self, ctx: AuthContext, report_id: int, public_id: str, url: str) -> Dict[str, Any]:
        """외부 저장소에 이미 업로드된 사진을 보고서에 첨부합니다."""
        report = self._get_owned_report(ctx, report_id)
        require_text(public_id, "public_id")
        require_url(url)
        media = self.report_repo.create_media(models.ReportMedia(report_id=report.id, public_id=public_id, url=url))
        return _media_to_dict(media)

    def delete_media(self, ctx: AuthContext, media_id: int) -> bool:
        media = self.report_repo.find_media_by_id(media_id)
        self._check_parent(ctx, media, "Media")
        return self.report_repo.delete_media(media)
