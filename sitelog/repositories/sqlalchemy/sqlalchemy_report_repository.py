from typing import List, Optional
from sqlalchemy import and_, or_
from sqlalchemy.orm import Session, joinedload, selectinload
from sitelog.database import models
from sitelog.repositories.interfaces import IReportRepository

class SqlalchemyReportRepository(IReportRepository):
    def __init__(self, db_session: Session):
        self.db = db_session

    def _add(self, model):
        self.db.add(model)
        self.db.commit()
        self.db.refresh(model)
        return model

    def _remove(self, model) -> bool:
        if model:
            self.db.delete(model)
            self.db.commit()
            return True
        return False

    def create(self, report_model: models.DailyReport) -> models.DailyReport:
        return self._add(report_model)

    def find_in_project(self, report_id: int, project_id: int) -> Optional[models.DailyReport]:
        return self.db.query(models.DailyReport).filter(
            models.DailyReport.id == report_id,
            models.DailyReport.project_id == project_id
        ).first()

    def find_by_slug_in_project(self, slug: str, project_id: int) -> Optional[models.DailyReport]:
        return self.db.query(models.DailyReport).filter(
            models.DailyReport.slug == slug,
            models.DailyReport.project_id == project_id
        ).first()

    def list_by_project(self, project_id: int, limit: int, cursor: Optional[int] = None) -> List[models.DailyReport]:
        query = self.db.query(models.DailyReport).options(
            selectinload(models.DailyReport.tasks), selectinload(models.DailyReport.media)
        ).filter(models.DailyReport.project_id == project_id)

        if cursor is not None:
            anchor = self.find_in_project(cursor, project_id)
            if anchor is None:
                # 삭제되었거나 다른 프로젝트의 커서는 첫 페이지로 되돌아가지 않고 빈 목록을 반환합니다.
                return []
            # 정렬 순서(report_date desc, id desc)에서 커서 보고서와 그 이후의 보고서만 남깁니다.
            query = query.filter(or_(
                models.DailyReport.report_date < anchor.report_date,
                and_(models.DailyReport.report_date == anchor.report_date, models.DailyReport.id <= anchor.id)
            ))

        ordered = query.order_by(models.DailyReport.report_date.desc(), models.DailyReport.id.desc())
        return ordered.limit(limit).all()

    def save(self, report: models.DailyReport) -> models.DailyReport:
        self.db.commit()
        self.db.refresh(report)
        return report

    def delete(self, report: models.DailyReport) -> bool:
        return self._remove(report)

    def create_task(self, task_model: models.DailyReportTask) -> models.DailyReportTask:
        return self._add(task_model)

    def find_task_by_id(self, task_id: int) -> Optional[models.DailyReportTask]:
        return self.db.query(models.DailyReportTask).options(
            joinedload(models.DailyReportTask.report)
        ).filter(models.DailyReportTask.id == task_id).first()

    def save_task(self, task: models.DailyReportTask) -> models.DailyReportTask:
        self.db.commit()
        self.db.refresh(task)
        return task

    def delete_task(self, task: models.DailyReportTask) -> bool:
        return self._remove(task)

    def create_media(self, media_model: models.ReportMedia) -> models.ReportMedia:
        return self._add(media_model)

    def find_media_by_id(self, media_id: int) -> Optional[models.ReportMedia]:
        return self.db.query(models.ReportMedia).options(
            joinedload(models.ReportMedia.report)
        ).filter(models.ReportMedia.id == media_id).first()

    def delete_media(self, media: models.ReportMedia) -> bool:
        return self._remove(media)
