from abc import ABC, abstractmethod
from typing import List, Optional
from sitelog.database import models

class IReportRepository(ABC):
    @abstractmethod
    def create(self, report_model: models.DailyReport) -> models.DailyReport:
        """새로운 일일 보고서를 생성합니다."""
        pass

    @abstractmethod
    def find_in_project(self, report_id: int, project_id: int) -> Optional[models.DailyReport]:
        """프로젝트 안에서 ID로 보고서를 조회합니다. 다른 프로젝트의 보고서는 조회되지 않습니다."""
        pass

    @abstractmethod
    def find_by_slug_in_project(self, slug: str, project_id: int) -> Optional[models.DailyReport]:
        """프로젝트 안에서 슬러그로 보고서를 조회합니다."""
        pass

    @abstractmethod
    def list_by_project(self, project_id: int, limit: int, cursor: Optional[int] = None) -> List[models.DailyReport]:
        """
        프로젝트의 보고서를 보고 날짜 내림차순으로 최대 limit개 조회합니다.
        cursor가 주어지면 해당 ID의 보고서부터 조회하며, 프로젝트에 없는 cursor이면 빈 목록을 반환합니다.
        """
        pass

    @abstractmethod
    def save(self, report: models.DailyReport) -> models.DailyReport:
        pass

    @abstractmethod
    def delete(self, report: models.DailyReport) -> bool:
        pass

    @abstractmethod
    def create_task(self, task_model: models.DailyReportTask) -> models.DailyReportTask:
        """보고서에 작업 내역을 추가합니다."""
        pass

    @abstractmethod
    def find_task_by_id(self, task_id: int) -> Optional[models.DailyReportTask]:
        """ID로 작업 내역을 조회합니다. 소유권 확인을 위해 상위 보고서도 함께 읽어옵니다."""
        pass

    @abstractmethod
    def save_task(self, task: models.DailyReportTask) -> models.DailyReportTask:
        pass

    @abstractmethod
    def delete_task(self, task: models.DailyReportTask) -> bool:
        pass

    @abstractmethod
    def create_media(self, media_model: models.ReportMedia) -> models.ReportMedia:
        """보고서에 사진 정보를 추가합니다."""
        pass

    @abstractmethod
    def find_media_by_id(self, media_id: int) -> Optional[models.ReportMedia]:
        """ID로 사진 정보를 조회합니다. 상위 보고서도 함께 읽어옵니다."""
        pass

    @abstractmethod
    def delete_media(self, media: models.ReportMedia) -> bool:
        pass
