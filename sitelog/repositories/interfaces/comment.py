from abc import ABC, abstractmethod
from typing import List, Optional
from sitelog.database import models

class ICommentRepository(ABC):
    @abstractmethod
    def create(self, comment_model: models.ReportComment) -> models.ReportComment:
        """보고서에 새로운 댓글을 생성합니다."""
        pass

    @abstractmethod
    def find_by_id(self, comment_id: int) -> Optional[models.ReportComment]:
        """ID로 댓글을 조회합니다. 프로젝트 확인을 위해 상위 보고서도 함께 읽어옵니다."""
        pass

    @abstractmethod
    def list_by_report(self, report_id: int) -> List[models.ReportComment]:
        """보고서의 모든 댓글을 최신 순으로 조회합니다."""
        pass

    @abstractmethod
    def save(self, comment: models.ReportComment) -> models.ReportComment:
        pass

    @abstractmethod
    def delete(self, comment: models.ReportComment) -> bool:
        pass
