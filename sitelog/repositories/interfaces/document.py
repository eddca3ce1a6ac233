from abc import ABC, abstractmethod
from typing import List, Optional
from sitelog.database import models

class IDocumentRepository(ABC):
    @abstractmethod
    def create(self, document_model: models.ProjectDocument) -> models.ProjectDocument:
        """새로운 프로젝트 문서 정보를 생성합니다."""
        pass

    @abstractmethod
    def find_in_project(self, document_id: int, project_id: int) -> Optional[models.ProjectDocument]:
        """프로젝트 안에서 ID로 문서를 조회합니다."""
        pass

    @abstractmethod
    def list_by_project(self, project_id: int, file_type: Optional[models.DocumentType] = None) -> List[models.ProjectDocument]:
        """프로젝트의 문서를 최신 순으로 조회합니다. file_type이 주어지면 해당 종류만 조회합니다."""
        pass

    @abstractmethod
    def save(self, document: models.ProjectDocument) -> models.ProjectDocument:
        pass

    @abstractmethod
    def delete(self, document: models.ProjectDocument) -> bool:
        pass
