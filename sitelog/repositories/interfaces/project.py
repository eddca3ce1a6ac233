from abc import ABC, abstractmethod
from typing import List, Optional
from sitelog.database import models

class IProjectRepository(ABC):
    @abstractmethod
    def create(self, project_model: models.Project) -> models.Project:
        """새로운 프로젝트를 데이터베이스에 생성합니다."""
        pass

    @abstractmethod
    def find_by_id(self, project_id: int) -> Optional[models.Project]:
        """고유 ID로 특정 프로젝트를 조회합니다."""
        pass

    @abstractmethod
    def find_by_slug(self, slug: str) -> Optional[models.Project]:
        """슬러그로 특정 프로젝트를 조회합니다."""
        pass

    @abstractmethod
    def list_all(self) -> List[models.Project]:
        """모든 프로젝트의 목록을 최근 생성 순으로 조회합니다."""
        pass

    @abstractmethod
    def list_by_member(self, user_id: int) -> List[models.Project]:
        """특정 사용자가 멤버로 소속된 프로젝트 목록만 조회합니다."""
        pass

    @abstractmethod
    def save(self, project: models.Project) -> models.Project:
        """변경된 프로젝트 정보를 저장합니다."""
        pass

    @abstractmethod
    def delete(self, project: models.Project) -> bool:
        """특정 프로젝트를 데이터베이스에서 삭제합니다. 종속 데이터도 함께 삭제됩니다."""
        pass
