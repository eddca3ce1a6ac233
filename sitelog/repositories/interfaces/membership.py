from abc import ABC, abstractmethod
from typing import List, Optional
from sitelog.database import models

class IMembershipRepository(ABC):
    @abstractmethod
    def find(self, user_id: int, project_id: int) -> Optional[models.ProjectMember]:
        """
        (사용자, 프로젝트) 쌍에 대한 유일한 멤버십을 조회합니다.

        Args:
            user_id: 조회할 사용자의 ID.
            project_id: 조회할 프로젝트의 ID.

        Returns:
            멤버십이 있으면 ProjectMember, 없으면 None.
        """
        pass

    @abstractmethod
    def find_by_id(self, member_id: int) -> Optional[models.ProjectMember]:
        """멤버십 ID로 특정 멤버십을 조회합니다."""
        pass

    @abstractmethod
    def list_by_project(self, project_id: int) -> List[models.ProjectMember]:
        """특정 프로젝트의 모든 멤버십을 가입 순으로 조회합니다."""
        pass

    @abstractmethod
    def create(self, member_model: models.ProjectMember) -> models.ProjectMember:
        """새로운 멤버십을 생성합니다."""
        pass

    @abstractmethod
    def save(self, member: models.ProjectMember) -> models.ProjectMember:
        """변경된 멤버십(역할)을 저장합니다."""
        pass

    @abstractmethod
    def delete(self, member: models.ProjectMember) -> bool:
        """멤버십을 삭제합니다."""
        pass
