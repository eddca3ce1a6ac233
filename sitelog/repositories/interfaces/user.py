from abc import ABC, abstractmethod
from typing import List, Optional
from sitelog.database import models

class IUserRepository(ABC):
    @abstractmethod
    def create(self, user_model: models.User) -> models.User:
        """새로운 사용자를 데이터베이스에 생성합니다."""
        pass

    @abstractmethod
    def find_by_id(self, user_id: int) -> Optional[models.User]:
        """고유 ID로 특정 사용자를 조회합니다."""
        pass

    @abstractmethod
    def find_by_email(self, email: str) -> Optional[models.User]:
        """이메일로 특정 사용자를 조회합니다."""
        pass

    @abstractmethod
    def list_all(self) -> List[models.User]:
        """모든 사용자의 목록을 최근 가입 순으로 조회합니다."""
        pass

    @abstractmethod
    def list_pending(self) -> List[models.User]:
        """승인 대기 중인(비활성이거나 전역 역할이 NONE인) 사용자 목록을 조회합니다."""
        pass

    @abstractmethod
    def save(self, user: models.User) -> models.User:
        """변경된 사용자 정보를 저장합니다."""
        pass

    @abstractmethod
    def delete(self, user: models.User) -> bool:
        """특정 사용자를 데이터베이스에서 삭제합니다."""
        pass
