from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional
from sitelog.database import models

class ISessionRepository(ABC):
    @abstractmethod
    def create(self, session_model: models.UserSession) -> models.UserSession:
        """새로운 로그인 세션을 저장합니다."""
        pass

    @abstractmethod
    def find_by_token(self, token: str) -> Optional[models.UserSession]:
        """토큰으로 세션을 조회합니다. 세션의 사용자 정보도 함께 읽어옵니다."""
        pass

    @abstractmethod
    def delete(self, session: models.UserSession) -> bool:
        """세션을 삭제합니다. (로그아웃)"""
        pass

    @abstractmethod
    def delete_expired(self, user_id: int, now: datetime) -> int:
        """사용자의 만료된 세션을 모두 삭제하고 삭제한 개수를 반환합니다."""
        pass
