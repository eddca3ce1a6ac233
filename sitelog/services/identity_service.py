import hashlib
import logging
import uuid
from datetime import datetime, timedelta
from typing import Dict, Any, Optional

from sitelog.config import settings
from sitelog.database import models
from sitelog.repositories.interfaces import IUserRepository, ISessionRepository
from sitelog.services.authorization import Principal
from sitelog.services.exceptions import AuthenticationError, RegistrationError
from sitelog.utils.validators import require_text

logger = logging.getLogger(__name__)

class IdentityService:
    """가입, 로그인, 로그아웃과 요청 토큰으로부터 호출자(Principal)를 확인하는 기능을 제공합니다."""

    def __init__(self, user_repo: IUserRepository, session_repo: ISessionRepository, session_ttl_hours: int = None):
        """
        IdentityService를 초기화합니다.

        Args:
            user_repo: 사용자 데이터에 접근하기 위한 리포지토리.
            session_repo: 로그인 세션에 접근하기 위한 리포지토리.
            session_ttl_hours: 세션 유효 시간. 지정하지 않으면 설정값(SITELOG_SESSION_TTL_HOURS)을 사용합니다.
        """
        self.user_repo = user_repo
        self.session_repo = session_repo
        self.session_ttl = timedelta(hours=session_ttl_hours or settings.session_ttl_hours)

    @staticmethod
    def _hash_password(password: str) -> str:
        return hashlib.sha256(password.encode('utf-8')).hexdigest()

    def register(self, name: str, email: str, password: str) -> Dict[str, Any]:
        """
        새로운 계정을 생성합니다. 계정은 관리자가 승인하기 전까지 비활성 상태(전역 역할 NONE)입니다.

        Raises:
            RegistrationError: 동일한 이메일의 사용자가 이미 존재할 때.
            ValueError: 이름, 이메일, 비밀번호가 비어 있을 때.
        """
        require_text(name, "name")
        require_text(email, "email")
        require_text(password, "password")
        if self.user_repo.find_by_email(email):
            raise RegistrationError(f"User with email '{email}' already exists.")

        new_user = models.User(
            name=name,
            email=email,
            password_hash=self._hash_password(password),
            role_global=models.GlobalRole.NONE,
            is_active=False,
        )
        created_user = self.user_repo.create(new_user)
        logger.info("Registered user %s (%s), awaiting approval.", created_user.id, email)
        return {"id": created_user.id, "name": created_user.name, "email": created_user.email}

    def authenticate(self, email: str, password: str) -> Dict[str, str]:
        """
        자격증명을 검증하고, 성공 시 세션 토큰을 발급합니다.
        승인 대기 중인 계정도 로그인할 수 있으며, 접근 제한은 인가 게이트에서 처리합니다.

        Raises:
            AuthenticationError: 이메일 또는 비밀번호가 일치하지 않을 때.
            ValueError: 이메일 또는 비밀번호가 비어 있을 때.
        """
        require_text(email, "email")
        require_text(password, "password")
        user = self.user_repo.find_by_email(email)
        if not user or user.password_hash != self._hash_password(password):
            raise AuthenticationError("Invalid email or password.")

        # 새 세션을 발급하기 전에 이 사용자의 만료된 세션을 정리합니다.
        now = datetime.now()
        self.session_repo.delete_expired(user.id, now)

        token = str(uuid.uuid4())
        expires_at = now + self.session_ttl
        self.session_repo.create(models.UserSession(token=token, user_id=user.id, expires_at=expires_at))
        return {"token": token, "expires_at": expires_at.isoformat()}

    def logout(self, token: str) -> bool:
        """세션 토큰을 폐기합니다. 토큰이 없거나 이미 폐기되었으면 False를 반환합니다."""
        session = self.session_repo.find_by_token(token) if token else None
        if not session:
            return False
        return self.session_repo.delete(session)

    def resolve_session(self, token: Optional[str]) -> Optional[Principal]:
        """
        요청 토큰으로 호출자를 확인합니다.

        토큰이 없거나, 알 수 없거나, 만료된 경우 예외를 던지지 않고 None을 반환합니다.
        조회만 수행하며 저장소를 변경하지 않습니다. 저장소 장애로 인한 예외는 그대로 전파됩니다.

        Returns:
            호출자 정보(Principal) 또는 None.
        """
        if not token:
            return None

        session = self.session_repo.find_by_token(token)
        if not session:
            return None

        if datetime.now() > session.expires_at:
            return None

        user = session.user
        if user is None:
            return None
        return Principal(
            id=user.id,
            is_active=bool(user.is_active),
            global_role=user.role_global,
            name=user.name,
            email=user.email,
        )
