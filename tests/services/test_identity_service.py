# tests/services/test_identity_service.py
import pytest
from unittest.mock import MagicMock, ANY
from datetime import datetime, timedelta
import hashlib

from sitelog.services.identity_service import IdentityService
from sitelog.services.exceptions import *
from sitelog.repositories.interfaces import IUserRepository, ISessionRepository
from sitelog.database import models

# ===================================================================
#  Fixture 설정
# ===================================================================

@pytest.fixture
def mock_user_repo() -> MagicMock:
    """IUserRepository에 대한 모의 객체를 생성합니다."""
    return MagicMock(spec=IUserRepository)

@pytest.fixture
def mock_session_repo() -> MagicMock:
    """ISessionRepository에 대한 모의 객체를 생성합니다."""
    return MagicMock(spec=ISessionRepository)

@pytest.fixture
def identity_service(mock_user_repo: MagicMock, mock_session_repo: MagicMock) -> IdentityService:
    """테스트에 사용될 IdentityService 인스턴스를 생성하고, 의존성을 주입합니다."""
    return IdentityService(mock_user_repo, mock_session_repo, session_ttl_hours=24)

def make_user(**overrides) -> models.User:
    fields = dict(id=1, name="Budi", email="budi@example.com", password_hash="hash",
                  role_global=models.GlobalRole.USER, is_active=True)
    fields.update(overrides)
    return models.User(**fields)

# ===================================================================
#  가입(Registration) 테스트
# ===================================================================
class TestRegistration:
    def test_register_creates_inactive_user(self, identity_service: IdentityService, mock_user_repo: MagicMock):
        """가입한 계정은 승인 전까지 비활성 상태이며 전역 역할은 NONE입니다."""
        # === Arrange (테스트 준비) ===
        # 시나리오: 이메일이 중복되지 않음
        mock_user_repo.find_by_email.return_value = None
        mock_user_repo.create.side_effect = lambda user: user

        # === Act (실제 테스트 대상 실행) ===
        identity_service.register("Budi", "budi@example.com", "rahasia")

        # === Assert (결과 검증) ===
        created = mock_user_repo.create.call_args.args[0]
        assert created.is_active is False
        assert created.role_global == models.GlobalRole.NONE
        assert created.password_hash == hashlib.sha256("rahasia".encode('utf-8')).hexdigest()
        mock_user_repo.find_by_email.assert_called_once_with("budi@example.com")

    def test_register_fails_if_email_exists(self, identity_service: IdentityService, mock_user_repo: MagicMock):
        """이메일이 중복될 경우 RegistrationError가 발생하는지 테스트합니다."""
        # === Arrange ===
        mock_user_repo.find_by_email.return_value = make_user()

        # === Act & Assert ===
        with pytest.raises(RegistrationError):
            identity_service.register("Budi", "budi@example.com", "rahasia")
        # 검증: create는 호출되지 않았어야 함
        mock_user_repo.create.assert_not_called()

    def test_register_rejects_blank_password(self, identity_service: IdentityService, mock_user_repo: MagicMock):
        with pytest.raises(ValueError):
            identity_service.register("Budi", "budi@example.com", "   ")
        mock_user_repo.create.assert_not_called()

# ===================================================================
#  인증(Authentication) 테스트
# ===================================================================
class TestAuthentication:
    def test_authenticate_success(self, identity_service: IdentityService, mock_user_repo: MagicMock, mock_session_repo: MagicMock):
        """사용자 인증 성공 시 세션이 저장되고 토큰이 발급됩니다."""
        # === Arrange ===
        password = "password123"
        hashed_password = hashlib.sha256(password.encode('utf-8')).hexdigest()
        mock_user_repo.find_by_email.return_value = make_user(password_hash=hashed_password)

        # === Act ===
        result = identity_service.authenticate("budi@example.com", password)

        # === Assert ===
        assert "token" in result
        assert "expires_at" in result
        mock_session_repo.create.assert_called_once_with(ANY)
        saved_session = mock_session_repo.create.call_args.args[0]
        assert saved_session.token == result["token"]
        assert saved_session.user_id == 1
        # 검증: 로그인 시 해당 사용자의 만료된 세션이 정리됨
        mock_session_repo.delete_expired.assert_called_once_with(1, ANY)

    def test_authenticate_fails_with_wrong_password(self, identity_service: IdentityService, mock_user_repo: MagicMock, mock_session_repo: MagicMock):
        """잘못된 비밀번호로 인증 실패 시나리오를 테스트합니다."""
        # === Arrange ===
        # 시나리오: 사용자는 존재하지만, DB의 해시값과 다름
        mock_user_repo.find_by_email.return_value = make_user(password_hash="correct_hash")

        # === Act & Assert ===
        with pytest.raises(AuthenticationError, match="Invalid email or password"):
            identity_service.authenticate("budi@example.com", "wrong_password")
        mock_session_repo.create.assert_not_called()

    def test_authenticate_fails_for_unknown_email(self, identity_service: IdentityService, mock_user_repo: MagicMock):
        mock_user_repo.find_by_email.return_value = None

        with pytest.raises(AuthenticationError):
            identity_service.authenticate("nobody@example.com", "x")

    def test_authenticate_rejects_missing_password(self, identity_service: IdentityService, mock_user_repo: MagicMock):
        with pytest.raises(ValueError):
            identity_service.authenticate("budi@example.com", None)
        mock_user_repo.find_by_email.assert_not_called()

    def test_logout_deletes_session(self, identity_service: IdentityService, mock_session_repo: MagicMock):
        session = models.UserSession(token="abc", user_id=1, expires_at=datetime.now())
        mock_session_repo.find_by_token.return_value = session
        mock_session_repo.delete.return_value = True

        assert identity_service.logout("abc") is True
        mock_session_repo.delete.assert_called_once_with(session)

    def test_logout_without_token(self, identity_service: IdentityService, mock_session_repo: MagicMock):
        assert identity_service.logout(None) is False
        mock_session_repo.find_by_token.assert_not_called()

# ===================================================================
#  세션 확인(Session Resolver) 테스트
# ===================================================================
class TestSessionResolver:
    def test_missing_token_resolves_to_none(self, identity_service: IdentityService, mock_session_repo: MagicMock):
        assert identity_service.resolve_session(None) is None
        assert identity_service.resolve_session("") is None
        mock_session_repo.find_by_token.assert_not_called()

    def test_unknown_token_resolves_to_none(self, identity_service: IdentityService, mock_session_repo: MagicMock):
        mock_session_repo.find_by_token.return_value = None

        assert identity_service.resolve_session("unknown") is None

    def test_expired_session_resolves_to_none_without_changes(self, identity_service: IdentityService, mock_session_repo: MagicMock):
        """만료된 세션은 None으로 처리되며, 세션 확인은 저장소를 변경하지 않습니다."""
        # === Arrange ===
        expired = models.UserSession(token="old", user_id=1, expires_at=datetime.now() - timedelta(minutes=1))
        mock_session_repo.find_by_token.return_value = expired

        # === Act ===
        principal = identity_service.resolve_session("old")

        # === Assert ===
        assert principal is None
        mock_session_repo.delete.assert_not_called()
        mock_session_repo.delete_expired.assert_not_called()

    def test_valid_session_resolves_principal(self, identity_service: IdentityService, mock_session_repo: MagicMock):
        # === Arrange ===
        session = models.UserSession(token="t", user_id=3, expires_at=datetime.now() + timedelta(hours=1))
        session.user = make_user(id=3, role_global=models.GlobalRole.CEO, is_active=True)
        mock_session_repo.find_by_token.return_value = session

        # === Act ===
        principal = identity_service.resolve_session("t")

        # === Assert ===
        assert principal.id == 3
        assert principal.global_role == models.GlobalRole.CEO
        assert principal.is_active is True
        assert principal.is_elevated is True

    def test_inactive_user_still_resolves(self, identity_service: IdentityService, mock_session_repo: MagicMock):
        """비활성 계정도 Principal로 확인되며, 거부는 전역 역할 게이트에서 이루어집니다."""
        session = models.UserSession(token="t", user_id=4, expires_at=datetime.now() + timedelta(hours=1))
        session.user = make_user(id=4, role_global=models.GlobalRole.NONE, is_active=False)
        mock_session_repo.find_by_token.return_value = session

        principal = identity_service.resolve_session("t")

        assert principal.is_active is False
        assert principal.global_role == models.GlobalRole.NONE

    def test_storage_errors_propagate(self, identity_service: IdentityService, mock_session_repo: MagicMock):
        mock_session_repo.find_by_token.side_effect = RuntimeError("database is locked")

        with pytest.raises(RuntimeError):
            identity_service.resolve_session("t")
