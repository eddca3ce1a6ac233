# tests/services/test_user_service.py
import pytest
from unittest.mock import MagicMock

from sitelog.services.user_service import UserService
from sitelog.services.authorization import AuthContext, OperationType, Principal
from sitelog.services.exceptions import *
from sitelog.repositories.interfaces import IUserRepository
from sitelog.database import models

@pytest.fixture
def mock_user_repo() -> MagicMock:
    """IUserRepository에 대한 모의 객체를 생성합니다."""
    return MagicMock(spec=IUserRepository)

@pytest.fixture
def user_service(mock_user_repo: MagicMock) -> UserService:
    return UserService(mock_user_repo)

def make_ctx(user_id: int = 1, role=models.GlobalRole.ADMIN) -> AuthContext:
    return AuthContext(principal=Principal(id=user_id, is_active=True, global_role=role),
                       operation_type=OperationType.MUTATION)

def pending_user(user_id: int = 8) -> models.User:
    return models.User(id=user_id, name="Andi", email="andi@example.com", password_hash="h",
                       role_global=models.GlobalRole.NONE, is_active=False)


class TestUserApproval:
    def test_approve_user_activates_and_assigns_role(self, user_service: UserService, mock_user_repo: MagicMock):
        """승인 시 계정이 활성화되고 승인자가 기록됩니다."""
        # === Arrange ===
        user = pending_user()
        mock_user_repo.find_by_id.return_value = user

        # === Act ===
        result = user_service.approve_user(make_ctx(user_id=1), user_id=8, role="USER")

        # === Assert ===
        assert result["is_active"] is True
        assert result["role_global"] == "USER"
        assert user.approved_by_id == 1
        assert user.approved_at is not None
        mock_user_repo.save.assert_called_once_with(user)

    def test_approve_with_none_role_is_rejected(self, user_service: UserService, mock_user_repo: MagicMock):
        with pytest.raises(ValueError):
            user_service.approve_user(make_ctx(), user_id=8, role="NONE")
        mock_user_repo.save.assert_not_called()

    def test_approve_unknown_user(self, user_service: UserService, mock_user_repo: MagicMock):
        mock_user_repo.find_by_id.return_value = None

        with pytest.raises(UserNotFoundError):
            user_service.approve_user(make_ctx(), user_id=8, role="USER")

    def test_deactivate_user(self, user_service: UserService, mock_user_repo: MagicMock):
        user = models.User(id=8, name="Andi", email="andi@example.com", password_hash="h",
                           role_global=models.GlobalRole.USER, is_active=True)
        mock_user_repo.find_by_id.return_value = user

        result = user_service.deactivate_user(make_ctx(), user_id=8)

        assert result["is_active"] is False
        assert result["role_global"] == "NONE"


class TestOwnProfile:
    def test_update_profile_changes_only_caller(self, user_service: UserService, mock_user_repo: MagicMock):
        """프로필 수정은 항상 호출자 본인에게만 적용됩니다."""
        user = models.User(id=4, name="Lama", email="ceo@example.com", password_hash="h",
                           role_global=models.GlobalRole.CEO, is_active=True)
        mock_user_repo.find_by_id.return_value = user

        result = user_service.update_profile(make_ctx(user_id=4, role=models.GlobalRole.CEO), name="Baru")

        assert result["name"] == "Baru"
        mock_user_repo.find_by_id.assert_called_once_with(4)

    def test_profile_never_exposes_password_hash(self, user_service: UserService, mock_user_repo: MagicMock):
        mock_user_repo.find_by_id.return_value = pending_user(user_id=1)

        result = user_service.get_current_user(make_ctx(user_id=1))

        assert "password_hash" not in result
