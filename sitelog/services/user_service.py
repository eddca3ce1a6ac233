import logging
from datetime import datetime
from typing import Dict, Any, List, Optional

from sitelog.database import models
from sitelog.repositories.interfaces import IUserRepository
from sitelog.services.authorization import AuthContext
from sitelog.services.exceptions import UserNotFoundError
from sitelog.utils.serializers import iso, enum_value
from sitelog.utils.validators import require_text

logger = logging.getLogger(__name__)

APPROVABLE_ROLES = (models.GlobalRole.ADMIN, models.GlobalRole.CEO, models.GlobalRole.USER)


def _user_to_dict(user: models.User) -> Dict[str, Any]:
    return {
        "id": user.id,
        "name": user.name,
        "email": user.email,
        "image": user.image,
        "role_global": enum_value(user.role_global),
        "is_active": bool(user.is_active),
        "approved_at": iso(user.approved_at),
        "approved_by_id": user.approved_by_id,
        "created_at": iso(user.created_at),
    }


class UserService:
    """사용자 승인, 전역 역할 관리, 본인 프로필 조회/수정을 처리합니다."""

    def __init__(self, user_repo: IUserRepository):
        self.user_repo = user_repo

    def _get_user(self, user_id: int) -> models.User:
        user = self.user_repo.find_by_id(user_id)
        if not user:
            raise UserNotFoundError(f"User with id '{user_id}' not found.")
        return user

    def list_users(self, ctx: AuthContext) -> List[Dict[str, Any]]:
        """모든 사용자의 목록을 조회합니다. (비밀번호 제외)"""
        return [_user_to_dict(u) for u in self.user_repo.list_all()]

    def list_pending(self, ctx: AuthContext) -> List[Dict[str, Any]]:
        """승인 대기 중인 사용자 목록을 조회합니다."""
        return [_user_to_dict(u) for u in self.user_repo.list_pending()]

    def approve_user(self, ctx: AuthContext, user_id: int, role: str) -> Dict[str, Any]:
        """
        사용자를 승인하고 전역 역할을 부여합니다. 승인자와 승인 시각이 함께 기록됩니다.

        Raises:
            ValueError: role이 ADMIN, CEO, USER 중 하나가 아닐 때.
            UserNotFoundError: 해당 ID의 사용자를 찾을 수 없을 때.
        """
        global_role = models.GlobalRole(role)
        if global_role not in APPROVABLE_ROLES:
            raise ValueError(f"Cannot approve a user with role '{role}'.")

        user = self._get_user(user_id)
        user.role_global = global_role
        user.is_active = True
        user.approved_at = datetime.now()
        user.approved_by_id = ctx.principal.id
        self.user_repo.save(user)
        logger.info("User %s approved as %s by %s.", user_id, global_role.value, ctx.principal.id)
        return _user_to_dict(user)

    def deactivate_user(self, ctx: AuthContext, user_id: int) -> Dict[str, Any]:
        """사용자를 비활성화하고 전역 역할을 NONE으로 되돌립니다."""
        user = self._get_user(user_id)
        user.is_active = False
        user.role_global = models.GlobalRole.NONE
        self.user_repo.save(user)
        logger.info("User %s deactivated by %s.", user_id, ctx.principal.id)
        return _user_to_dict(user)

    def update_role(self, ctx: AuthContext, user_id: int, role: str) -> Dict[str, Any]:
        user = self._get_user(user_id)
        user.role_global = models.GlobalRole(role)
        self.user_repo.save(user)
        logger.info("User %s global role set to %s by %s.", user_id, user.role_global.value, ctx.principal.id)
        return _user_to_dict(user)

    def get_current_user(self, ctx: AuthContext) -> Dict[str, Any]:
        return _user_to_dict(self._get_user(ctx.principal.id))

    def update_profile(self, ctx: AuthContext, name: Optional[str] = None, image: Optional[str] = None) -> Dict[str, Any]:
        """호출자 본인의 프로필만 수정합니다. CEO에게도 허용된 쓰기 작업입니다."""
        user = self._get_user(ctx.principal.id)
        if name is not None:
            user.name = require_text(name, "name")
        if image is not None:
            user.image = image
        self.user_repo.save(user)
        return _user_to_dict(user)
