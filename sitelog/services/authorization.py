# sitelog/services/authorization.py
"""
요청 인가 체인.

모든 보호된 작업은 다음 순서의 파이프라인을 거칩니다.

    세션 확인 -> 전역 역할 게이트 -> [프로젝트 멤버십 확인 -> 프로젝트 역할 게이트] -> [소유권 확인] -> 핸들러

게이트는 (AuthContext, payload)를 받아 보강된 AuthContext를 반환하거나 AuthorizationError를 발생시킵니다.
핸들러는 모든 게이트를 통과한 경우에만 호출되므로, 실패한 요청은 저장소에 아무런 변경도 남기지 않습니다.
"""
import enum
import inspect
import logging
import time
from dataclasses import dataclass, replace
from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple

from sitelog.database.models import GlobalRole, ProjectRole
from sitelog.repositories.interfaces import IMembershipRepository, IProjectRepository
from sitelog.services.exceptions import (
    AuthorizationError, UnauthenticatedError, AccountInactiveError, RoleNotAssignedError,
    RoleInvalidError, AdminRequiredError, BadRequestError, NotAMemberError,
    RoleNotPermittedError, CeoReadOnlyError, NotFoundError, NotOwnerError, ProjectNotFoundError
)

logger = logging.getLogger(__name__)

KNOWN_GLOBAL_ROLES = frozenset({GlobalRole.ADMIN, GlobalRole.CEO, GlobalRole.USER})
ELEVATED_GLOBAL_ROLES = frozenset({GlobalRole.ADMIN, GlobalRole.CEO})


class OperationType(str, enum.Enum):
    QUERY = "query"
    MUTATION = "mutation"


@dataclass(frozen=True)
class Principal:
    """인증된 호출자. 세션 확인 단계에서 만들어져 체인 전체에 명시적으로 전달됩니다."""
    id: int
    is_active: bool
    global_role: GlobalRole
    name: str = ""
    email: str = ""

    @property
    def is_admin(self) -> bool:
        return self.global_role == GlobalRole.ADMIN

    @property
    def is_ceo(self) -> bool:
        return self.global_role == GlobalRole.CEO

    @property
    def is_elevated(self) -> bool:
        """ADMIN과 CEO는 프로젝트 멤버십 없이도 모든 프로젝트에 접근할 수 있습니다."""
        return self.global_role in ELEVATED_GLOBAL_ROLES


@dataclass(frozen=True)
class AuthContext:
    """
    게이트를 하나씩 통과하면서 보강되는 요청 컨텍스트입니다.

    Attributes:
        principal: 호출자. 전역 역할 게이트를 통과한 뒤에는 항상 None이 아닙니다.
        operation_type: 작업 분류 (query 또는 mutation).
        allow_ceo: 작업이 CEO의 쓰기를 명시적으로 허용하는지 여부.
        project_id: 프로젝트 게이트가 확인한 프로젝트 ID.
        project_role: 호출자의 프로젝트 역할. ADMIN/CEO가 멤버십 없이 접근하면 None.
        membership_bypassed: ADMIN/CEO 권한으로 멤버십 확인을 건너뛰었는지 여부.
    """
    principal: Optional[Principal]
    operation_type: OperationType
    allow_ceo: bool = False
    project_id: Optional[int] = None
    project_role: Optional[ProjectRole] = None
    membership_bypassed: bool = False


Gate = Callable[[AuthContext, Dict[str, Any]], AuthContext]


def _require_active_principal(ctx: AuthContext) -> Principal:
    principal = ctx.principal
    if principal is None:
        raise UnauthenticatedError("Not authenticated")
    if not principal.is_active:
        raise AccountInactiveError("Account is not active. Please wait for admin approval.")
    return principal


def global_role_gate(ctx: AuthContext, payload: Dict[str, Any]) -> AuthContext:
    """
    모든 보호된 작업에 적용되는 첫 번째 게이트입니다.

    Raises:
        UnauthenticatedError: 세션이 없을 때.
        AccountInactiveError: 계정이 승인되지 않았을 때.
        RoleNotAssignedError: 전역 역할이 NONE일 때.
        RoleInvalidError: 전역 역할이 ADMIN, CEO, USER 중 하나가 아닐 때.
    """
    principal = _require_active_principal(ctx)
    if principal.global_role == GlobalRole.NONE:
        raise RoleNotAssignedError("You do not have permission to access this system.")
    if principal.global_role not in KNOWN_GLOBAL_ROLES:
        raise RoleInvalidError("Invalid role. Access denied.")
    return ctx


def admin_gate(ctx: AuthContext, payload: Dict[str, Any]) -> AuthContext:
    """
    관리자 작업용 게이트입니다. ADMIN과 CEO만 통과합니다.
    단, 관리 작업의 쓰기(사용자 승인, 프로젝트 생성/삭제, 멤버 관리)는 ADMIN만 수행할 수 있습니다.

    Raises:
        UnauthenticatedError, AccountInactiveError: global_role_gate와 동일.
        AdminRequiredError: ADMIN 또는 CEO가 아닐 때.
        CeoReadOnlyError: CEO가 허용되지 않은 쓰기 작업을 시도할 때.
    """
    principal = _require_active_principal(ctx)
    if not principal.is_elevated:
        raise AdminRequiredError("Admin access required.")
    _enforce_ceo_read_only(principal, ctx.operation_type, ctx.allow_ceo)
    return ctx


def _enforce_ceo_read_only(principal: Principal, operation_type: OperationType, allow_ceo: bool):
    if principal.is_ceo and operation_type == OperationType.MUTATION and not allow_ceo:
        raise CeoReadOnlyError("CEO has read-only access to project operations")


def resolve_project_membership(
    membership_repo: IMembershipRepository, principal: Principal, payload: Dict[str, Any]
) -> Tuple[int, Optional[ProjectRole], bool]:
    """
    호출자의 프로젝트 역할을 확인합니다. 멤버십 조회는 요청당 한 번만 수행합니다.

    Args:
        membership_repo: 멤버십 리포지토리.
        principal: 전역 역할 게이트를 통과한 호출자.
        payload: 'project_id'를 포함해야 하는 요청 본문.

    Returns:
        (project_id, 프로젝트 역할 또는 None, 멤버십 우회 여부) 튜플.

    Raises:
        BadRequestError: payload에 project_id가 없거나 정수가 아닐 때.
        NotAMemberError: 일반 사용자(USER)가 프로젝트 멤버가 아닐 때.
    """
    raw_project_id = payload.get("project_id")
    if raw_project_id is None or raw_project_id == "":
        raise BadRequestError("project_id is required in input")
    try:
        project_id = int(raw_project_id)
    except (TypeError, ValueError):
        raise BadRequestError(f"project_id must be an integer, got '{raw_project_id}'") from None

    member = membership_repo.find(principal.id, project_id)
    if member is None and not principal.is_elevated:
        raise NotAMemberError("You are not a member of this project")

    project_role = member.role if member is not None else None
    return project_id, project_role, principal.is_elevated


def check_project_role(
    principal: Principal,
    project_role: Optional[ProjectRole],
    allowed_roles: Iterable[ProjectRole],
    operation_type: OperationType,
    allow_ceo: bool = False,
):
    """
    확인된 프로젝트 역할이 작업의 허용 목록에 있는지 검사합니다.

    - ADMIN은 허용 목록과 관계없이 항상 통과합니다.
    - 프로젝트 역할이 있으면 허용 목록에 포함되어야 합니다.
    - CEO는 allow_ceo가 선언된 작업을 제외하면 mutation을 수행할 수 없습니다.

    Raises:
        RoleNotPermittedError: 프로젝트 역할이 허용 목록에 없을 때.
        CeoReadOnlyError: CEO가 허용되지 않은 쓰기 작업을 시도할 때.
    """
    if principal.is_admin:
        return
    allowed = list(allowed_roles)
    if project_role is not None and project_role not in allowed:
        role_names = ", ".join(role.value for role in allowed)
        raise RoleNotPermittedError(f"This action requires one of the following roles: {role_names}")
    _enforce_ceo_read_only(principal, operation_type, allow_ceo)


class ProjectGate:
    """
    프로젝트 멤버십 확인과 프로젝트 역할 게이트를 하나로 묶은 게이트입니다.

    ADMIN/CEO가 멤버십 없이 접근하면 프로젝트가 실제로 존재하는지 한 번 더 조회합니다.

    Raises:
        ProjectNotFoundError: 멤버십을 건너뛴 호출자가 존재하지 않는 프로젝트에 접근할 때.
    """

    def __init__(self, membership_repo: IMembershipRepository, project_repo: IProjectRepository,
                 allowed_roles: Iterable[ProjectRole]):
        self.membership_repo = membership_repo
        self.project_repo = project_repo
        self.allowed_roles = tuple(allowed_roles)

    def __call__(self, ctx: AuthContext, payload: Dict[str, Any]) -> AuthContext:
        project_id, project_role, bypassed = resolve_project_membership(
            self.membership_repo, ctx.principal, payload
        )
        if project_role is None and self.project_repo.find_by_id(project_id) is None:
            raise ProjectNotFoundError("Project not found")
        check_project_role(ctx.principal, project_role, self.allowed_roles, ctx.operation_type, ctx.allow_ceo)
        return replace(ctx, project_id=project_id, project_role=project_role, membership_bypassed=bypassed)


def require_ownership(entity: Any, principal: Principal, owner_attr: str = "user_id"):
    """
    단일 리소스를 수정하기 전에 호출자가 작성자인지 확인합니다. ADMIN은 항상 통과합니다.
    존재 여부를 먼저 검사하므로, 없는 ID에 대해서는 NOT_OWNER가 아닌 NOT_FOUND가 발생합니다.

    Raises:
        NotFoundError: 리소스가 None일 때.
        NotOwnerError: 리소스의 작성자가 호출자가 아닐 때.
    """
    if principal.is_admin:
        return
    if entity is None:
        raise NotFoundError("Resource not found")
    if getattr(entity, owner_attr) != principal.id:
        raise NotOwnerError("You can only modify your own resources")


class Procedure:
    """게이트 목록과 핸들러를 순서대로 실행하는 보호된 작업입니다."""

    def __init__(self, name: str, handler: Callable[..., Any], gates: List[Gate],
                 operation_type: OperationType, allow_ceo: bool = False):
        self.name = name
        self.handler = handler
        self.gates = list(gates)
        self.operation_type = operation_type
        self.allow_ceo = allow_ceo

    def __call__(self, principal: Optional[Principal], payload: Optional[Dict[str, Any]] = None) -> Any:
        payload = dict(payload or {})
        ctx = AuthContext(principal=principal, operation_type=self.operation_type, allow_ceo=self.allow_ceo)

        try:
            for gate in self.gates:
                ctx = gate(ctx, payload)
        except AuthorizationError as e:
            logger.info("Denied '%s' for principal %s: %s",
                        self.name, principal.id if principal else None, e.kind.value)
            raise

        arguments = self._handler_arguments(ctx, payload)
        started = time.perf_counter()
        try:
            return self.handler(ctx, **arguments)
        finally:
            logger.debug("'%s' took %.1fms", self.name, (time.perf_counter() - started) * 1000)

    def _handler_arguments(self, ctx: AuthContext, payload: Dict[str, Any]) -> Dict[str, Any]:
        # 프로젝트 게이트가 확인한 project_id는 컨텍스트로만 전달합니다.
        if ctx.project_id is not None:
            payload.pop("project_id", None)
        try:
            inspect.signature(self.handler).bind(ctx, **payload)
        except TypeError as e:
            raise BadRequestError(f"Invalid input for '{self.name}': {e}") from e
        return payload


class ProcedureFactory:
    """
    작업 종류별 게이트 체인을 구성합니다.

    Example:
        factory = ProcedureFactory(membership_repo, project_repo)
        create = factory.project("report.create", report_service.create_report,
                                 OperationType.MUTATION, [ProjectRole.MANDOR, ProjectRole.ARCHITECT])
        create(principal, {"project_id": 1, "task_description": "Pengecoran lantai 2"})
    """

    def __init__(self, membership_repo: IMembershipRepository, project_repo: IProjectRepository):
        self.membership_repo = membership_repo
        self.project_repo = project_repo

    def protected(self, name: str, handler: Callable[..., Any], operation_type: OperationType,
                  allow_ceo: bool = False) -> Procedure:
        return Procedure(name, handler, [global_role_gate], operation_type, allow_ceo)

    def admin(self, name: str, handler: Callable[..., Any], operation_type: OperationType) -> Procedure:
        return Procedure(name, handler, [admin_gate], operation_type)

    def project(self, name: str, handler: Callable[..., Any], operation_type: OperationType,
                allowed_roles: Iterable[ProjectRole], allow_ceo: bool = False) -> Procedure:
        gates = [global_role_gate, ProjectGate(self.membership_repo, self.project_repo, allowed_roles)]
        return Procedure(name, handler, gates, operation_type, allow_ceo)
