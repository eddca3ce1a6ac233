# sitelog/services/exceptions.py
import enum


class ErrorKind(str, enum.Enum):
    """인가 체인이 실패할 때 클라이언트에 그대로 전달되는 오류 종류입니다."""
    UNAUTHENTICATED = "UNAUTHENTICATED"
    ACCOUNT_INACTIVE = "ACCOUNT_INACTIVE"
    ROLE_NOT_ASSIGNED = "ROLE_NOT_ASSIGNED"
    ROLE_INVALID = "ROLE_INVALID"
    ADMIN_REQUIRED = "ADMIN_REQUIRED"
    BAD_REQUEST = "BAD_REQUEST"
    NOT_A_MEMBER = "NOT_A_MEMBER"
    ROLE_NOT_PERMITTED = "ROLE_NOT_PERMITTED"
    CEO_READ_ONLY = "CEO_READ_ONLY"
    NOT_FOUND = "NOT_FOUND"
    NOT_OWNER = "NOT_OWNER"


# --- Authorization Exceptions ---
class AuthorizationError(Exception):
    """인가 체인(게이트, 소유권 확인)에서 발생하는 모든 오류의 기반 클래스"""
    kind = None

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class UnauthenticatedError(AuthorizationError):
    """세션을 확인할 수 없을 때"""
    kind = ErrorKind.UNAUTHENTICATED

class AccountInactiveError(AuthorizationError):
    """세션은 유효하지만 계정이 아직 승인되지 않았을 때"""
    kind = ErrorKind.ACCOUNT_INACTIVE

class RoleNotAssignedError(AuthorizationError):
    """전역 역할이 NONE일 때"""
    kind = ErrorKind.ROLE_NOT_ASSIGNED

class RoleInvalidError(AuthorizationError):
    """전역 역할이 알려진 값이 아닐 때"""
    kind = ErrorKind.ROLE_INVALID

class AdminRequiredError(AuthorizationError):
    """관리자 전용 작업에 일반 사용자가 접근했을 때"""
    kind = ErrorKind.ADMIN_REQUIRED

class BadRequestError(AuthorizationError):
    """요청 본문에 필요한 값(예: project_id)이 없거나 형식이 맞지 않을 때"""
    kind = ErrorKind.BAD_REQUEST

class NotAMemberError(AuthorizationError):
    """일반 사용자가 소속되지 않은 프로젝트에 접근했을 때"""
    kind = ErrorKind.NOT_A_MEMBER

class RoleNotPermittedError(AuthorizationError):
    """프로젝트 역할이 작업의 허용 목록에 없을 때"""
    kind = ErrorKind.ROLE_NOT_PERMITTED

class CeoReadOnlyError(AuthorizationError):
    """CEO가 허용되지 않은 쓰기 작업을 시도할 때"""
    kind = ErrorKind.CEO_READ_ONLY

class NotFoundError(AuthorizationError):
    """대상 리소스가 존재하지 않을 때 (소유권 확인보다 먼저 검사)"""
    kind = ErrorKind.NOT_FOUND

class NotOwnerError(AuthorizationError):
    """호출자가 리소스의 작성자가 아닐 때"""
    kind = ErrorKind.NOT_OWNER


# --- General Exceptions ---
class ProjectNotFoundError(NotFoundError):
    """프로젝트를 찾을 수 없을 때"""
    pass

class UserNotFoundError(NotFoundError):
    """사용자를 찾을 수 없을 때"""
    pass

class MemberNotFoundError(NotFoundError):
    """프로젝트 멤버십을 찾을 수 없을 때"""
    pass

class ReportNotFoundError(NotFoundError):
    """보고서를 찾을 수 없을 때"""
    pass

class FundNotFoundError(NotFoundError):
    """프로젝트의 긴급 자금을 찾을 수 없을 때"""
    pass


# --- Creation/Validation Exceptions ---
class DuplicateSlugError(Exception):
    """동일한 슬러그의 프로젝트가 이미 존재할 때"""
    pass

class AlreadyMemberError(Exception):
    """사용자가 이미 프로젝트의 멤버일 때"""
    pass

class RegistrationError(Exception):
    """동일한 이메일의 사용자가 이미 존재할 때"""
    pass

class InsufficientBalanceError(Exception):
    """긴급 자금 잔액이 요청 금액보다 적을 때"""
    pass

class TransactionAlreadyVerifiedError(Exception):
    """이미 승인 또는 반려된 거래를 다시 처리하려고 할 때"""
    pass


# --- Auth Exceptions ---
class AuthenticationError(Exception):
    """사용자 자격 증명 실패 시"""
    pass
