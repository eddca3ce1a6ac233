import enum


class GlobalRole(str, enum.Enum):
    """
    시스템 전체에 적용되는 사용자 권한 등급입니다.
    NONE은 관리자 승인을 받지 않아 시스템에 접근할 수 없는 계정을 의미합니다.
    """
    NONE = "NONE"
    USER = "USER"
    ADMIN = "ADMIN"
    CEO = "CEO"


class ProjectRole(str, enum.Enum):
    """프로젝트 멤버십 하나에 부여되는 역할입니다."""
    MANDOR = "MANDOR"
    ARCHITECT = "ARCHITECT"
    FINANCE = "FINANCE"


class ProjectStatus(str, enum.Enum):
    ACTIVE = "ACTIVE"
    DONE = "DONE"
    PAUSED = "PAUSED"


class DocumentType(str, enum.Enum):
    DESIGN = "DESIGN"
    DRAWING = "DRAWING"
    REFERENCE = "REFERENCE"
    SPECIFICATION = "SPECIFICATION"
    OTHER = "OTHER"


class TransactionStatus(str, enum.Enum):
    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"


class LogisticType(str, enum.Enum):
    IN = "IN"
    OUT = "OUT"
