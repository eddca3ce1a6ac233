from .sqlalchemy_user_repository import SqlalchemyUserRepository
from .sqlalchemy_session_repository import SqlalchemySessionRepository
from .sqlalchemy_project_repository import SqlalchemyProjectRepository
from .sqlalchemy_membership_repository import SqlalchemyMembershipRepository
from .sqlalchemy_report_repository import SqlalchemyReportRepository
from .sqlalchemy_comment_repository import SqlalchemyCommentRepository
from .sqlalchemy_document_repository import SqlalchemyDocumentRepository
from .sqlalchemy_emergency_repository import SqlalchemyEmergencyRepository
from .sqlalchemy_logistic_repository import SqlalchemyLogisticRepository
