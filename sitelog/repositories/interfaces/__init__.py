from .user import IUserRepository
from .session import ISessionRepository
from .project import IProjectRepository
from .membership import IMembershipRepository
from .report import IReportRepository
from .comment import ICommentRepository
from .document import IDocumentRepository
from .emergency import IEmergencyRepository
from .logistic import ILogisticRepository
