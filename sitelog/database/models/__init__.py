from .enums import GlobalRole, ProjectRole, ProjectStatus, DocumentType, TransactionStatus, LogisticType
from .user import User
from .user_session import UserSession
from .project import Project
from .project_member import ProjectMember
from .report import DailyReport, DailyReportTask, ReportMedia, ReportComment
from .document import ProjectDocument
from .emergency import EmergencyFund, EmergencyTransaction
from .logistic import LogisticItem, LogisticTransaction
