# sitelog/api/procedures.py
"""
작업 이름 -> 보호된 Procedure 레지스트리.

각 작업이 어떤 게이트 체인(protected, admin, project)과 어떤 프로젝트 역할 허용 목록을 쓰는지
한 곳에서 선언합니다. HTTP 라우팅은 app.py에서 이 이름을 참조합니다.
"""
from typing import Dict

from sitelog.database.models import ProjectRole
from sitelog.repositories.interfaces import IMembershipRepository, IProjectRepository
from sitelog.services.authorization import OperationType, Procedure, ProcedureFactory

QUERY = OperationType.QUERY
MUTATION = OperationType.MUTATION

ALL_PROJECT_ROLES = [ProjectRole.MANDOR, ProjectRole.ARCHITECT, ProjectRole.FINANCE]
REPORT_CREATORS = [ProjectRole.MANDOR, ProjectRole.ARCHITECT]
ARCHITECT_ONLY = [ProjectRole.ARCHITECT]
FINANCE_ONLY = [ProjectRole.FINANCE]
MANDOR_ONLY = [ProjectRole.MANDOR]


def build_procedures(membership_repo: IMembershipRepository, project_repo: IProjectRepository,
                     services: Dict[str, object]) -> Dict[str, Procedure]:
    """
    요청 단위로 생성된 서비스들을 게이트 체인으로 감싸 반환합니다.

    Args:
        membership_repo: 프로젝트 게이트가 사용할 멤버십 리포지토리.
        project_repo: 멤버십 없이 접근한 ADMIN/CEO의 프로젝트 존재 여부 확인에 사용할 리포지토리.
        services: 'user', 'project', 'report', 'comment', 'document', 'emergency', 'logistic' 키를 갖는 서비스 딕셔너리.

    Returns:
        작업 이름을 키로 하는 Procedure 딕셔너리.
    """
    factory = ProcedureFactory(membership_repo, project_repo)
    users = services['user']
    projects = services['project']
    reports = services['report']
    comments = services['comment']
    documents = services['document']
    emergency = services['emergency']
    logistic = services['logistic']

    procedures = [
        # 사용자
        factory.admin("user.list_all", users.list_users, QUERY),
        factory.admin("user.list_pending", users.list_pending, QUERY),
        factory.admin("user.approve", users.approve_user, MUTATION),
        factory.admin("user.deactivate", users.deactivate_user, MUTATION),
        factory.admin("user.update_role", users.update_role, MUTATION),
        factory.protected("user.get_current", users.get_current_user, QUERY),
        factory.protected("user.update_profile", users.update_profile, MUTATION, allow_ceo=True),

        # 프로젝트
        factory.admin("project.create", projects.create_project, MUTATION),
        factory.admin("project.update", projects.update_project, MUTATION),
        factory.admin("project.delete", projects.delete_project, MUTATION),
        factory.admin("project.add_member", projects.add_member, MUTATION),
        factory.admin("project.update_member_role", projects.update_member_role, MUTATION),
        factory.admin("project.remove_member", projects.remove_member, MUTATION),
        factory.protected("project.list", projects.list_projects, QUERY),
        factory.project("project.get", projects.get_project, QUERY, ALL_PROJECT_ROLES),
        factory.project("project.list_members", projects.list_members, QUERY, ALL_PROJECT_ROLES),

        # 일일 보고서
        factory.project("report.create", reports.create_report, MUTATION, REPORT_CREATORS),
        factory.project("report.get", reports.get_report, QUERY, ALL_PROJECT_ROLES),
        factory.project("report.get_by_slug", reports.get_report_by_slug, QUERY, ALL_PROJECT_ROLES),
        factory.project("report.list", reports.list_reports, QUERY, ALL_PROJECT_ROLES),
        factory.project("report.update", reports.update_report, MUTATION, REPORT_CREATORS),
        factory.project("report.delete", reports.delete_report, MUTATION, REPORT_CREATORS),
        factory.project("report.add_task", reports.add_task, MUTATION, REPORT_CREATORS),
        factory.project("report.update_task", reports.update_task, MUTATION, REPORT_CREATORS),
        factory.project("report.delete_task", reports.delete_task, MUTATION, REPORT_CREATORS),
        factory.project("report.upload_media", reports.add_media, MUTATION, REPORT_CREATORS),
        factory.project("report.delete_media", reports.delete_media, MUTATION, REPORT_CREATORS),

        # 댓글 (CEO 쓰기 허용)
        factory.project("comment.create", comments.create_comment, MUTATION, ALL_PROJECT_ROLES, allow_ceo=True),
        factory.project("comment.list", comments.list_comments, QUERY, ALL_PROJECT_ROLES),
        factory.project("comment.update", comments.update_comment, MUTATION, ALL_PROJECT_ROLES, allow_ceo=True),
        factory.project("comment.delete", comments.delete_comment, MUTATION, ALL_PROJECT_ROLES, allow_ceo=True),

        # 문서
        factory.project("document.upload", documents.upload_document, MUTATION, ARCHITECT_ONLY),
        factory.project("document.list", documents.list_documents, QUERY, ALL_PROJECT_ROLES),
        factory.project("document.get", documents.get_document, QUERY, ALL_PROJECT_ROLES),
        factory.project("document.update", documents.update_document, MUTATION, ARCHITECT_ONLY),
        factory.project("document.delete", documents.delete_document, MUTATION, ARCHITECT_ONLY),

        # 긴급 자금
        factory.project("emergency.get_fund", emergency.get_fund, QUERY, ALL_PROJECT_ROLES),
        factory.project("emergency.list_transactions", emergency.list_transactions, QUERY, ALL_PROJECT_ROLES),
        factory.project("emergency.add_balance", emergency.add_balance, MUTATION, FINANCE_ONLY),
        factory.project("emergency.request", emergency.request_funds, MUTATION, MANDOR_ONLY),
        factory.project("emergency.verify", emergency.verify_transaction, MUTATION, FINANCE_ONLY),

        # 자재
        factory.project("logistic.create_item", logistic.create_item, MUTATION, FINANCE_ONLY),
        factory.project("logistic.update_item", logistic.update_item, MUTATION, FINANCE_ONLY),
        factory.project("logistic.delete_item", logistic.delete_item, MUTATION, FINANCE_ONLY),
        factory.project("logistic.record_transaction", logistic.record_transaction, MUTATION, MANDOR_ONLY),
        factory.project("logistic.list_items", logistic.list_items, QUERY, ALL_PROJECT_ROLES),
        factory.project("logistic.list_transactions", logistic.list_transactions, QUERY, ALL_PROJECT_ROLES),
        factory.project("logistic.stock_summary", logistic.get_stock_summary, QUERY, ALL_PROJECT_ROLES),
    ]
    return {procedure.name: procedure for procedure in procedures}
