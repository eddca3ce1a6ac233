import logging
from typing import Dict, Any, List, Optional

from sitelog.database import models
from sitelog.repositories.interfaces import IProjectRepository, IUserRepository, IMembershipRepository
from sitelog.services.authorization import AuthContext
from sitelog.services.exceptions import (
    ProjectNotFoundError, UserNotFoundError, MemberNotFoundError,
    DuplicateSlugError, AlreadyMemberError
)
from sitelog.utils.serializers import iso, enum_value
from sitelog.utils.validators import parse_date, require_text

logger = logging.getLogger(__name__)


def _member_to_dict(member: models.ProjectMember) -> Dict[str, Any]:
    user = member.user
    return {
        "id": member.id,
        "user_id": member.user_id,
        "project_id": member.project_id,
        "role": enum_value(member.role),
        "user": {
            "id": user.id,
            "name": user.name,
            "email": user.email,
            "image": user.image,
            "role_global": enum_value(user.role_global),
        } if user is not None else None,
    }


def _project_to_dict(project: models.Project, with_members: bool = True) -> Dict[str, Any]:
    data = {
        "id": project.id,
        "name": project.name,
        "slug": project.slug,
        "description": project.description,
        "location": project.location,
        "start_date": iso(project.start_date),
        "end_date": iso(project.end_date),
        "status": enum_value(project.status),
        "created_at": iso(project.created_at),
    }
    if with_members:
        data["members"] = [_member_to_dict(m) for m in project.members]
    return data


class ProjectService:
    """프로젝트 CRUD와 프로젝트 멤버십 관리를 제공합니다."""

    def __init__(self, project_repo: IProjectRepository, user_repo: IUserRepository, membership_repo: IMembershipRepository):
        """
        ProjectService를 초기화합니다.

        Args:
            project_repo: 프로젝트 데이터에 접근하기 위한 리포지토리.
            user_repo: 멤버 추가 시 사용자 존재 여부를 확인하기 위한 리포지토리.
            membership_repo: 프로젝트 멤버십에 접근하기 위한 리포지토리.
        """
        self.project_repo = project_repo
        self.user_repo = user_repo
        self.membership_repo = membership_repo

    def _get_project(self, project_id: int) -> models.Project:
        project = self.project_repo.find_by_id(project_id)
        if not project:
            raise ProjectNotFoundError(f"Project with id '{project_id}' not found.")
        return project

    def create_project(self, ctx: AuthContext, name: str, slug: str, description: Optional[str] = None,
                       location: Optional[str] = None, start_date: Optional[str] = None,
                       end_date: Optional[str] = None, status: str = "ACTIVE") -> Dict[str, Any]:
        """
        새로운 프로젝트를 생성합니다.

        Raises:
            DuplicateSlugError: 동일한 슬러그의 프로젝트가 이미 존재할 때.
            ValueError: 이름/슬러그가 비어 있거나 날짜, 상태 값이 올바르지 않을 때.
        """
        require_text(name, "name")
        require_text(slug, "slug")
        if self.project_repo.find_by_slug(slug):
            raise DuplicateSlugError(f"Project with slug '{slug}' already exists.")

        new_project = models.Project(
            name=name,
            slug=slug,
            description=description,
            location=location,
            start_date=parse_date(start_date),
            end_date=parse_date(end_date),
            status=models.ProjectStatus(status),
        )
        created_project = self.project_repo.create(new_project)
        logger.info("Project '%s' (%s) created by %s.", slug, created_project.id, ctx.principal.id)
        return _project_to_dict(created_project)

    def list_projects(self, ctx: AuthContext) -> List[Dict[str, Any]]:
        """
        호출자가 볼 수 있는 프로젝트 목록을 조회합니다.
        ADMIN과 CEO는 모든 프로젝트를, 일반 사용자는 멤버로 소속된 프로젝트만 봅니다.
        """
        if ctx.principal.is_elevated:
            projects = self.project_repo.list_all()
        else:
            projects = self.project_repo.list_by_member(ctx.principal.id)
        return [_project_to_dict(p) for p in projects]

    def get_project(self, ctx: AuthContext) -> Dict[str, Any]:
        project = self._get_project(ctx.project_id)
        data = _project_to_dict(project)
        fund = project.emergency_fund
        data["emergency_fund_balance"] = fund.current_balance if fund is not None else None
        data["counts"] = {
            "daily_reports": len(project.daily_reports),
            "documents": len(project.documents),
            "logistic_items": len(project.logistic_items),
        }
        return data

    def update_project(self, ctx: AuthContext, project_id: int, name: Optional[str] = None,
                       description: Optional[str] = None, location: Optional[str] = None,
                       start_date: Optional[str] = None, end_date: Optional[str] = None,
                       status: Optional[str] = None) -> Dict[str, Any]:
        """전달된 항목만 수정합니다. (None인 항목은 유지)"""
        project = self._get_project(project_id)
        if name is not None:
            project.name = require_text(name, "name")
        if description is not None:
            project.description = description
        if location is not None:
            project.location = location
        if start_date is not None:
            project.start_date = parse_date(start_date)
        if end_date is not None:
            project.end_date = parse_date(end_date)
        if status is not None:
            project.status = models.ProjectStatus(status)
        self.project_repo.save(project)
        return _project_to_dict(project)

    def delete_project(self, ctx: AuthContext, project_id: int) -> bool:
        """
        프로젝트와 그에 속한 보고서, 문서, 자금, 자재, 멤버십을 모두 삭제합니다.

        Raises:
            ProjectNotFoundError: 해당 ID의 프로젝트를 찾을 수 없을 때.
        """
        project = self._get_project(project_id)
        self.project_repo.delete(project)
        logger.info("Project %s deleted by %s.", project_id, ctx.principal.id)
        return True

    def add_member(self, ctx: AuthContext, project_id: int, user_id: int, role: str) -> Dict[str, Any]:
        """
        사용자를 프로젝트 멤버로 추가합니다.

        Raises:
            UserNotFoundError: 해당 ID의 사용자를 찾을 수 없을 때.
            ProjectNotFoundError: 해당 ID의 프로젝트를 찾을 수 없을 때.
            AlreadyMemberError: 사용자가 이미 프로젝트의 멤버일 때.
            ValueError: role이 MANDOR, ARCHITECT, FINANCE 중 하나가 아닐 때.
        """
        project_role = models.ProjectRole(role)
        if not self.user_repo.find_by_id(user_id):
            raise UserNotFoundError(f"User with id '{user_id}' not found.")
        self._get_project(project_id)

        if self.membership_repo.find(user_id, project_id):
            raise AlreadyMemberError(f"User '{user_id}' is already a member of project '{project_id}'.")

        member = self.membership_repo.create(
            models.ProjectMember(user_id=user_id, project_id=project_id, role=project_role)
        )
        logger.info("User %s added to project %s as %s.", user_id, project_id, project_role.value)
        return _member_to_dict(member)

    def _get_member(self, project_id: int, member_id: int) -> models.ProjectMember:
        member = self.membership_repo.find_by_id(member_id)
        if not member or member.project_id != project_id:
            raise MemberNotFoundError(f"Project member with id '{member_id}' not found in project '{project_id}'.")
        return member

    def update_member_role(self, ctx: AuthContext, project_id: int, member_id: int, role: str) -> Dict[str, Any]:
        member = self._get_member(project_id, member_id)
        member.role = models.ProjectRole(role)
        self.membership_repo.save(member)
        return _member_to_dict(member)

    def remove_member(self, ctx: AuthContext, project_id: int, member_id: int) -> bool:
        member = self._get_member(project_id, member_id)
        self.membership_repo.delete(member)
        return True

    def list_members(self, ctx: AuthContext) -> List[Dict[str, Any]]:
        return [_member_to_dict(m) for m in self.membership_repo.list_by_project(ctx.project_id)]
