# tests/services/test_comment_service.py
import pytest
from datetime import date
from unittest.mock import MagicMock

from sitelog.services.comment_service import CommentService
from sitelog.services.authorization import AuthContext, OperationType, Principal
from sitelog.services.exceptions import *
from sitelog.repositories.interfaces import ICommentRepository, IReportRepository
from sitelog.database import models

PROJECT_ID = 7

@pytest.fixture
def mock_comment_repo() -> MagicMock:
    repo = MagicMock(spec=ICommentRepository)
    repo.create.side_effect = lambda comment: comment
    return repo

@pytest.fixture
def mock_report_repo() -> MagicMock:
    return MagicMock(spec=IReportRepository)

@pytest.fixture
def comment_service(mock_comment_repo: MagicMock, mock_report_repo: MagicMock) -> CommentService:
    return CommentService(mock_comment_repo, mock_report_repo)

def make_ctx(user_id: int = 1, role=models.GlobalRole.USER) -> AuthContext:
    return AuthContext(
        principal=Principal(id=user_id, is_active=True, global_role=role),
        operation_type=OperationType.MUTATION,
        allow_ceo=True,
        project_id=PROJECT_ID,
    )

def make_report(project_id: int = PROJECT_ID) -> models.DailyReport:
    return models.DailyReport(id=5, slug="report-5", project_id=project_id, user_id=1,
                              report_date=date(2024, 3, 1), task_description="Pengecoran")

def make_comment(owner_id: int = 1, project_id: int = PROJECT_ID) -> models.ReportComment:
    comment = models.ReportComment(id=9, report_id=5, user_id=owner_id, content="Mohon cek ulang")
    comment.report = make_report(project_id)
    return comment


class TestCommentService:
    def test_ceo_can_comment_on_report(self, comment_service: CommentService, mock_report_repo: MagicMock, mock_comment_repo: MagicMock):
        """CEO의 댓글 작성은 허용되며 작성자는 호출자로 기록됩니다."""
        # === Arrange ===
        mock_report_repo.find_in_project.return_value = make_report()

        # === Act ===
        comment = comment_service.create_comment(make_ctx(user_id=4, role=models.GlobalRole.CEO), report_id=5, content="Bagus")

        # === Assert ===
        assert comment["user_id"] == 4
        assert comment["report_id"] == 5
        mock_report_repo.find_in_project.assert_called_once_with(5, PROJECT_ID)

    def test_comment_on_report_outside_project(self, comment_service: CommentService, mock_report_repo: MagicMock, mock_comment_repo: MagicMock):
        mock_report_repo.find_in_project.return_value = None

        with pytest.raises(ReportNotFoundError, match="Report not found in this project"):
            comment_service.create_comment(make_ctx(), report_id=5, content="Bagus")
        mock_comment_repo.create.assert_not_called()

    def test_empty_content_is_rejected(self, comment_service: CommentService, mock_report_repo: MagicMock):
        mock_report_repo.find_in_project.return_value = make_report()

        with pytest.raises(ValueError):
            comment_service.create_comment(make_ctx(), report_id=5, content="")

    def test_author_can_update_comment(self, comment_service: CommentService, mock_comment_repo: MagicMock):
        comment = make_comment(owner_id=1)
        mock_comment_repo.find_by_id.return_value = comment

        result = comment_service.update_comment(make_ctx(user_id=1), comment_id=9, content="Sudah dicek")

        assert result["content"] == "Sudah dicek"
        mock_comment_repo.save.assert_called_once_with(comment)

    def test_other_user_cannot_delete_comment(self, comment_service: CommentService, mock_comment_repo: MagicMock):
        mock_comment_repo.find_by_id.return_value = make_comment(owner_id=1)

        with pytest.raises(NotOwnerError):
            comment_service.delete_comment(make_ctx(user_id=2), comment_id=9)
        mock_comment_repo.delete.assert_not_called()

    def test_comment_from_other_project_is_not_found(self, comment_service: CommentService, mock_comment_repo: MagicMock):
        """다른 프로젝트의 댓글은 작성자 본인이라도 NOT_FOUND로 처리됩니다."""
        mock_comment_repo.find_by_id.return_value = make_comment(owner_id=1, project_id=8)

        with pytest.raises(NotFoundError):
            comment_service.delete_comment(make_ctx(user_id=1), comment_id=9)

    def test_list_comments(self, comment_service: CommentService, mock_report_repo: MagicMock, mock_comment_repo: MagicMock):
        mock_report_repo.find_in_project.return_value = make_report()
        mock_comment_repo.list_by_report.return_value = [make_comment()]

        comments = comment_service.list_comments(make_ctx(), report_id=5)

        assert [c["id"] for c in comments] == [9]
        mock_comment_repo.list_by_report.assert_called_once_with(5)
