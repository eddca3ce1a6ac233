from typing import Dict, Any, List

from sitelog.database import models
from sitelog.repositories.interfaces import ICommentRepository, IReportRepository
from sitelog.services.authorization import AuthContext, require_ownership
from sitelog.services.exceptions import ReportNotFoundError, NotFoundError
from sitelog.utils.serializers import iso, user_summary
from sitelog.utils.validators import require_text


def _comment_to_dict(comment: models.ReportComment) -> Dict[str, Any]:
    return {
        "id": comment.id,
        "report_id": comment.report_id,
        "user_id": comment.user_id,
        "author": user_summary(comment.author),
        "content": comment.content,
        "created_at": iso(comment.created_at),
    }


class CommentService:
    """
    보고서 댓글을 관리합니다.
    댓글 작성/수정/삭제는 CEO에게도 허용된 쓰기 작업입니다. (allow_ceo)
    """

    def __init__(self, comment_repo: ICommentRepository, report_repo: IReportRepository):
        self.comment_repo = comment_repo
        self.report_repo = report_repo

    def _require_report(self, ctx: AuthContext, report_id: int) -> models.DailyReport:
        report = self.report_repo.find_in_project(report_id, ctx.project_id)
        if not report:
            raise ReportNotFoundError("Report not found in this project")
        return report

    def _get_owned_comment(self, ctx: AuthContext, comment_id: int) -> models.ReportComment:
        comment = self.comment_repo.find_by_id(comment_id)
        if comment is None or comment.report is None or comment.report.project_id != ctx.project_id:
            raise NotFoundError("Comment not found")
        require_ownership(comment, ctx.principal)
        return comment

    def create_comment(self, ctx: AuthContext, report_id: int, content: str) -> Dict[str, Any]:
        """
        보고서에 댓글을 작성합니다.

        Raises:
            ReportNotFoundError: 보고서가 현재 프로젝트에 없을 때.
            ValueError: content가 비어 있을 때.
        """
        require_text(content, "content")
        report = self._require_report(ctx, report_id)
        comment = self.comment_repo.create(
            models.ReportComment(report_id=report.id, user_id=ctx.principal.id, content=content)
        )
        return _comment_to_dict(comment)

    def list_comments(self, ctx: AuthContext, report_id: int) -> List[Dict[str, Any]]:
        report = self._require_report(ctx, report_id)
        return [_comment_to_dict(c) for c in self.comment_repo.list_by_report(report.id)]

    def update_comment(self, ctx: AuthContext, comment_id: int, content: str) -> Dict[str, Any]:
        comment = self._get_owned_comment(ctx, comment_id)
        comment.content = require_text(content, "content")
        self.comment_repo.save(comment)
        return _comment_to_dict(comment)

    def delete_comment(self, ctx: AuthContext, comment_id: int) -> bool:
        comment = self._get_owned_comment(ctx, comment_id)
        return self.comment_repo.delete(comment)
