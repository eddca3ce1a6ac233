from typing import List, Optional
from sqlalchemy.orm import Session, joinedload
from sitelog.database import models
from sitelog.repositories.interfaces import ICommentRepository

class SqlalchemyCommentRepository(ICommentRepository):
    def __init__(self, db_session: Session):
        self.db = db_session

    def create(self, comment_model: models.ReportComment) -> models.ReportComment:
        self.db.add(comment_model)
        self.db.commit()
        self.db.refresh(comment_model)
        return comment_model

    def find_by_id(self, comment_id: int) -> Optional[models.ReportComment]:
        return self.db.query(models.ReportComment).options(
            joinedload(models.ReportComment.report)
        ).filter(models.ReportComment.id == comment_id).first()

    def list_by_report(self, report_id: int) -> List[models.ReportComment]:
        return self.db.query(models.ReportComment).options(
            joinedload(models.ReportComment.author)
        ).filter(models.ReportComment.report_id == report_id).order_by(
            models.ReportComment.created_at.desc(), models.ReportComment.id.desc()
        ).all()

    def save(self, comment: models.ReportComment) -> models.ReportComment:
        self.db.commit()
        self.db.refresh(comment)
        return comment

    def delete(self, comment: models.ReportComment) -> bool:
        if comment:
            self.db.delete(comment)
            self.db.commit()
            return True
        return False
