from typing import List, Optional
from sqlalchemy.orm import Session
from sitelog.database import models
from sitelog.repositories.interfaces import IDocumentRepository

class SqlalchemyDocumentRepository(IDocumentRepository):
    def __init__(self, db_session: Session):
        self.db = db_session

    def create(self, document_model: models.ProjectDocument) -> models.ProjectDocument:
        self.db.add(document_model)
        self.db.commit()
        self.db.refresh(document_model)
        return document_model

    def find_in_project(self, document_id: int, project_id: int) -> Optional[models.ProjectDocument]:
        return self.db.query(models.ProjectDocument).filter(
            models.ProjectDocument.id == document_id,
            models.ProjectDocument.project_id == project_id
        ).first()

    def list_by_project(self, project_id: int, file_type: Optional[models.DocumentType] = None) -> List[models.ProjectDocument]:
        query = self.db.query(models.ProjectDocument).filter(models.ProjectDocument.project_id == project_id)
        if file_type is not None:
            query = query.filter(models.ProjectDocument.file_type == file_type)
        return query.order_by(models.ProjectDocument.created_at.desc(), models.ProjectDocument.id.desc()).all()

    def save(self, document: models.ProjectDocument) -> models.ProjectDocument:
        self.db.commit()
        self.db.refresh(document)
        return document

    def delete(self, document: models.ProjectDocument) -> bool:
        if document:
            self.db.delete(document)
            self.db.commit()
            return True
        return False
