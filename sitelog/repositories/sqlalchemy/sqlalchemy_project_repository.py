from typing import List, Optional
from sqlalchemy.orm import Session
from sitelog.database import models
from sitelog.repositories.interfaces import IProjectRepository

class SqlalchemyProjectRepository(IProjectRepository):
    def __init__(self, db_session: Session):
        self.db = db_session

    def create(self, project_model: models.Project) -> models.Project:
        self.db.add(project_model)
        self.db.commit()
        self.db.refresh(project_model)
        return project_model

    def find_by_id(self, project_id: int) -> Optional[models.Project]:
        return self.db.query(models.Project).filter(models.Project.id == project_id).first()

    def find_by_slug(self, slug: str) -> Optional[models.Project]:
        return self.db.query(models.Project).filter(models.Project.slug == slug).first()

    def list_all(self) -> List[models.Project]:
        return self.db.query(models.Project).order_by(models.Project.created_at.desc(), models.Project.id.desc()).all()

    def list_by_member(self, user_id: int) -> List[models.Project]:
        return self.db.query(models.Project).join(models.ProjectMember).filter(
            models.ProjectMember.user_id == user_id
        ).order_by(models.Project.created_at.desc(), models.Project.id.desc()).all()

    def save(self, project: models.Project) -> models.Project:
        self.db.commit()
        self.db.refresh(project)
        return project

    def delete(self, project: models.Project) -> bool:
        if project:
            self.db.delete(project)
            self.db.commit()
            return True
        return False
