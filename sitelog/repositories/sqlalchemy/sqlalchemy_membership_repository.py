from typing import List, Optional
from sqlalchemy.orm import Session, joinedload
from sitelog.database import models
from sitelog.repositories.interfaces import IMembershipRepository

class SqlalchemyMembershipRepository(IMembershipRepository):
    def __init__(self, db_session: Session):
        self.db = db_session

    def find(self, user_id: int, project_id: int) -> Optional[models.ProjectMember]:
        return self.db.query(models.ProjectMember).filter(
            models.ProjectMember.user_id == user_id,
            models.ProjectMember.project_id == project_id
        ).first()

    def find_by_id(self, member_id: int) -> Optional[models.ProjectMember]:
        return self.db.query(models.ProjectMember).filter(models.ProjectMember.id == member_id).first()

    def list_by_project(self, project_id: int) -> List[models.ProjectMember]:
        return self.db.query(models.ProjectMember).options(
            joinedload(models.ProjectMember.user)
        ).filter(models.ProjectMember.project_id == project_id).order_by(models.ProjectMember.id.asc()).all()

    def create(self, member_model: models.ProjectMember) -> models.ProjectMember:
        self.db.add(member_model)
        self.db.commit()
        self.db.refresh(member_model)
        return member_model

    def save(self, member: models.ProjectMember) -> models.ProjectMember:
        self.db.commit()
        self.db.refresh(member)
        return member

    def delete(self, member: models.ProjectMember) -> bool:
        if member:
            self.db.delete(member)
            self.db.commit()
            return True
        return False
