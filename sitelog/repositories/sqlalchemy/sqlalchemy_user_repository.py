from typing import List, Optional
from sqlalchemy import or_
from sqlalchemy.orm import Session
from sitelog.database import models
from sitelog.repositories.interfaces import IUserRepository

class SqlalchemyUserRepository(IUserRepository):
    def __init__(self, db_session: Session):
        self.db = db_session

    def create(self, user_model: models.User) -> models.User:
        self.db.add(user_model)
        self.db.commit()
        self.db.refresh(user_model)
        return user_model

    def find_by_id(self, user_id: int) -> Optional[models.User]:
        return self.db.query(models.User).filter(models.User.id == user_id).first()

    def find_by_email(self, email: str) -> Optional[models.User]:
        return self.db.query(models.User).filter(models.User.email == email).first()

    def list_all(self) -> List[models.User]:
        return self.db.query(models.User).order_by(models.User.created_at.desc(), models.User.id.desc()).all()

    def list_pending(self) -> List[models.User]:
        return self.db.query(models.User).filter(
            or_(models.User.is_active.is_(False), models.User.role_global == models.GlobalRole.NONE)
        ).order_by(models.User.created_at.desc(), models.User.id.desc()).all()

    def save(self, user: models.User) -> models.User:
        self.db.commit()
        self.db.refresh(user)
        return user

    def delete(self, user: models.User) -> bool:
        if user:
            self.db.delete(user)
            self.db.commit()
            return True
        return False
