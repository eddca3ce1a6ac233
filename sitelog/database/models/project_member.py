from sqlalchemy import Column, Integer, DateTime, Enum, ForeignKey, UniqueConstraint, func
from sqlalchemy.orm import relationship
from ..database import Base
from .enums import ProjectRole

class ProjectMember(Base):
    """
    사용자(User)와 프로젝트(Project)를 연결하는 멤버십 모델입니다.
    한 사용자는 한 프로젝트에서 정확히 하나의 역할(ProjectRole)만 가집니다.
    """
    __tablename__ = "project_members"
    __table_args__ = (UniqueConstraint("user_id", "project_id", name="uq_project_members_user_project"),)

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    project_id = Column(Integer, ForeignKey("projects.id"), nullable=False)
    role = Column(Enum(ProjectRole), nullable=False)
    created_at = Column(DateTime, server_default=func.now())

    user = relationship("User", back_populates="memberships")
    project = relationship("Project", back_populates="members")
