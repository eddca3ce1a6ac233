from sqlalchemy import Column, Integer, String, Boolean, DateTime, Enum, ForeignKey, func
from sqlalchemy.orm import relationship
from ..database import Base
from .enums import GlobalRole

class User(Base):
    """
    시스템에 로그인하고 보고서, 문서, 댓글 등의 리소스를 생성하는 사용자를 나타냅니다.
    가입 직후에는 비활성(is_active=False) 상태이며 전역 역할은 NONE입니다.
    관리자가 승인하면서 전역 역할(USER, ADMIN, CEO)을 부여하고 계정을 활성화합니다.
    """
    __tablename__ = "users"
    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    email = Column(String, unique=True, nullable=False, index=True)
    password_hash = Column(String, nullable=False)
    image = Column(String)
    role_global = Column(Enum(GlobalRole), nullable=False, default=GlobalRole.NONE)
    is_active = Column(Boolean, nullable=False, default=False)
    approved_at = Column(DateTime)
    approved_by_id = Column(Integer, ForeignKey("users.id"))
    created_at = Column(DateTime, server_default=func.now())

    memberships = relationship("ProjectMember", back_populates="user", cascade="all, delete-orphan")
    sessions = relationship("UserSession", back_populates="user", cascade="all, delete-orphan")
