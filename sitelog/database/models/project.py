from sqlalchemy import Column, Integer, String, Date, DateTime, Enum, func
from sqlalchemy.orm import relationship
from ..database import Base
from .enums import ProjectStatus

class Project(Base):
    """
    하나의 건설 현장(프로젝트)을 나타냅니다.
    일일 보고서, 문서, 긴급 자금, 자재 재고, 멤버십은 모두 이 Project 모델에 종속됩니다.
    """
    __tablename__ = "projects"
    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    slug = Column(String, unique=True, nullable=False, index=True)
    description = Column(String)
    location = Column(String)
    start_date = Column(Date)
    end_date = Column(Date)
    status = Column(Enum(ProjectStatus), nullable=False, default=ProjectStatus.ACTIVE)
    created_at = Column(DateTime, server_default=func.now())

    members = relationship("ProjectMember", back_populates="project", cascade="all, delete-orphan")
    daily_reports = relationship("DailyReport", back_populates="project", cascade="all, delete-orphan")
    documents = relationship("ProjectDocument", back_populates="project", cascade="all, delete-orphan")
    logistic_items = relationship("LogisticItem", back_populates="project", cascade="all, delete-orphan")
    emergency_fund = relationship("EmergencyFund", back_populates="project", uselist=False, cascade="all, delete-orphan")
