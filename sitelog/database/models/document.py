from sqlalchemy import Column, Integer, String, DateTime, Enum, ForeignKey, func
from sqlalchemy.orm import relationship
from ..database import Base
from .enums import DocumentType

class ProjectDocument(Base):
    """
    건축가(ARCHITECT)가 업로드하는 설계도, 도면, 시방서 등의 프로젝트 문서입니다.
    실제 파일은 외부 저장소에 있고, 여기에는 메타데이터와 URL만 저장합니다.
    """
    __tablename__ = "project_documents"
    id = Column(Integer, primary_key=True, index=True)
    project_id = Column(Integer, ForeignKey("projects.id"), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    file_name = Column(String, nullable=False)
    file_type = Column(Enum(DocumentType), nullable=False)
    public_id = Column(String, nullable=False)
    url = Column(String, nullable=False)
    file_size = Column(Integer)
    mime_type = Column(String)
    title = Column(String)
    description = Column(String)
    version = Column(String)
    created_at = Column(DateTime, server_default=func.now())

    project = relationship("Project", back_populates="documents")
    uploader = relationship("User")
