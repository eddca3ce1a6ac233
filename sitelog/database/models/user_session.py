from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, func
from sqlalchemy.orm import relationship
from ..database import Base

class UserSession(Base):
    """
    로그인 시 발급되는 세션 토큰입니다.
    요청 헤더의 토큰을 이 테이블에서 조회하여 호출자를 식별합니다.
    """
    __tablename__ = "user_sessions"
    id = Column(Integer, primary_key=True, index=True)
    token = Column(String, unique=True, nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    expires_at = Column(DateTime, nullable=False)
    created_at = Column(DateTime, server_default=func.now())

    user = relationship("User", back_populates="sessions")
