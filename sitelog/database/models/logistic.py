from sqlalchemy import Column, Integer, String, Float, DateTime, Enum, ForeignKey, func
from sqlalchemy.orm import relationship
from ..database import Base
from .enums import LogisticType

class LogisticItem(Base):
    """
    현장에서 관리하는 자재 품목입니다. (예: 시멘트 '포대', 철근 'kg')
    재고 수량은 저장하지 않고 입출고 내역(LogisticTransaction)의 합으로 계산합니다.
    """
    __tablename__ = "logistic_items"
    id = Column(Integer, primary_key=True, index=True)
    project_id = Column(Integer, ForeignKey("projects.id"), nullable=False, index=True)
    name = Column(String, nullable=False)
    unit = Column(String, nullable=False)
    slug = Column(String, unique=True, nullable=False)
    created_at = Column(DateTime, server_default=func.now())

    project = relationship("Project", back_populates="logistic_items")
    transactions = relationship("LogisticTransaction", back_populates="item", cascade="all, delete-orphan")


class LogisticTransaction(Base):
    __tablename__ = "logistic_transactions"
    id = Column(Integer, primary_key=True, index=True)
    item_id = Column(Integer, ForeignKey("logistic_items.id"), nullable=False)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    type = Column(Enum(LogisticType), nullable=False)
    quantity = Column(Float, nullable=False)
    notes = Column(String)
    created_at = Column(DateTime, server_default=func.now())

    item = relationship("LogisticItem", back_populates="transactions")
    user = relationship("User")
