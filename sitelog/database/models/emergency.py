from sqlalchemy import Column, Integer, String, Float, DateTime, Enum, ForeignKey, func
from sqlalchemy.orm import relationship
from ..database import Base
from .enums import TransactionStatus

class EmergencyFund(Base):
    """
    프로젝트별 긴급 자금입니다. 프로젝트당 하나만 존재합니다.
    FINANCE가 잔액을 충전하고, MANDOR의 인출 요청을 FINANCE가 승인하면 잔액이 차감됩니다.
    """
    __tablename__ = "emergency_funds"
    id = Column(Integer, primary_key=True, index=True)
    project_id = Column(Integer, ForeignKey("projects.id"), unique=True, nullable=False)
    current_balance = Column(Float, nullable=False, default=0)
    created_at = Column(DateTime, server_default=func.now())

    project = relationship("Project", back_populates="emergency_fund")
    transactions = relationship("EmergencyTransaction", back_populates="fund", cascade="all, delete-orphan")


class EmergencyTransaction(Base):
    __tablename__ = "emergency_transactions"
    id = Column(Integer, primary_key=True, index=True)
    fund_id = Column(Integer, ForeignKey("emergency_funds.id"), nullable=False)
    requested_by_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    verified_by_id = Column(Integer, ForeignKey("users.id"))
    amount = Column(Float, nullable=False)
    description = Column(String, nullable=False)
    proof_public_id = Column(String)
    status = Column(Enum(TransactionStatus), nullable=False, default=TransactionStatus.PENDING)
    verified_at = Column(DateTime)
    created_at = Column(DateTime, server_default=func.now())

    fund = relationship("EmergencyFund", back_populates="transactions")
    requester = relationship("User", foreign_keys=[requested_by_id])
    verifier = relationship("User", foreign_keys=[verified_by_id])
