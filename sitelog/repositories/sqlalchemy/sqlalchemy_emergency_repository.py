from typing import List, Optional
from sqlalchemy.orm import Session, joinedload
from sitelog.database import models
from sitelog.repositories.interfaces import IEmergencyRepository

class SqlalchemyEmergencyRepository(IEmergencyRepository):
    def __init__(self, db_session: Session):
        self.db = db_session

    def find_fund_by_project(self, project_id: int) -> Optional[models.EmergencyFund]:
        return self.db.query(models.EmergencyFund).filter(models.EmergencyFund.project_id == project_id).first()

    def create_fund(self, fund_model: models.EmergencyFund) -> models.EmergencyFund:
        self.db.add(fund_model)
        self.db.commit()
        self.db.refresh(fund_model)
        return fund_model

    def adjust_balance(self, fund: models.EmergencyFund, delta: float) -> models.EmergencyFund:
        # 읽은 값에 더하지 않고 UPDATE 문에서 증감하여 동시 요청 간의 덮어쓰기를 막습니다.
        self.db.query(models.EmergencyFund).filter(models.EmergencyFund.id == fund.id).update(
            {models.EmergencyFund.current_balance: models.EmergencyFund.current_balance + delta},
            synchronize_session=False
        )
        self.db.commit()
        self.db.refresh(fund)
        return fund

    def create_transaction(self, transaction_model: models.EmergencyTransaction) -> models.EmergencyTransaction:
        self.db.add(transaction_model)
        self.db.commit()
        self.db.refresh(transaction_model)
        return transaction_model

    def find_transaction_by_id(self, transaction_id: int) -> Optional[models.EmergencyTransaction]:
        return self.db.query(models.EmergencyTransaction).options(
            joinedload(models.EmergencyTransaction.fund)
        ).filter(models.EmergencyTransaction.id == transaction_id).first()

    def save_transaction(self, transaction: models.EmergencyTransaction) -> models.EmergencyTransaction:
        self.db.commit()
        self.db.refresh(transaction)
        return transaction

    def list_transactions(self, fund_id: int, status: Optional[models.TransactionStatus] = None) -> List[models.EmergencyTransaction]:
        query = self.db.query(models.EmergencyTransaction).filter(models.EmergencyTransaction.fund_id == fund_id)
        if status is not None:
            query = query.filter(models.EmergencyTransaction.status == status)
        return query.order_by(models.EmergencyTransaction.created_at.desc(), models.EmergencyTransaction.id.desc()).all()
