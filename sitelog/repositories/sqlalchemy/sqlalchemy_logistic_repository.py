from typing import List, Optional
from sqlalchemy.orm import Session, selectinload
from sitelog.database import models
from sitelog.repositories.interfaces import ILogisticRepository

class SqlalchemyLogisticRepository(ILogisticRepository):
    def __init__(self, db_session: Session):
        self.db = db_session

    def create_item(self, item_model: models.LogisticItem) -> models.LogisticItem:
        self.db.add(item_model)
        self.db.commit()
        self.db.refresh(item_model)
        return item_model

    def find_item_in_project(self, item_id: int, project_id: int) -> Optional[models.LogisticItem]:
        return self.db.query(models.LogisticItem).filter(
            models.LogisticItem.id == item_id,
            models.LogisticItem.project_id == project_id
        ).first()

    def list_items(self, project_id: int) -> List[models.LogisticItem]:
        return self.db.query(models.LogisticItem).options(
            selectinload(models.LogisticItem.transactions)
        ).filter(models.LogisticItem.project_id == project_id).order_by(models.LogisticItem.name.asc()).all()

    def save_item(self, item: models.LogisticItem) -> models.LogisticItem:
        self.db.commit()
        self.db.refresh(item)
        return item

    def delete_item(self, item: models.LogisticItem) -> bool:
        if item:
            self.db.delete(item)
            self.db.commit()
            return True
        return False

    def create_transaction(self, transaction_model: models.LogisticTransaction) -> models.LogisticTransaction:
        self.db.add(transaction_model)
        self.db.commit()
        self.db.refresh(transaction_model)
        return transaction_model

    def list_transactions(self, item_ids: List[int], type: Optional[models.LogisticType] = None) -> List[models.LogisticTransaction]:
        if not item_ids:
            return []
        query = self.db.query(models.LogisticTransaction).filter(models.LogisticTransaction.item_id.in_(item_ids))
        if type is not None:
            query = query.filter(models.LogisticTransaction.type == type)
        return query.order_by(models.LogisticTransaction.created_at.desc(), models.LogisticTransaction.id.desc()).all()
