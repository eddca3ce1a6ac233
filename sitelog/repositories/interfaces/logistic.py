from abc import ABC, abstractmethod
from typing import List, Optional
from sitelog.database import models

class ILogisticRepository(ABC):
    @abstractmethod
    def create_item(self, item_model: models.LogisticItem) -> models.LogisticItem:
        """새로운 자재 품목을 생성합니다."""
        pass

    @abstractmethod
    def find_item_in_project(self, item_id: int, project_id: int) -> Optional[models.LogisticItem]:
        """프로젝트 안에서 ID로 자재 품목을 조회합니다."""
        pass

    @abstractmethod
    def list_items(self, project_id: int) -> List[models.LogisticItem]:
        """프로젝트의 자재 품목을 이름 순으로 조회합니다. 입출고 내역도 함께 읽어옵니다."""
        pass

    @abstractmethod
    def save_item(self, item: models.LogisticItem) -> models.LogisticItem:
        pass

    @abstractmethod
    def delete_item(self, item: models.LogisticItem) -> bool:
        pass

    @abstractmethod
    def create_transaction(self, transaction_model: models.LogisticTransaction) -> models.LogisticTransaction:
        """자재 입고(IN) 또는 출고(OUT) 내역을 기록합니다."""
        pass

    @abstractmethod
    def list_transactions(self, item_ids: List[int], type: Optional[models.LogisticType] = None) -> List[models.LogisticTransaction]:
        """주어진 품목들의 입출고 내역을 최신 순으로 조회합니다."""
        pass
