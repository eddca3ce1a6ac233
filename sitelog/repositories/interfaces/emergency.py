from abc import ABC, abstractmethod
from typing import List, Optional
from sitelog.database import models

class IEmergencyRepository(ABC):
    @abstractmethod
    def find_fund_by_project(self, project_id: int) -> Optional[models.EmergencyFund]:
        """프로젝트의 긴급 자금을 조회합니다."""
        pass

    @abstractmethod
    def create_fund(self, fund_model: models.EmergencyFund) -> models.EmergencyFund:
        """프로젝트의 긴급 자금을 생성합니다."""
        pass

    @abstractmethod
    def adjust_balance(self, fund: models.EmergencyFund, delta: float) -> models.EmergencyFund:
        """긴급 자금 잔액을 delta만큼 증감합니다. (음수면 차감)"""
        pass

    @abstractmethod
    def create_transaction(self, transaction_model: models.EmergencyTransaction) -> models.EmergencyTransaction:
        pass

    @abstractmethod
    def find_transaction_by_id(self, transaction_id: int) -> Optional[models.EmergencyTransaction]:
        """ID로 거래를 조회합니다. 프로젝트 확인을 위해 자금 정보도 함께 읽어옵니다."""
        pass

    @abstractmethod
    def save_transaction(self, transaction: models.EmergencyTransaction) -> models.EmergencyTransaction:
        pass

    @abstractmethod
    def list_transactions(self, fund_id: int, status: Optional[models.TransactionStatus] = None) -> List[models.EmergencyTransaction]:
        """자금의 거래 내역을 최신 순으로 조회합니다. status가 주어지면 해당 상태만 조회합니다."""
        pass
