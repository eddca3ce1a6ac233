import logging
from datetime import datetime
from typing import Dict, Any, List, Optional

from sitelog.database import models
from sitelog.repositories.interfaces import IEmergencyRepository
from sitelog.services.authorization import AuthContext
from sitelog.services.exceptions import (
    FundNotFoundError, NotFoundError, InsufficientBalanceError, TransactionAlreadyVerifiedError
)
from sitelog.utils.serializers import iso, enum_value, user_summary
from sitelog.utils.validators import require_text, require_positive

logger = logging.getLogger(__name__)

VERIFY_STATUSES = (models.TransactionStatus.APPROVED, models.TransactionStatus.REJECTED)


def _transaction_to_dict(transaction: models.EmergencyTransaction) -> Dict[str, Any]:
    return {
        "id": transaction.id,
        "fund_id": transaction.fund_id,
        "amount": transaction.amount,
        "description": transaction.description,
        "proof_public_id": transaction.proof_public_id,
        "status": enum_value(transaction.status),
        "requester": user_summary(transaction.requester),
        "verifier": user_summary(transaction.verifier),
        "verified_at": iso(transaction.verified_at),
        "created_at": iso(transaction.created_at),
    }


def _fund_to_dict(fund: models.EmergencyFund, transactions: List[models.EmergencyTransaction]) -> Dict[str, Any]:
    return {
        "id": fund.id,
        "project_id": fund.project_id,
        "current_balance": fund.current_balance,
        "transactions": [_transaction_to_dict(t) for t in transactions],
    }


class EmergencyService:
    """
    프로젝트 긴급 자금을 관리합니다.

    - FINANCE: 잔액 충전(add_balance), 인출 요청 승인/반려(verify_transaction)
    - MANDOR: 인출 요청(request_funds)
    - 모든 멤버: 자금과 거래 내역 조회
    """

    def __init__(self, emergency_repo: IEmergencyRepository):
        self.emergency_repo = emergency_repo

    def _get_or_create_fund(self, project_id: int) -> models.EmergencyFund:
        fund = self.emergency_repo.find_fund_by_project(project_id)
        if fund is None:
            fund = self.emergency_repo.create_fund(models.EmergencyFund(project_id=project_id, current_balance=0))
            logger.info("Emergency fund created for project %s.", project_id)
        return fund

    def get_fund(self, ctx: AuthContext) -> Dict[str, Any]:
        """프로젝트의 긴급 자금과 전체 거래 내역을 조회합니다. 자금이 없으면 잔액 0으로 생성합니다."""
        fund = self._get_or_create_fund(ctx.project_id)
        return _fund_to_dict(fund, self.emergency_repo.list_transactions(fund.id))

    def add_balance(self, ctx: AuthContext, amount: float, description: str) -> Dict[str, Any]:
        """
        긴급 자금 잔액을 충전합니다. 충전 거래는 요청자와 승인자가 모두 호출자인 APPROVED 상태로 기록됩니다.

        Raises:
            ValueError: amount가 양수가 아닐 때.
        """
        require_positive(amount, "amount")
        fund = self._get_or_create_fund(ctx.project_id)

        transaction = self.emergency_repo.create_transaction(models.EmergencyTransaction(
            fund_id=fund.id,
            requested_by_id=ctx.principal.id,
            verified_by_id=ctx.principal.id,
            amount=amount,
            description=description,
            status=models.TransactionStatus.APPROVED,
            verified_at=datetime.now(),
        ))
        self.emergency_repo.adjust_balance(fund, amount)
        logger.info("Added %s to emergency fund of project %s.", amount, ctx.project_id)
        return _transaction_to_dict(transaction)

    def request_funds(self, ctx: AuthContext, amount: float, description: str,
                      proof_public_id: Optional[str] = None) -> Dict[str, Any]:
        """
        긴급 자금 인출을 요청합니다. 요청은 PENDING 상태로 생성되며 잔액은 승인 시점에 차감됩니다.

        Raises:
            FundNotFoundError: 프로젝트에 긴급 자금이 아직 없을 때.
            InsufficientBalanceError: 현재 잔액이 요청 금액보다 적을 때.
        """
        require_positive(amount, "amount")
        require_text(description, "description")
        fund = self.emergency_repo.find_fund_by_project(ctx.project_id)
        if fund is None:
            raise FundNotFoundError("Emergency fund not found for this project")
        if fund.current_balance < amount:
            raise InsufficientBalanceError("Insufficient emergency fund balance")

        transaction = self.emergency_repo.create_transaction(models.EmergencyTransaction(
            fund_id=fund.id,
            requested_by_id=ctx.principal.id,
            amount=amount,
            description=description,
            proof_public_id=proof_public_id,
            status=models.TransactionStatus.PENDING,
        ))
        return _transaction_to_dict(transaction)

    def verify_transaction(self, ctx: AuthContext, transaction_id: int, status: str) -> Dict[str, Any]:
        """
        대기 중인 인출 요청을 승인 또는 반려합니다. 승인 시 잔액에서 요청 금액을 차감합니다.

        Raises:
            NotFoundError: 거래가 없거나 다른 프로젝트의 거래일 때.
            TransactionAlreadyVerifiedError: 이미 처리된 거래일 때.
            InsufficientBalanceError: 승인 시점의 잔액이 요청 금액보다 적을 때.
            ValueError: status가 APPROVED 또는 REJECTED가 아닐 때.
        """
        new_status = models.TransactionStatus(status)
        if new_status not in VERIFY_STATUSES:
            raise ValueError("status must be APPROVED or REJECTED.")

        transaction = self.emergency_repo.find_transaction_by_id(transaction_id)
        if transaction is None or transaction.fund is None or transaction.fund.project_id != ctx.project_id:
            raise NotFoundError("Transaction not found")
        if transaction.status != models.TransactionStatus.PENDING:
            raise TransactionAlreadyVerifiedError("Transaction already verified")

        fund = transaction.fund
        if new_status == models.TransactionStatus.APPROVED and fund.current_balance < transaction.amount:
            raise InsufficientBalanceError("Insufficient emergency fund balance")

        transaction.status = new_status
        transaction.verified_by_id = ctx.principal.id
        transaction.verified_at = datetime.now()
        self.emergency_repo.save_transaction(transaction)
        if new_status == models.TransactionStatus.APPROVED:
            self.emergency_repo.adjust_balance(fund, -transaction.amount)
        logger.info("Emergency transaction %s %s by %s.", transaction_id, new_status.value, ctx.principal.id)
        return _transaction_to_dict(transaction)

    def list_transactions(self, ctx: AuthContext, status: Optional[str] = None) -> List[Dict[str, Any]]:
        fund = self.emergency_repo.find_fund_by_project(ctx.project_id)
        if fund is None:
            return []
        status_filter = models.TransactionStatus(status) if status else None
        return [_transaction_to_dict(t) for t in self.emergency_repo.list_transactions(fund.id, status_filter)]
