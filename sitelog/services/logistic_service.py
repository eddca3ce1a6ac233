import logging
import time
from typing import Dict, Any, List, Optional

from sitelog.database import models
from sitelog.repositories.interfaces import ILogisticRepository
from sitelog.services.authorization import AuthContext
from sitelog.services.exceptions import NotFoundError
from sitelog.utils.serializers import iso, enum_value, user_summary
from sitelog.utils.validators import require_text, require_positive, slugify

logger = logging.getLogger(__name__)


def _item_to_dict(item: models.LogisticItem) -> Dict[str, Any]:
    return {"id": item.id, "project_id": item.project_id, "name": item.name, "unit": item.unit, "slug": item.slug}


def _transaction_to_dict(transaction: models.LogisticTransaction) -> Dict[str, Any]:
    return {
        "id": transaction.id,
        "item_id": transaction.item_id,
        "user": user_summary(transaction.user),
        "type": enum_value(transaction.type),
        "quantity": transaction.quantity,
        "notes": transaction.notes,
        "created_at": iso(transaction.created_at),
    }


class LogisticService:
    """
    현장 자재 품목과 입출고 내역을 관리합니다.
    품목 관리는 FINANCE, 입출고 기록은 MANDOR가 담당하며, 재고는 입출고 내역으로부터 계산합니다.
    """

    def __init__(self, logistic_repo: ILogisticRepository):
        self.logistic_repo = logistic_repo

    def _get_item(self, ctx: AuthContext, item_id: int) -> models.LogisticItem:
        item = self.logistic_repo.find_item_in_project(item_id, ctx.project_id)
        if not item:
            raise NotFoundError("Logistic item not found in this project")
        return item

    def create_item(self, ctx: AuthContext, name: str, unit: str) -> Dict[str, Any]:
        """
        새 자재 품목을 등록합니다. 슬러그는 이름과 생성 시각(ms)으로 만듭니다.

        Args:
            name: 품목 이름. (예: 'Semen Portland')
            unit: 단위. (예: 'Sak', 'Pcs', 'Kg')
        """
        require_text(name, "name")
        require_text(unit, "unit")
        item = self.logistic_repo.create_item(models.LogisticItem(
            project_id=ctx.project_id,
            name=name,
            unit=unit,
            slug=f"{slugify(name)}-{int(time.time() * 1000)}",
        ))
        return _item_to_dict(item)

    def list_items(self, ctx: AuthContext) -> List[Dict[str, Any]]:
        return [_item_to_dict(i) for i in self.logistic_repo.list_items(ctx.project_id)]

    def update_item(self, ctx: AuthContext, item_id: int, name: Optional[str] = None,
                    unit: Optional[str] = None) -> Dict[str, Any]:
        item = self._get_item(ctx, item_id)
        if name is not None:
            item.name = require_text(name, "name")
        if unit is not None:
            item.unit = require_text(unit, "unit")
        self.logistic_repo.save_item(item)
        return _item_to_dict(item)

    def delete_item(self, ctx: AuthContext, item_id: int) -> bool:
        """품목과 그 입출고 내역을 모두 삭제합니다."""
        item = self._get_item(ctx, item_id)
        return self.logistic_repo.delete_item(item)

    def record_transaction(self, ctx: AuthContext, item_id: int, transaction_type: str, quantity: float,
                           notes: Optional[str] = None) -> Dict[str, Any]:
        """
        자재 입고(IN) 또는 출고(OUT)를 기록합니다.

        Raises:
            NotFoundError: 품목이 현재 프로젝트에 없을 때.
            ValueError: transaction_type이 IN/OUT이 아니거나 quantity가 양수가 아닐 때.
        """
        logistic_type = models.LogisticType(transaction_type)
        require_positive(quantity, "quantity")
        item = self._get_item(ctx, item_id)

        transaction = self.logistic_repo.create_transaction(models.LogisticTransaction(
            item_id=item.id,
            user_id=ctx.principal.id,
            type=logistic_type,
            quantity=quantity,
            notes=notes,
        ))
        logger.info("Recorded %s %s of item %s in project %s.", logistic_type.value, quantity, item.id, ctx.project_id)
        return _transaction_to_dict(transaction)

    def list_transactions(self, ctx: AuthContext, item_id: Optional[int] = None,
                          transaction_type: Optional[str] = None) -> List[Dict[str, Any]]:
        """프로젝트의 입출고 내역을 조회합니다. item_id를 지정하면 해당 품목의 내역만 조회합니다."""
        if item_id is not None:
            item_ids = [self._get_item(ctx, item_id).id]
        else:
            item_ids = [i.id for i in self.logistic_repo.list_items(ctx.project_id)]
        type_filter = models.LogisticType(transaction_type) if transaction_type else None
        return [_transaction_to_dict(t) for t in self.logistic_repo.list_transactions(item_ids, type_filter)]

    def get_stock_summary(self, ctx: AuthContext) -> List[Dict[str, Any]]:
        """품목별 총 입고량, 총 출고량, 현재 재고(입고 - 출고)를 계산합니다."""
        summary = []
        for item in self.logistic_repo.list_items(ctx.project_id):
            total_in = sum(t.quantity for t in item.transactions if t.type == models.LogisticType.IN)
            total_out = sum(t.quantity for t in item.transactions if t.type == models.LogisticType.OUT)
            summary.append({
                "id": item.id,
                "name": item.name,
                "unit": item.unit,
                "slug": item.slug,
                "total_in": total_in,
                "total_out": total_out,
                "current_stock": total_in - total_out,
            })
        return summary
