# tests/services/test_logistic_service.py
import pytest
from unittest.mock import MagicMock

from sitelog.services.logistic_service import LogisticService
from sitelog.services.authorization import AuthContext, OperationType, Principal
from sitelog.services.exceptions import *
from sitelog.repositories.interfaces import ILogisticRepository
from sitelog.database import models

PROJECT_ID = 7

@pytest.fixture
def mock_logistic_repo() -> MagicMock:
    repo = MagicMock(spec=ILogisticRepository)
    repo.create_item.side_effect = lambda item: item
    repo.create_transaction.side_effect = lambda transaction: transaction
    return repo

@pytest.fixture
def logistic_service(mock_logistic_repo: MagicMock) -> LogisticService:
    return LogisticService(mock_logistic_repo)

def make_ctx(user_id: int = 1) -> AuthContext:
    return AuthContext(
        principal=Principal(id=user_id, is_active=True, global_role=models.GlobalRole.USER),
        operation_type=OperationType.MUTATION,
        project_id=PROJECT_ID,
    )

def make_item(item_id: int = 4, name: str = "Semen Portland") -> models.LogisticItem:
    return models.LogisticItem(id=item_id, project_id=PROJECT_ID, name=name, unit="Sak", slug=f"item-{item_id}")


class TestLogisticItems:
    def test_create_item_generates_slug(self, logistic_service: LogisticService):
        item = logistic_service.create_item(make_ctx(), name="Semen Portland 50kg", unit="Sak")

        assert item["slug"].startswith("semen-portland-50kg-")
        assert item["project_id"] == PROJECT_ID

    def test_update_missing_item(self, logistic_service: LogisticService, mock_logistic_repo: MagicMock):
        mock_logistic_repo.find_item_in_project.return_value = None

        with pytest.raises(NotFoundError, match="Logistic item not found in this project"):
            logistic_service.update_item(make_ctx(), item_id=4, unit="Kg")
        mock_logistic_repo.find_item_in_project.assert_called_once_with(4, PROJECT_ID)


class TestLogisticTransactions:
    def test_record_transaction(self, logistic_service: LogisticService, mock_logistic_repo: MagicMock):
        mock_logistic_repo.find_item_in_project.return_value = make_item()

        transaction = logistic_service.record_transaction(make_ctx(user_id=3), item_id=4, transaction_type="OUT", quantity=10)

        assert transaction["type"] == "OUT"
        assert transaction["item_id"] == 4
        saved = mock_logistic_repo.create_transaction.call_args.args[0]
        assert saved.user_id == 3

    @pytest.mark.parametrize("transaction_type, quantity", [("MOVE", 1), ("IN", 0), ("IN", -5)])
    def test_record_transaction_validates_input(self, logistic_service: LogisticService, mock_logistic_repo: MagicMock,
                                                transaction_type, quantity):
        mock_logistic_repo.find_item_in_project.return_value = make_item()

        with pytest.raises(ValueError):
            logistic_service.record_transaction(make_ctx(), item_id=4, transaction_type=transaction_type, quantity=quantity)
        mock_logistic_repo.create_transaction.assert_not_called()

    def test_list_transactions_for_whole_project(self, logistic_service: LogisticService, mock_logistic_repo: MagicMock):
        mock_logistic_repo.list_items.return_value = [make_item(4), make_item(5, "Pasir")]
        mock_logistic_repo.list_transactions.return_value = []

        logistic_service.list_transactions(make_ctx(), transaction_type="IN")

        mock_logistic_repo.list_transactions.assert_called_once_with([4, 5], models.LogisticType.IN)

    def test_stock_summary(self, logistic_service: LogisticService, mock_logistic_repo: MagicMock):
        """현재 재고는 총 입고량에서 총 출고량을 뺀 값입니다."""
        # === Arrange ===
        item = make_item()
        item.transactions = [
            models.LogisticTransaction(item_id=4, user_id=1, type=models.LogisticType.IN, quantity=100),
            models.LogisticTransaction(item_id=4, user_id=1, type=models.LogisticType.IN, quantity=20),
            models.LogisticTransaction(item_id=4, user_id=2, type=models.LogisticType.OUT, quantity=45),
        ]
        empty_item = make_item(5, "Pasir")
        mock_logistic_repo.list_items.return_value = [item, empty_item]

        # === Act ===
        summary = logistic_service.get_stock_summary(make_ctx())

        # === Assert ===
        assert summary[0]["total_in"] == 120
        assert summary[0]["total_out"] == 45
        assert summary[0]["current_stock"] == 75
        assert summary[1]["current_stock"] == 0
