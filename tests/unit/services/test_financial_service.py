from __future__ import annotations

from datetime import date

import pytest

from salesdesk.core.exceptions import ValidationError
from salesdesk.services.financial_service import FinancialService


def _seed(service: FinancialService) -> None:
    service.create_transaction(title="Consulting", type="income", amount=10000, transaction_date=date(2026, 3, 1), category="services")
    service.create_transaction(title="Licence", type="income", amount=5000, transaction_date=date(2026, 3, 31), category="software")
    service.create_transaction(title="Retainer", type="income", amount=2000, transaction_date=date(2026, 4, 2), status="pending")
    service.create_transaction(title="Ads", type="expense", amount=3000, transaction_date=date(2026, 3, 15), category="marketing")


def test_amount_must_be_positive(db_session):
    service = FinancialService(db=db_session)
    with pytest.raises(ValidationError):
        service.create_transaction(title="Zero", type="income", amount=0)


def test_list_filters_are_inclusive_and_newest_first(db_session):
    service = FinancialService(db=db_session)
    _seed(service)

    march = service.list_transactions(start_date=date(2026, 3, 1), end_date=date(2026, 3, 31))
    assert [row.title for row in march] == ["Licence", "Ads", "Consulting"]
    assert [row.title for row in service.list_transactions(type="expense")] == ["Ads"]
    assert [row.title for row in service.list_transactions(category="software")] == ["Licence"]


def test_summary_counts_only_completed(db_session):
    service = FinancialService(db=db_session)
    _seed(service)

    summary = service.summary()

    assert summary.total_income == 15000
    assert summary.total_expenses == 3000
    assert summary.pending_income == 2000
    assert summary.net_profit == 12000
    assert summary.margin_percent == 80.0


def test_update_and_delete(db_session):
    service = FinancialService(db=db_session)
    row = service.create_transaction(title="Deposit", type="income", amount=100, status="pending")

    updated = service.update_transaction(row.id, {"status": "completed", "amount": 150})
    assert updated.amount == 150
    assert service.summary().total_income == 150
    with pytest.raises(ValidationError):
        service.update_transaction(row.id, {"amount": -5})
    assert service.delete_transaction(row.id) is True
    assert service.get_transaction(row.id) is None
