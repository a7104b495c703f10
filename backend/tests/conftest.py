from decimal import Decimal

import pytest
from fastapi.testclient import TestClient

from settleup.main import app
from settleup.schemas import ExpenseRecord, ParticipantShare


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def make_expense():
    def _make(payer_id, shares, total=None):
        if total is None:
            total = sum(Decimal(str(a)) for _, a in shares)
        return ExpenseRecord(
            payer_id=payer_id,
            total=Decimal(str(total)),
            shares=[ParticipantShare(participant_id=p, amount=Decimal(str(a))) for p, a in shares],
        )
    return _make


@pytest.fixture
def trip_expenses(make_expense):
    return [
        make_expense("A", [("B", 15), ("C", 15)], total=30),
        make_expense("B", [("A", 10), ("C", 10)], total=20),
    ]
