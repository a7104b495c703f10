from decimal import Decimal

import pytest

from settleup.errors import InvalidInputError
from settleup.schemas import SettlementTransfer
from settleup.services.group_balances import aggregate_group_balances
from settleup.services.settlement_calculator import apply_transfers


def test_two_expenses(trip_expenses):
    balances, transfers = aggregate_group_balances(trip_expenses)
    assert balances == {"A": Decimal("20.00"), "B": Decimal("5.00"), "C": Decimal("-25.00")}
    assert [(t.from_id, t.to_id, t.amount) for t in transfers] == [
        ("C", "A", Decimal("20.00")),
        ("C", "B", Decimal("5.00")),
    ]


def test_payer_own_share_is_ignored(make_expense):
    balances, transfers = aggregate_group_balances([
        make_expense("A", [("A", "33.34"), ("B", "33.33"), ("C", "33.33")]),
    ])
    assert balances == {"A": Decimal("66.66"), "B": Decimal("-33.33"), "C": Decimal("-33.33")}
    assert len(transfers) == 2


def test_payer_only_expense(make_expense):
    balances, transfers = aggregate_group_balances([make_expense("A", [("A", 40)])])
    assert balances == {"A": Decimal("0.00")}
    assert transfers == []


def test_balances_always_close(make_expense):
    expenses = [
        make_expense("A", [("A", "33.34"), ("B", "33.33"), ("C", "33.33")]),
        make_expense("C", [("A", "12.01"), ("D", "7.77")]),
        make_expense("D", [("B", "0.01"), ("C", "99.99"), ("D", 5)]),
        make_expense("B", [("A", "3.33"), ("C", "3.33"), ("D", "3.34")]),
    ]
    balances, transfers = aggregate_group_balances(expenses)
    assert sum(balances.values()) == Decimal("0.00")
    settled = apply_transfers(balances, transfers)
    assert all(abs(v) <= Decimal("0.01") for v in settled.values())


def test_payments_reduce_balances(trip_expenses):
    payments = [SettlementTransfer(from_id="C", to_id="A", amount=Decimal("20"))]
    balances, transfers = aggregate_group_balances(trip_expenses, payments)
    assert balances == {"A": Decimal("0.00"), "B": Decimal("5.00"), "C": Decimal("-5.00")}
    assert transfers == [SettlementTransfer(from_id="C", to_id="B", amount=Decimal("5.00"))]


def test_members_listed_first_and_all_present(trip_expenses):
    balances, _ = aggregate_group_balances(trip_expenses, members=["D", "C", "B", "A"])
    assert list(balances) == ["D", "C", "B", "A"]
    assert balances["D"] == Decimal("0.00")


def test_unknown_participant_rejected(trip_expenses):
    with pytest.raises(InvalidInputError) as exc:
        aggregate_group_balances(trip_expenses, members=["A", "B"])
    assert "Expense #1" in exc.value.message


def test_negative_owed_amount_rejected(make_expense):
    with pytest.raises(InvalidInputError) as exc:
        aggregate_group_balances([
            make_expense("A", [("B", 10)]),
            make_expense("B", [("A", -5)], total=5),
        ])
    assert "Expense #2" in exc.value.message


def test_accepts_plain_dicts():
    balances, _ = aggregate_group_balances([
        {"payer_id": "A", "total": 10, "shares": [{"participant_id": "B", "amount": 10}]},
    ])
    assert balances == {"A": Decimal("10.00"), "B": Decimal("-10.00")}


def test_repeated_participant_rejected(make_expense):
    with pytest.raises(InvalidInputError) as exc:
        aggregate_group_balances([make_expense("A", [("B", 10), ("B", 10)])])
    assert "listed more than once" in exc.value.message


@pytest.mark.parametrize("record", [
    {"payer_id": "A", "total": 10, "shares": [{"participant_id": "", "amount": 10}]},
    {"payer_id": "A", "total": -10, "shares": []},
    {"payer_id": "A", "total": 10, "shares": [{"participant_id": "B", "amount": "lots"}]},
    {"total": 10, "shares": []},
])
def test_malformed_records_rejected(record):
    with pytest.raises(InvalidInputError):
        aggregate_group_balances([record])


@pytest.mark.parametrize("payment", [
    {"from_id": "A", "to_id": "A", "amount": 5},
    {"from_id": "C", "to_id": "A", "amount": 0},
])
def test_bad_payments_rejected(trip_expenses, payment):
    with pytest.raises(InvalidInputError):
        aggregate_group_balances(trip_expenses, [payment])


def test_no_expenses():
    assert aggregate_group_balances([]) == ({}, [])
