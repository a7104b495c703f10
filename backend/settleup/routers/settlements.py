"""Settlements: simplify net balances, get who owes whom for a group's history."""
from fastapi import APIRouter

from settleup.schemas import (
    BalanceItem, ExpenseRecord, GroupBalancesRequest, GroupBalancesResponse,
    ParticipantShare, SettlementTransfer, SimplifyRequest, SimplifyResponse, TransferItem,
)
from settleup.services.group_balances import aggregate_group_balances
from settleup.services.rounding import to_decimal
from settleup.services.settlement_calculator import simplify_debts

router = APIRouter(prefix="/settlements", tags=["settlements"])


def _transfer_items(transfers: list[SettlementTransfer]) -> list[TransferItem]:
    return [TransferItem(from_id=t.from_id, to_id=t.to_id, amount=float(t.amount)) for t in transfers]


@router.post("/simplify", response_model=SimplifyResponse)
def simplify(data: SimplifyRequest):
    return SimplifyResponse(settlements=_transfer_items(simplify_debts(data.balances)))


@router.post("/group", response_model=GroupBalancesResponse)
def group_balances(data: GroupBalancesRequest):
    expenses = [
        ExpenseRecord(
            payer_id=e.payer_id,
            total=to_decimal(e.total),
            shares=[
                ParticipantShare(participant_id=s.participant_id, amount=to_decimal(s.amount))
                for s in e.shares
            ],
        )
        for e in data.expenses
    ]
    payments = [
        SettlementTransfer(from_id=p.from_id, to_id=p.to_id, amount=to_decimal(p.amount))
        for p in data.payments
    ]
    balances, settlements = aggregate_group_balances(expenses, payments, members=data.members)
    return GroupBalancesResponse(
        balances=[BalanceItem(participant_id=pid, balance=float(bal)) for pid, bal in balances.items()],
        settlements=_transfer_items(settlements),
    )
