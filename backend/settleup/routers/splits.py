"""Splits: work out what each participant owes for one expense."""
from fastapi import APIRouter

from settleup.schemas import (
    AllocationItem, DistributeRequest, DistributeResponse,
    SplitCalculateRequest, SplitCalculateResponse, TransferItem,
)
from settleup.services.allocation import auto_distribute_remaining, calculate_split

router = APIRouter(prefix="/splits", tags=["splits"])


@router.post("/calculate", response_model=SplitCalculateResponse)
def calculate(data: SplitCalculateRequest):
    result = calculate_split(
        data.split_type,
        data.total,
        [(p.participant_id, p.value) for p in data.participants],
    )
    return SplitCalculateResponse(
        split_type=result.split_type,
        total=float(result.total),
        allocations=[
            AllocationItem(participant_id=pid, amount=float(amount))
            for pid, amount in result.allocation.items()
        ],
        transfers=[
            TransferItem(from_id=t.from_id, to_id=t.to_id, amount=float(t.amount))
            for t in result.transfers
        ],
    )


@router.post("/distribute", response_model=DistributeResponse)
def distribute_remaining(data: DistributeRequest):
    amounts = auto_distribute_remaining(data.total, data.assigned, data.unassigned)
    return DistributeResponse(amounts={pid: float(a) for pid, a in amounts.items()})
