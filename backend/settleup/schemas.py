"""Pydantic schemas: engine value types and request/response bodies."""
from decimal import Decimal
from enum import Enum
from typing import Optional

from pydantic import BaseModel


# ----- Engine types -----
class SplitType(str, Enum):
    EQUAL = "EQUAL"
    CUSTOM = "CUSTOM"
    PERCENTAGE = "PERCENTAGE"
    EXACT = "EXACT"


class SettlementTransfer(BaseModel):
    """One payment instruction: `from_id` pays `to_id`."""

    from_id: str
    to_id: str
    amount: Decimal

    class Config:
        frozen = True


class ParticipantShare(BaseModel):
    participant_id: str
    amount: Decimal


class ExpenseRecord(BaseModel):
    """One expense as stored by the caller: who paid, and what each participant owes."""

    payer_id: str
    total: Decimal
    shares: list[ParticipantShare] = []


class SplitCalculation(BaseModel):
    split_type: SplitType
    total: Decimal
    allocation: dict[str, Decimal]
    transfers: list[SettlementTransfer] = []


# ----- Split -----
class SplitParticipant(BaseModel):
    participant_id: str
    # amount for CUSTOM, percentage for PERCENTAGE, contribution for EXACT
    value: Optional[float] = None


class SplitCalculateRequest(BaseModel):
    total: float
    split_type: SplitType = SplitType.EQUAL
    participants: list[SplitParticipant]


class AllocationItem(BaseModel):
    participant_id: str
    amount: float


class TransferItem(BaseModel):
    from_id: str
    to_id: str
    amount: float


class SplitCalculateResponse(BaseModel):
    split_type: SplitType
    total: float
    allocations: list[AllocationItem]
    transfers: list[TransferItem] = []


class DistributeRequest(BaseModel):
    total: float
    assigned: dict[str, float] = {}
    unassigned: list[str] = []


class DistributeResponse(BaseModel):
    amounts: dict[str, float]


# ----- Settlement -----
class SimplifyRequest(BaseModel):
    balances: dict[str, float]


class SimplifyResponse(BaseModel):
    settlements: list[TransferItem]


class ShareIn(BaseModel):
    participant_id: str
    amount: float


class ExpenseIn(BaseModel):
    payer_id: str
    total: float
    shares: list[ShareIn] = []


class PaymentIn(BaseModel):
    from_id: str
    to_id: str
    amount: float


class BalanceItem(BaseModel):
    participant_id: str
    balance: float


class GroupBalancesRequest(BaseModel):
    members: Optional[list[str]] = None
    expenses: list[ExpenseIn]
    payments: list[PaymentIn] = []


class GroupBalancesResponse(BaseModel):
    balances: list[BalanceItem]
    settlements: list[TransferItem]


# ----- Errors -----
class ErrorResponse(BaseModel):
    detail: str
    code: str
    discrepancy: Optional[float] = None
