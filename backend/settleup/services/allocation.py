"""Split one expense total among participants (equal, custom, percentage, exact contributions)."""
import logging
from decimal import Decimal
from typing import Iterable, Mapping, Optional, Sequence

from settleup.errors import InvalidInputError, SplitValidationError
from settleup.schemas import SettlementTransfer, SplitCalculation, SplitType
from settleup.services.rounding import TOLERANCE, ZERO, round2, to_amount
from settleup.services.settlement_calculator import simplify_debts

logger = logging.getLogger(__name__)

HUNDRED = Decimal("100")


def _check_participants(participants: Iterable[str]) -> list[str]:
    if isinstance(participants, str):
        raise InvalidInputError("Participants must be a list of ids, not a string")
    ids = list(participants)
    if not ids:
        raise InvalidInputError("At least one participant required")
    seen = set()
    for pid in ids:
        if not isinstance(pid, str) or not pid:
            raise InvalidInputError(f"Invalid participant id: {pid!r}")
        if pid in seen:
            raise InvalidInputError(f"Duplicate participant: {pid}")
        seen.add(pid)
    return ids


def _check_total(total) -> Decimal:
    amount = round2(to_amount(total))
    if amount <= 0:
        raise InvalidInputError("Total amount must be greater than 0")
    return amount


def _add_residual(allocation: dict[str, Decimal], pid: str, residual: Decimal) -> None:
    allocation[pid] = round2(allocation[pid] + residual)
    logger.debug("Assigned rounding residual %s to %s", residual, pid)


def equal_split(total, participants: Sequence[str]) -> dict[str, Decimal]:
    """
    Everyone owes total / n rounded to the cent; whatever rounding left over
    (e.g. 100 / 3 -> 33.33 * 3 = 99.99) goes to the first listed participant.
    """
    ids = _check_participants(participants)
    amount = _check_total(total)

    per_head = round2(amount / len(ids))
    allocation = {pid: per_head for pid in ids}
    residual = round2(amount - per_head * len(ids))
    if residual:
        _add_residual(allocation, ids[0], residual)
    return allocation


def custom_split(total, amounts: Mapping[str, object]) -> dict[str, Decimal]:
    """Caller-supplied amounts, checked to be positive and to add up to the total."""
    _check_participants(amounts.keys())
    amount = _check_total(total)
    # checked as rounded, since the rounded values are what gets allocated
    values = {pid: round2(to_amount(v)) for pid, v in amounts.items()}

    if any(v <= 0 for v in values.values()):
        raise SplitValidationError("All amounts must be greater than 0")
    discrepancy = round2(amount - sum(values.values()))
    if abs(discrepancy) > TOLERANCE:
        raise SplitValidationError(
            f"Amounts must total {amount} (off by {discrepancy})",
            discrepancy=discrepancy,
        )
    return values


def percentage_split(total, percentages: Mapping[str, object]) -> dict[str, Decimal]:
    """
    Each participant owes their percentage of the total, rounded to the cent.
    The rounding residual goes to the largest percentage; on a tie, the first
    one in iteration order.
    """
    _check_participants(percentages.keys())
    amount = _check_total(total)
    pcts = {pid: to_amount(p) for pid, p in percentages.items()}

    if any(p < 0 or p > HUNDRED for p in pcts.values()):
        raise SplitValidationError("All percentages must be between 0 and 100")
    discrepancy = round2(HUNDRED - sum(pcts.values()))
    if abs(discrepancy) > TOLERANCE:
        raise SplitValidationError(
            f"Percentages must total 100% (off by {discrepancy})",
            discrepancy=discrepancy,
        )

    allocation = {pid: round2(amount * p / HUNDRED) for pid, p in pcts.items()}
    residual = round2(amount - sum(allocation.values()))
    if residual:
        # max() keeps the first of equal keys
        largest = max(pcts, key=pcts.get)
        _add_residual(allocation, largest, residual)
    return allocation


def exact_shares(
    total,
    contributions: Mapping[str, object],
    participants: Sequence[str],
) -> list[SettlementTransfer]:
    """
    Reconcile unequal up-front payments: everyone's fair share is total / n, and
    the result is the list of transfers that evens out who paid more or less than
    that. Participants missing from `contributions` paid nothing.
    """
    ids = _check_participants(participants)
    amount = _check_total(total)

    known = set(ids)
    paid: dict[str, Decimal] = {}
    for pid, value in contributions.items():
        if pid not in known:
            raise InvalidInputError(f"Contribution from {pid!r} who is not a participant")
        contributed = to_amount(value)
        if contributed < 0:
            raise InvalidInputError(f"Contribution from {pid} must not be negative")
        paid[pid] = contributed

    fair_share = round2(amount / len(ids))
    balances = {pid: round2(paid.get(pid, ZERO) - fair_share) for pid in ids}
    return simplify_debts(balances)


def auto_distribute_remaining(
    total,
    assigned: Mapping[str, object],
    unassigned: Sequence[str],
) -> dict[str, Decimal]:
    """
    Fill in a partially entered custom split: what is left of the total after the
    assigned amounts is shared equally by the unassigned participants, rounding
    residual to the first of them. Nothing changes when no one is unassigned or
    nothing is left.
    """
    amount = _check_total(total)
    result = {pid: round2(to_amount(v)) for pid, v in assigned.items()}
    if not unassigned:
        return result
    ids = _check_participants(unassigned)
    overlap = [pid for pid in ids if pid in result]
    if overlap:
        raise InvalidInputError(f"Already assigned: {', '.join(overlap)}")

    remaining = round2(amount - sum(result.values()))
    if remaining <= 0:
        return result

    per_user = round2(remaining / len(ids))
    for pid in ids:
        result[pid] = per_user
    residual = round2(amount - sum(result.values()))
    if residual:
        _add_residual(result, ids[0], residual)
    return result


def _required_values(entries, what: str) -> dict[str, object]:
    values = {}
    for pid, value in entries:
        if value is None:
            raise InvalidInputError(f"Missing {what} for participant {pid}")
        values[pid] = value
    return values


def _parse_split_type(split_type) -> SplitType:
    if isinstance(split_type, SplitType):
        return split_type
    if isinstance(split_type, str):
        try:
            return SplitType(split_type.upper())
        except ValueError:
            pass
    raise InvalidInputError(f"Invalid split type: {split_type!r}")


def calculate_split(
    split_type,
    total,
    entries: Sequence[tuple[str, Optional[object]]],
) -> SplitCalculation:
    """
    Single entry point for all split policies.

    entries: ordered (participant, value) pairs. The value is ignored for EQUAL,
    is the owed amount for CUSTOM, the percentage for PERCENTAGE and the amount
    contributed for EXACT (missing means 0). For EXACT the allocation is what
    each participant still has to pay, summed over the settling transfers.
    """
    kind = _parse_split_type(split_type)
    entries = list(entries)
    ids = _check_participants(pid for pid, _ in entries)
    transfers: list[SettlementTransfer] = []

    if kind == SplitType.EQUAL:
        allocation = equal_split(total, ids)
    elif kind == SplitType.CUSTOM:
        allocation = custom_split(total, _required_values(entries, "amount"))
    elif kind == SplitType.PERCENTAGE:
        allocation = percentage_split(total, _required_values(entries, "percentage"))
    else:
        contributions = {pid: value for pid, value in entries if value is not None}
        transfers = exact_shares(total, contributions, ids)
        allocation = {}
        for t in transfers:
            allocation[t.from_id] = round2(allocation.get(t.from_id, ZERO) + t.amount)

    return SplitCalculation(
        split_type=kind,
        total=round2(total),
        allocation=allocation,
        transfers=transfers,
    )
