"""Fold a group's expenses (and payments already made) into net balances, then settle them."""
import logging
from decimal import Decimal
from typing import Iterable, Optional, Sequence

from pydantic import ValidationError

from settleup.errors import InvalidInputError
from settleup.schemas import ExpenseRecord, SettlementTransfer
from settleup.services.rounding import ZERO, round2, to_amount
from settleup.services.settlement_calculator import apply_transfers, simplify_debts

logger = logging.getLogger(__name__)


def _check_id(pid, known: Optional[set], where: str) -> None:
    if not isinstance(pid, str) or not pid:
        raise InvalidInputError(f"{where}: invalid participant id {pid!r}")
    if known is not None and pid not in known:
        raise InvalidInputError(f"{where}: {pid} is not a group member")


def _amount(value, where: str) -> Decimal:
    try:
        return to_amount(value)
    except InvalidInputError as exc:
        raise InvalidInputError(f"{where}: {exc.message}") from exc


def _coerce(model, value, where: str):
    if isinstance(value, model):
        return value
    try:
        return model.model_validate(value)
    except ValidationError as exc:
        raise InvalidInputError(f"{where}: malformed record ({exc.error_count()} errors)") from exc


def _parse_expense(index: int, raw, known: Optional[set]):
    where = f"Expense #{index}"
    expense = _coerce(ExpenseRecord, raw, where)
    _check_id(expense.payer_id, known, where)
    if _amount(expense.total, where) < 0:
        raise InvalidInputError(f"{where}: total must not be negative")
    shares = []
    seen = set()
    for share in expense.shares:
        _check_id(share.participant_id, known, where)
        if share.participant_id in seen:
            raise InvalidInputError(f"{where}: {share.participant_id} listed more than once")
        seen.add(share.participant_id)
        owed = _amount(share.amount, where)
        if owed < 0:
            raise InvalidInputError(f"{where}: negative amount owed by {share.participant_id}")
        shares.append((share.participant_id, owed))
    return expense.payer_id, shares


def _parse_payment(index: int, raw, known: Optional[set]):
    where = f"Payment #{index}"
    payment = _coerce(SettlementTransfer, raw, where)
    _check_id(payment.from_id, known, where)
    _check_id(payment.to_id, known, where)
    if payment.from_id == payment.to_id:
        raise InvalidInputError(f"{where}: cannot pay yourself")
    amount = _amount(payment.amount, where)
    if amount <= 0:
        raise InvalidInputError(f"{where}: amount must be positive")
    return payment


def aggregate_group_balances(
    expenses: Iterable,
    payments: Iterable = (),
    members: Optional[Sequence[str]] = None,
) -> tuple[dict[str, Decimal], list[SettlementTransfer]]:
    """
    Net balance per participant (positive = is owed, negative = owes) and the
    simplified transfers that settle the group.

    For every expense the payer is owed what each other participant owes; a
    payer's own share is a no-op. Payments already made move money the other
    way. When `members` is given, everyone in it gets a balance (in member
    order) and anyone else in a record is rejected.

    Every record is validated before anything is folded: one bad record fails
    the whole call with InvalidInputError.
    """
    known = None
    balances: dict[str, Decimal] = {}
    if members is not None:
        member_ids = list(members)
        for pid in member_ids:
            _check_id(pid, None, "Members")
        known = set(member_ids)
        balances = {pid: ZERO for pid in member_ids}

    parsed_expenses = [_parse_expense(i, e, known) for i, e in enumerate(expenses, start=1)]
    parsed_payments = [_parse_payment(i, p, known) for i, p in enumerate(payments, start=1)]

    for payer, shares in parsed_expenses:
        balances.setdefault(payer, ZERO)
        for pid, owed in shares:
            balances.setdefault(pid, ZERO)
            if pid == payer:
                continue
            balances[payer] = round2(balances[payer] + owed)
            balances[pid] = round2(balances[pid] - owed)

    balances = apply_transfers(balances, parsed_payments)

    logger.info(
        "Aggregated %d expenses and %d payments over %d participants",
        len(parsed_expenses), len(parsed_payments), len(balances),
    )
    return balances, simplify_debts(balances)
