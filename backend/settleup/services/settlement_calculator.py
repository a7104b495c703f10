"""Minimize number of transfers so everyone is settled (who owes whom)."""
import logging
from decimal import Decimal
from typing import Iterable, Mapping

from settleup.schemas import SettlementTransfer
from settleup.services.rounding import MONEY_UNIT, round2

logger = logging.getLogger(__name__)


def simplify_debts(balances: Mapping[str, object]) -> list[SettlementTransfer]:
    """
    balances: participant -> net balance (positive = is owed money, negative = owes money).
    Returns the list of transfers that settles everyone up.

    Greedy largest-first matching: the largest creditor is paid by the largest
    debtor until one of them is square, then the cursor moves on. This yields at
    most (nonzero balances - 1) transfers but is not always the global minimum.
    Ties keep input order (sorts are stable), so a given map always produces the
    same list.
    """
    creditors = []  # [participant, remaining amount owed to them]
    debtors = []  # [participant, remaining amount they owe]
    for pid, bal in balances.items():
        amount = round2(bal)
        if amount > 0:
            creditors.append([pid, amount])
        elif amount < 0:
            debtors.append([pid, -amount])
    creditors.sort(key=lambda x: -x[1])
    debtors.sort(key=lambda x: -x[1])

    out: list[SettlementTransfer] = []
    i, j = 0, 0
    while i < len(creditors) and j < len(debtors):
        cid, credit = creditors[i]
        did, debt = debtors[j]
        transfer = min(credit, debt)
        if transfer > MONEY_UNIT:
            out.append(SettlementTransfer(from_id=did, to_id=cid, amount=round2(transfer)))
        else:
            logger.debug("Dropping %s -> %s transfer of %s (rounding noise)", did, cid, transfer)
        creditors[i][1] = credit - transfer
        debtors[j][1] = debt - transfer
        if creditors[i][1] < MONEY_UNIT:
            i += 1
        if debtors[j][1] < MONEY_UNIT:
            j += 1

    logger.debug(
        "Simplified %d creditors and %d debtors into %d transfers",
        len(creditors), len(debtors), len(out),
    )
    return out


def apply_transfers(
    balances: Mapping[str, object],
    transfers: Iterable[SettlementTransfer],
) -> dict[str, Decimal]:
    """
    Balances after the given transfers have been paid: the payer's balance goes up,
    the recipient's goes down. Settling with simplify_debts' output leaves every
    participant within one cent of zero.
    """
    result = {pid: round2(bal) for pid, bal in balances.items()}
    for t in transfers:
        amount = round2(t.amount)
        result[t.from_id] = round2(result.get(t.from_id, 0) + amount)
        result[t.to_id] = round2(result.get(t.to_id, 0) - amount)
    return result
