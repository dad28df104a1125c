"""Transaction direction inferred from running balances.

Some statements print a single amount column and a running balance, with no
debit/credit marker. The direction of each row is recovered by checking
which of ``previous balance - amount`` and ``previous balance + amount``
reproduces the printed balance. Rows must stay in document order.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import List, Optional, Sequence, Tuple

from bank_ocr_parser.parsers.models import TransactionType

DEFAULT_TOLERANCE = Decimal("0.01")


@dataclass(frozen=True)
class Direction:
    """Resolved direction of one row.

    ``reconciled`` is False when no arithmetic match was found and the
    direction was taken from whether the balance went down or up.
    """
    type: TransactionType
    reconciled: bool = True


UNKNOWN_DIRECTION = Direction(TransactionType.UNKNOWN, reconciled=False)


def reconcile_step(
    previous_balance: Decimal,
    amount: Decimal,
    balance: Decimal,
    tolerance: Decimal = DEFAULT_TOLERANCE
) -> Direction:
    """Resolve the direction of a row from the balance before and after it.

    Args:
        previous_balance: Balance printed on the preceding row.
        amount: Amount of this row, unsigned.
        balance: Balance printed on this row.
        tolerance: Largest difference still counted as a match.

    Returns:
        DEBIT or CREDIT; ``reconciled`` is False for the sign-of-change
        fallback.
    """
    amount = abs(amount)
    debit_diff = abs(previous_balance - amount - balance)
    credit_diff = abs(previous_balance + amount - balance)

    if debit_diff < credit_diff and debit_diff <= tolerance:
        return Direction(TransactionType.DEBIT)
    if credit_diff < debit_diff and credit_diff <= tolerance:
        return Direction(TransactionType.CREDIT)

    fallback = TransactionType.DEBIT if balance < previous_balance else TransactionType.CREDIT
    return Direction(fallback, reconciled=False)


def reconcile_directions(
    rows: Sequence[Tuple[Decimal, Decimal]],
    tolerance: Optional[Decimal] = None
) -> List[Direction]:
    """Resolve directions for a sequence of (amount, balance) rows.

    Every row after the first is compared with its predecessor. The first
    row has no predecessor, so it takes the direction established by the
    step from row 0 to row 1; a lone row stays UNKNOWN.

    Args:
        rows: (amount, balance) pairs in document order.
        tolerance: Largest difference still counted as a match.

    Returns:
        One Direction per row, in the same order.
    """
    if tolerance is None:
        tolerance = DEFAULT_TOLERANCE

    directions: List[Direction] = []
    for index in range(1, len(rows)):
        previous_balance = rows[index - 1][1]
        amount, balance = rows[index]
        directions.append(reconcile_step(previous_balance, amount, balance, tolerance))

    if not rows:
        return []
    if len(rows) == 1:
        return [UNKNOWN_DIRECTION]
    return [directions[0]] + directions
