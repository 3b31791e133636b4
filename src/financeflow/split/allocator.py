"""Share allocation for split bills.

Every function here is a pure state transition: it takes a BillSplit (or plain
values) and returns a new one. Nothing raises; whether the shares add up to
the total is reported through `is_balanced` and left to the caller.
"""

import logging
from collections.abc import Iterable, Mapping, Sequence
from decimal import Decimal, InvalidOperation
from typing import Any

from ..models import ZERO, BillSplit, SplitMode, round_cents, to_decimal

logger = logging.getLogger(__name__)

# Must stay above count * 0.005 so rounded equal splits (3 x 33.33) pass.
DEFAULT_BALANCE_TOLERANCE = Decimal("0.5")


def parse_amount(value: Any) -> Decimal:
    """
    Read an amount typed into a split form.

    Blank, non-numeric, NaN and infinite input count as zero so a half-typed
    field never interrupts the recalculation.
    """
    if value is None or (isinstance(value, str) and not value.strip()):
        return ZERO
    try:
        amount = to_decimal(value.strip() if isinstance(value, str) else value)
    except (InvalidOperation, TypeError, ValueError):
        logger.debug(f"Treating unparseable amount {value!r} as zero")
        return ZERO
    return amount if amount.is_finite() else ZERO


def compute_shares(
    total: Decimal,
    participant_ids: Sequence[str],
    mode: SplitMode,
    locked: Iterable[str] = (),
    previous_shares: Mapping[str, Decimal] | None = None,
) -> dict[str, Decimal]:
    """
    Compute each participant's share of a bill.

    Equal mode gives everyone total / count. Custom mode keeps locked
    participants at their previous value and spreads the remainder equally
    over the free ones, never below zero. If everyone is locked the previous
    values are returned unchanged.

    Args:
        total: Bill total
        participant_ids: Selected participants, in display order
        mode: "Equal" or "Custom"
        locked: Participants whose share was set by hand (Custom only)
        previous_shares: Current shares, used for locked participants

    Returns:
        Mapping of participant id to share, rounded to cents
    """
    if not participant_ids:
        return {}

    total = parse_amount(total)
    previous = previous_shares or {}

    if mode == "Equal":
        share = round_cents(total / len(participant_ids))
        return {pid: share for pid in participant_ids}

    locked_ids = set(locked)
    shares = {pid: parse_amount(previous.get(pid, ZERO)) for pid in participant_ids}
    free = [pid for pid in participant_ids if pid not in locked_ids]

    if not free:
        return shares

    locked_sum = sum(
        (shares[pid] for pid in participant_ids if pid in locked_ids), ZERO
    )
    per_person = max(ZERO, (total - locked_sum) / len(free))
    for pid in free:
        shares[pid] = round_cents(per_person)

    return shares


def is_balanced(
    shares: Mapping[str, Decimal],
    total: Decimal,
    tolerance: Decimal = DEFAULT_BALANCE_TOLERANCE,
) -> bool:
    """Whether the shares add up to the total within tolerance."""
    allocated = sum((parse_amount(v) for v in shares.values()), ZERO)
    return abs(allocated - parse_amount(total)) < tolerance


def new_split(
    self_id: str, total: Decimal = ZERO, mode: SplitMode = "Equal"
) -> BillSplit:
    """Start a split with only the initiating user selected."""
    split = BillSplit(self_id=self_id, total=max(ZERO, parse_amount(total)), mode=mode)
    return _recompute(split)


def set_total(split: BillSplit, total: Any) -> BillSplit:
    """Change the bill total, keeping manual shares locked."""
    amount = max(ZERO, parse_amount(total))
    return _recompute(split.model_copy(update={"total": amount}))


def set_mode(split: BillSplit, mode: SplitMode) -> BillSplit:
    """Switch between Equal and Custom. Equal drops every lock."""
    locked = [] if mode == "Equal" else list(split.locked)
    return _recompute(split.model_copy(update={"mode": mode, "locked": locked}))


def set_manual_share(split: BillSplit, participant_id: str, value: Any) -> BillSplit:
    """
    Set one participant's share by hand and rebalance the others.

    The participant becomes the most recently locked one. If that would leave
    nobody free to absorb the remainder, the earliest lock is released.

    Args:
        split: Current split state
        participant_id: Participant whose share was edited
        value: New share (negative or unparseable values are treated as zero)

    Returns:
        New split state in Custom mode
    """
    if participant_id not in split.selected:
        logger.debug(f"Ignoring manual share for unselected {participant_id}")
        return split

    amount = max(ZERO, round_cents(parse_amount(value)))
    shares = {**split.shares, participant_id: amount}
    locked = [pid for pid in split.locked if pid != participant_id]
    locked.append(participant_id)

    if len(locked) >= len(split.selected):
        released = locked.pop(0)
        logger.debug(f"All participants locked; released earliest lock {released}")

    shares = compute_shares(split.total, split.selected, "Custom", locked, shares)
    return split.model_copy(
        update={"mode": "Custom", "shares": shares, "locked": locked}
    )


def toggle_participant(split: BillSplit, participant_id: str) -> BillSplit:
    """
    Add or remove a participant. The initiating user can't be removed.

    Changing who is in the split invalidates manual shares, so all locks are
    cleared before recomputing.
    """
    if participant_id == split.self_id:
        return split

    selected = list(split.selected)
    if participant_id in selected:
        selected.remove(participant_id)
    else:
        selected.append(participant_id)

    return _recompute(split.model_copy(update={"selected": selected, "locked": []}))


def _recompute(split: BillSplit) -> BillSplit:
    shares = compute_shares(
        split.total, split.selected, split.mode, split.locked, split.shares
    )
    return split.model_copy(update={"shares": shares})
