"""Friend balance aggregation over a transaction history.

Sign convention: positive means the friend owes the user, negative means the
user owes the friend.
"""

import logging
from collections.abc import Collection, Iterable, Sequence
from decimal import Decimal
from typing import Any, Literal

from ..models import (
    CENT,
    ZERO,
    EntryClass,
    FriendBalance,
    FriendDues,
    LedgerEntry,
    MoneyGivenEntry,
    MoneyTakenEntry,
    RepaymentEntry,
    SplitEntry,
    TransactionStatus,
    round_cents,
    to_decimal,
)

logger = logging.getLogger(__name__)

FriendTab = Literal["Activity", "I Owe", "They Owe"]

# "Approved" only means the friend acknowledged the record, the money is still
# outstanding; "Rejected" records were never agreed to.
DEFAULT_SETTLED_STATUSES: frozenset[TransactionStatus] = frozenset(
    {"Completed", "Rejected"}
)


def is_settled(
    entry: LedgerEntry,
    settled_statuses: Collection[TransactionStatus] = DEFAULT_SETTLED_STATUSES,
) -> bool:
    """Whether an entry no longer contributes to any balance."""
    return entry.status in settled_statuses


def classify(
    entry: LedgerEntry,
    user_id: str,
    friend_id: str,
    count_split_dues: bool = False,
) -> EntryClass:
    """
    Classify an entry from the user's point of view.

    Debt (user owes): money the user took, or money the friend gave.
    Credit (user is owed): money the user gave, or money the friend took.
    Everything else is Neutral. With `count_split_dues`, a split paid by one
    of the pair in which the other participates also counts.

    Entries created by the user must name this friend as counterparty.
    """
    if isinstance(entry, MoneyTakenEntry):
        if entry.creator_id == user_id and entry.friend_id == friend_id:
            return "Debt"
        if entry.creator_id == friend_id:
            return "Credit"
    elif isinstance(entry, MoneyGivenEntry):
        if entry.creator_id == friend_id:
            return "Debt"
        if entry.creator_id == user_id and entry.friend_id == friend_id:
            return "Credit"
    elif count_split_dues and isinstance(entry, SplitEntry):
        if entry.payer_id == user_id and entry.share_of(friend_id):
            return "Credit"
        if entry.payer_id == friend_id and entry.share_of(user_id):
            return "Debt"
    return "Neutral"


def outstanding(
    entry: LedgerEntry,
    user_id: str,
    friend_id: str,
    count_split_dues: bool = False,
) -> Decimal:
    """
    Amount still owed on an entry between the user and this friend.

    Partial payments reduce the amount; overpayment never flips it negative.
    For splits, the debtor's unpaid share is what's outstanding.
    """
    kind = classify(entry, user_id, friend_id, count_split_dues)
    if kind == "Neutral":
        return ZERO
    if isinstance(entry, SplitEntry):
        debtor = friend_id if kind == "Credit" else user_id
        share = entry.share_of(debtor)
        return share.remaining if share else ZERO
    return entry.remaining


def friend_history(history: Iterable[LedgerEntry], friend_id: str) -> list[LedgerEntry]:
    """Entries recorded with or by a friend."""
    return [
        entry
        for entry in history
        if entry.creator_id == friend_id or _involves(entry, friend_id)
    ]


def dues(
    history: Iterable[LedgerEntry],
    user_id: str,
    friend_id: str,
    settled_statuses: Collection[TransactionStatus] = DEFAULT_SETTLED_STATUSES,
    count_split_dues: bool = False,
) -> FriendDues:
    """Total outstanding in each direction, skipping settled entries."""
    i_owe = ZERO
    they_owe = ZERO

    for entry in history:
        if is_settled(entry, settled_statuses):
            continue
        kind = classify(entry, user_id, friend_id, count_split_dues)
        if kind == "Neutral":
            continue
        amount = outstanding(entry, user_id, friend_id, count_split_dues)
        if kind == "Debt":
            i_owe += amount
        else:
            they_owe += amount

    return FriendDues(i_owe=round_cents(i_owe), they_owe=round_cents(they_owe))


def net_balance(
    history: Iterable[LedgerEntry],
    user_id: str,
    friend_id: str,
    settled_statuses: Collection[TransactionStatus] = DEFAULT_SETTLED_STATUSES,
    count_split_dues: bool = False,
) -> Decimal:
    """
    Net signed balance with a friend.

    Args:
        history: The user's transaction history
        user_id: The signed-in user
        friend_id: The counterparty
        settled_statuses: Statuses that no longer count
        count_split_dues: Also count splits between the pair

    Returns:
        Positive if the friend owes the user, negative if the user owes
    """
    return dues(history, user_id, friend_id, settled_statuses, count_split_dues).net


def friend_balances(
    history: Sequence[LedgerEntry],
    user_id: str,
    friend_ids: Iterable[str],
    settled_statuses: Collection[TransactionStatus] = DEFAULT_SETTLED_STATUSES,
    count_split_dues: bool = False,
) -> list[FriendBalance]:
    """Net balance with each friend."""
    return [
        FriendBalance(
            friend_id=friend_id,
            net_balance=net_balance(
                history, user_id, friend_id, settled_statuses, count_split_dues
            ),
        )
        for friend_id in friend_ids
    ]


def filter_tab(
    history: Iterable[LedgerEntry],
    user_id: str,
    friend_id: str,
    tab: FriendTab,
    count_split_dues: bool = False,
) -> list[LedgerEntry]:
    """
    Entries shown under a friend detail tab.

    Activity lists everything with the friend; "I Owe" and "They Owe" list
    Debt and Credit entries respectively.
    """
    entries = friend_history(history, friend_id)
    if tab == "Activity":
        return entries

    wanted: EntryClass = "Debt" if tab == "I Owe" else "Credit"
    return [
        entry
        for entry in entries
        if classify(entry, user_id, friend_id, count_split_dues) == wanted
    ]


def removal_guard(friend_balance: Any) -> bool:
    """A friend can only be removed when nothing is owed either way."""
    return to_decimal(friend_balance) == ZERO


def agrees_with_backend(derived: Decimal, reported: Any) -> bool:
    """Whether a locally derived balance matches the backend's within a cent."""
    return abs(to_decimal(derived) - to_decimal(reported)) <= CENT


def _involves(entry: LedgerEntry, friend_id: str) -> bool:
    if isinstance(entry, MoneyGivenEntry | MoneyTakenEntry | RepaymentEntry):
        return entry.friend_id == friend_id
    if isinstance(entry, SplitEntry):
        return entry.payer_id == friend_id or entry.share_of(friend_id) is not None
    return False
