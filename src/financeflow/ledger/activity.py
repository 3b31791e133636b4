"""History filters and cash-flow series for the dashboard and activity views."""

from collections.abc import Iterable
from datetime import date, datetime, timedelta, tzinfo
from typing import Literal

from ..models import (
    ZERO,
    CashFlowDay,
    ExpenseEntry,
    IncomeEntry,
    LedgerEntry,
    MoneyGivenEntry,
    MoneyTakenEntry,
)

HistoryFilter = Literal["All", "Income", "Expense", "Pending"]
TimeWindow = Literal["Today", "Yesterday", "7D", "30D", "Custom", "All"]

_WINDOW_DAYS = {"7D": 7, "30D": 30}


def is_inflow(entry: LedgerEntry) -> bool:
    """Money coming in: income, or money borrowed from a friend."""
    return isinstance(entry, IncomeEntry | MoneyTakenEntry)


def is_outflow(entry: LedgerEntry) -> bool:
    """Money going out: expenses, or money lent to a friend."""
    return isinstance(entry, ExpenseEntry | MoneyGivenEntry)


def filter_history(
    history: Iterable[LedgerEntry], kind: HistoryFilter = "All"
) -> list[LedgerEntry]:
    """
    Filter the activity list.

    "Pending" covers both Pending and Paid (paid but not yet confirmed).
    """
    entries = list(history)
    if kind == "All":
        return entries
    if kind == "Pending":
        return [e for e in entries if e.status in ("Pending", "Paid")]
    return [e for e in entries if e.type == kind]


def filter_by_window(
    history: Iterable[LedgerEntry],
    window: TimeWindow,
    now: datetime | None = None,
    start: date | None = None,
    end: date | None = None,
) -> list[LedgerEntry]:
    """
    Keep entries inside a time window.

    Dates are compared in `now`'s timezone (local time when omitted).
    A Custom window needs both `start` and `end` (inclusive); otherwise
    nothing is filtered out.

    Args:
        history: Entries to filter
        window: Today, Yesterday, 7D, 30D, Custom or All
        now: Reference time
        start: First day of a Custom window
        end: Last day of a Custom window

    Returns:
        Matching entries, original order preserved
    """
    entries = list(history)
    now = now or datetime.now().astimezone()
    if now.tzinfo is None:
        now = now.astimezone()
    tz = now.tzinfo

    if window == "All":
        return entries

    if window == "Custom":
        if start is None or end is None:
            return entries
        return [e for e in entries if start <= e.timestamp.astimezone(tz).date() <= end]

    if window in _WINDOW_DAYS:
        span = timedelta(days=_WINDOW_DAYS[window])
        return [e for e in entries if now - e.timestamp.astimezone(tz) < span]

    target = now.date() if window == "Today" else now.date() - timedelta(days=1)
    return [e for e in entries if e.timestamp.astimezone(tz).date() == target]


def daily_cash_flow(
    history: Iterable[LedgerEntry], tz: tzinfo | None = None
) -> list[CashFlowDay]:
    """
    Inflow and outflow per day, oldest first. Splits and repayments are skipped.

    Days are calendar dates in `tz`, the local timezone by default, matching
    how `filter_by_window` decides Today and Yesterday.
    """
    days: dict[date, CashFlowDay] = {}

    for entry in history:
        if not (is_inflow(entry) or is_outflow(entry)):
            continue
        day = entry.timestamp.astimezone(tz).date()
        bucket = days.setdefault(day, CashFlowDay(day=day, inflow=ZERO, outflow=ZERO))
        if is_inflow(entry):
            bucket.inflow += entry.amount
        else:
            bucket.outflow += entry.amount

    return [days[day] for day in sorted(days)]
