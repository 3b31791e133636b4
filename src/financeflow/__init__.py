"""FinanceFlow - Personal finance, friend debts and bill splitting from the terminal."""

__version__ = "0.1.0"

from .config import Settings, load_settings
from .db import Database
from .ledger.aggregator import classify, dues, net_balance, removal_guard
from .models import (
    BillSplit,
    Friend,
    LedgerEntry,
    Notification,
    User,
    parse_history,
)
from .service import FinanceService
from .split.allocator import compute_shares, set_manual_share, toggle_participant

__all__ = [
    "Settings",
    "load_settings",
    "Database",
    "classify",
    "dues",
    "net_balance",
    "removal_guard",
    "BillSplit",
    "Friend",
    "LedgerEntry",
    "Notification",
    "User",
    "parse_history",
    "FinanceService",
    "compute_shares",
    "set_manual_share",
    "toggle_participant",
]
