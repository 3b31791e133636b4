"""Pydantic domain models for FinanceFlow."""

from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import Annotated, Any, Literal

from pydantic import (
    BaseModel,
    BeforeValidator,
    ConfigDict,
    Field,
    PlainSerializer,
    TypeAdapter,
    model_validator,
)
from pydantic.alias_generators import to_camel

CENT = Decimal("0.01")
ZERO = Decimal("0")


def to_decimal(value: Any) -> Decimal:
    """
    Convert a number coming from user input or the backend to Decimal.

    Floats go through their string form so 33.33 stays 33.33.
    """
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        return Decimal(str(value))
    return Decimal(value)


def round_cents(amount: Decimal) -> Decimal:
    """Round to 2 decimal places using ROUND_HALF_UP."""
    return amount.quantize(CENT, rounding=ROUND_HALF_UP)


def _money_or_zero(value: Any) -> Any:
    # Empty spreadsheet cells arrive as "" or null
    if value is None or value == "":
        return ZERO
    if isinstance(value, float):
        return Decimal(str(value))
    return value


def _money_or_none(value: Any) -> Any:
    if value is None or value == "":
        return None
    if isinstance(value, float):
        return Decimal(str(value))
    return value


def _blank_to_none(value: Any) -> Any:
    return None if value == "" else value


Money = Annotated[
    Decimal,
    BeforeValidator(_money_or_zero),
    PlainSerializer(float, return_type=float, when_used="json"),
]

OptionalMoney = Annotated[
    Decimal | None,
    BeforeValidator(_money_or_none),
    PlainSerializer(
        lambda v: None if v is None else float(v),
        return_type=float | None,
        when_used="json",
    ),
]

OptionalStr = Annotated[str | None, BeforeValidator(_blank_to_none)]

# Wire vocabularies (values are exactly what the backend stores)
PaymentMode = Literal["Cash", "Online"]
TransactionType = Literal[
    "Income",
    "Expense",
    "Money Given",
    "Money Taken",
    "He Paid Back",
    "I Paid Back",
    "Split",
]
FriendTransactionType = Literal[
    "Money Given", "Money Taken", "He Paid Back", "I Paid Back"
]
TransactionStatus = Literal["Pending", "Approved", "Rejected", "Completed", "Paid"]
NotificationType = Literal[
    "FriendRequest",
    "FriendRequestRejected",
    "TransactionApproval",
    "PaymentConfirmation",
    "Reminder",
    "System",
]
AppMode = Literal["light", "dark"]

# Local vocabularies
SplitMode = Literal["Equal", "Custom"]
EntryClass = Literal["Debt", "Credit", "Neutral"]


class WireModel(BaseModel):
    """Base for records exchanged with the backend (camelCase on the wire)."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_wire(self) -> dict[str, Any]:
        """Dump to a JSON-ready dict using wire field names."""
        return self.model_dump(by_alias=True, mode="json", exclude_none=True)


# ============================================================================
# Backend Records
# ============================================================================


class Category(WireModel):
    """A user-defined spending category."""

    name: str
    subcategories: list[str] = Field(default_factory=list)


class User(WireModel):
    """The signed-in user's profile."""

    id: str
    username: str
    email: str = ""
    photo_url: OptionalStr = Field(default=None, alias="photoURL")
    phone_number: OptionalStr = None
    upi_id: OptionalStr = None
    is_verified: bool = False
    budget: Money = ZERO
    theme: str = "indigo"
    mode: AppMode = "light"
    style_preset: str = "modern"
    categories: list[Category] = Field(default_factory=list)

    def find_category(self, name: str) -> Category | None:
        """Look up a category by name (case-insensitive)."""
        for category in self.categories:
            if category.name.lower() == name.lower():
                return category
        return None


class Friend(WireModel):
    """A friend summary with the backend's authoritative balance."""

    id: str
    name: str
    email: OptionalStr = None
    photo_url: OptionalStr = Field(default=None, alias="photoURL")
    is_manual: bool = False
    status: Literal["Settled", "Pending"] = "Settled"
    balance: Money = ZERO  # positive = friend owes user


class Notification(WireModel):
    """A pending action or message for the user."""

    id: str
    target_user_id: str = ""
    sender_id: str = ""
    sender_name: str = ""
    type: NotificationType = "System"
    message: str = ""
    transaction_id: OptionalStr = None
    amount: OptionalMoney = None
    remaining_amount: OptionalMoney = None
    timestamp: datetime | None = None
    is_read: bool = False
    is_resolved: bool = False


class DashboardStats(WireModel):
    """Aggregates computed by the backend for the dashboard."""

    cash: Money = ZERO
    online: Money = ZERO
    pending: Money = ZERO
    incoming: Money = ZERO
    outgoing: Money = ZERO
    money_given: Money = ZERO
    money_taken: Money = ZERO

    @property
    def liquid(self) -> Decimal:
        """Total liquid assets (cash + online)."""
        return self.cash + self.online


class BackendResponse(BaseModel):
    """Envelope returned by every backend action."""

    model_config = ConfigDict(extra="allow")

    success: bool = False
    error: str | None = None

    def get(self, key: str, default: Any = None) -> Any:
        """Read a payload field (e.g. "user", "history", "friends")."""
        extra = self.model_extra or {}
        return extra.get(key, default)


# ============================================================================
# Ledger Entries
# ============================================================================


class _LedgerEntryBase(WireModel):
    """Fields shared by every transaction kind."""

    id: str
    creator_id: str
    amount: Money
    paid_amount: Money = ZERO
    mode: PaymentMode = "Online"
    category: str = ""
    subcategory: OptionalStr = None
    notes: str = ""
    receipt_url: OptionalStr = Field(default=None, alias="receiptURL")
    timestamp: datetime
    status: TransactionStatus = "Pending"

    @property
    def remaining(self) -> Decimal:
        """Unpaid part of the amount, never negative."""
        return max(ZERO, self.amount - self.paid_amount)


class IncomeEntry(_LedgerEntryBase):
    type: Literal["Income"] = "Income"


class ExpenseEntry(_LedgerEntryBase):
    type: Literal["Expense"] = "Expense"


class MoneyGivenEntry(_LedgerEntryBase):
    """The creator lent money to `friend_id`."""

    type: Literal["Money Given"] = "Money Given"
    friend_id: str


class MoneyTakenEntry(_LedgerEntryBase):
    """The creator borrowed money from `friend_id`."""

    type: Literal["Money Taken"] = "Money Taken"
    friend_id: str


class RepaymentEntry(_LedgerEntryBase):
    """A settlement between the creator and `friend_id`."""

    type: Literal["He Paid Back", "I Paid Back"]
    friend_id: str


class SplitShare(WireModel):
    """One participant's part of a split bill."""

    user_id: str
    name: str = ""
    share: Money
    paid_amount: Money = ZERO
    has_paid: bool = False
    is_confirmed: bool = False

    @property
    def remaining(self) -> Decimal:
        return max(ZERO, self.share - self.paid_amount)


class SplitEntry(_LedgerEntryBase):
    """A bill paid by `payer_id` and divided among participants."""

    type: Literal["Split"] = "Split"
    payer_id: str
    participants: list[SplitShare] = Field(default_factory=list)

    def share_of(self, user_id: str) -> SplitShare | None:
        for participant in self.participants:
            if participant.user_id == user_id:
                return participant
        return None


FriendEntry = MoneyGivenEntry | MoneyTakenEntry | RepaymentEntry

LedgerEntry = Annotated[
    IncomeEntry
    | ExpenseEntry
    | MoneyGivenEntry
    | MoneyTakenEntry
    | RepaymentEntry
    | SplitEntry,
    Field(discriminator="type"),
]

_HISTORY_ADAPTER: TypeAdapter[list[LedgerEntry]] = TypeAdapter(list[LedgerEntry])


def parse_history(rows: list[dict[str, Any]]) -> list[LedgerEntry]:
    """Parse raw backend history rows into typed ledger entries."""
    return _HISTORY_ADAPTER.validate_python(rows)


# ============================================================================
# New Transaction Drafts
# ============================================================================


class _DraftBase(WireModel):
    amount: Money = Field(gt=0)
    mode: PaymentMode = "Online"
    notes: str = ""
    timestamp: datetime = Field(default_factory=lambda: datetime.now().astimezone())


class PlainTransactionDraft(_DraftBase):
    """An income or expense that only affects the user."""

    type: Literal["Income", "Expense"]
    category: str
    subcategory: str = ""


class FriendTransactionDraft(_DraftBase):
    """Money lent, borrowed or repaid between the user and one friend."""

    type: FriendTransactionType
    friend_id: str
    category: str = "Personal"


class SplitParticipantDraft(WireModel):
    user_id: str
    share: Money


class SplitTransactionDraft(_DraftBase):
    """A bill divided among participants."""

    type: Literal["Split"] = "Split"
    payer_id: str
    participants: list[SplitParticipantDraft]
    category: str
    subcategory: str = ""


# ============================================================================
# Split Allocation State
# ============================================================================


class Participant(BaseModel):
    """Someone who can be billed in a split."""

    id: str
    display_name: str


class BillSplit(BaseModel):
    """
    State of a bill being split.

    Passed into and returned from the allocator functions; never mutated in
    place. `locked` is ordered by lock time, earliest first.
    """

    self_id: str
    total: Decimal = Field(default=ZERO, ge=0)
    mode: SplitMode = "Equal"
    selected: list[str] = Field(default_factory=list)
    shares: dict[str, Decimal] = Field(default_factory=dict)
    locked: list[str] = Field(default_factory=list)

    @model_validator(mode="after")
    def _include_self(self) -> "BillSplit":
        if self.self_id not in self.selected:
            self.selected.insert(0, self.self_id)
        return self

    @property
    def allocated(self) -> Decimal:
        """Sum of the selected participants' shares."""
        return sum((self.shares.get(pid, ZERO) for pid in self.selected), ZERO)

    def is_balanced(self, tolerance: Decimal) -> bool:
        """Whether the shares add up to the total within tolerance."""
        return abs(self.allocated - self.total) < tolerance


# ============================================================================
# Ledger Views
# ============================================================================


class FriendBalance(BaseModel):
    """Derived net balance with one friend (positive = friend owes user)."""

    friend_id: str
    net_balance: Decimal


class FriendDues(BaseModel):
    """Outstanding totals in each direction."""

    i_owe: Decimal = ZERO
    they_owe: Decimal = ZERO

    @property
    def net(self) -> Decimal:
        return round_cents(self.they_owe - self.i_owe)


class FriendLedger(BaseModel):
    """Drill-down view of the ledger with one friend."""

    friend: Friend
    entries: list[LedgerEntry]
    debts: list[LedgerEntry]
    credits: list[LedgerEntry]
    dues: FriendDues
    derived_balance: Decimal

    @property
    def reported_balance(self) -> Decimal:
        return self.friend.balance


class CashFlowDay(BaseModel):
    """Money in and out on one day."""

    day: date
    inflow: Decimal = ZERO
    outflow: Decimal = ZERO
