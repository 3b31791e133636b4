"""Service layer that composes the backend client, session store and core logic.

The split allocator and ledger aggregator stay pure; this module is where
their results gate real requests (unbalanced splits and friends with dues are
rejected before anything is sent).
"""

import logging
from decimal import Decimal
from typing import Any

from .clients.backend import BackendClient
from .clients.openai_client import InsightGenerator
from .config import Settings
from .db import Database
from .exceptions import (
    BackendAPIError,
    NotLoggedInError,
    OutstandingDuesError,
    UnbalancedSplitError,
)
from .ledger.aggregator import (
    agrees_with_backend,
    dues,
    filter_tab,
    net_balance,
    removal_guard,
)
from .models import (
    BackendResponse,
    BillSplit,
    DashboardStats,
    Friend,
    FriendLedger,
    FriendTransactionDraft,
    LedgerEntry,
    Notification,
    PlainTransactionDraft,
    SplitParticipantDraft,
    SplitTransactionDraft,
    User,
    parse_history,
)
from .notifications import LOCAL_ACTIONS, NotificationAction, check_action, upi_payment_link
from .profile import apply_updates, validate_updates

logger = logging.getLogger(__name__)


def _unwrap(response: BackendResponse, action: str) -> BackendResponse:
    """Raise if the backend reported a failure."""
    if not response.success:
        raise BackendAPIError(action, response.error or f"{action} failed")
    return response


class FinanceService:
    """Service for the signed-in user's finances."""

    def __init__(self, settings: Settings, database: Database):
        """Initialize the finance service."""
        self.settings = settings
        self.db = database

    def _client(self) -> BackendClient:
        return BackendClient(
            self.settings.backend_url, timeout=self.settings.request_timeout
        )

    # ========================================================================
    # Session
    # ========================================================================

    def current_user(self) -> User:
        """The signed-in user, from the local session."""
        user = self.db.get_session_user()
        if user is None:
            raise NotLoggedInError()
        return user

    def login(self, username_or_email: str, password: str) -> User:
        """Sign in and remember the session."""
        with self._client() as client:
            response = _unwrap(client.login(username_or_email, password), "login")

        user = User.model_validate(response.get("user"))
        self.db.save_session_user(user)
        logger.info(f"Logged in as {user.username} ({user.id})")
        return user

    def signup(self, username: str, email: str, password: str) -> User:
        """Create an account and sign in."""
        with self._client() as client:
            response = _unwrap(client.signup(username, email, password), "signup")

        user = User.model_validate(response.get("user"))
        self.db.save_session_user(user)
        logger.info(f"Signed up as {user.username} ({user.id})")
        return user

    def logout(self):
        """Forget the session."""
        self.db.clear_session()

    def update_profile(
        self, updates: dict[str, Any], current_password: str | None = None
    ) -> User:
        """
        Change profile fields and refresh the stored session.

        Args:
            updates: Wire-named fields to change
            current_password: Required for email, phone or password changes

        Returns:
            The updated user
        """
        user = self.current_user()
        clean = validate_updates(updates, current_password)

        with self._client() as client:
            _unwrap(
                client.update_profile(user.id, clean, current_password),
                "updateProfile",
            )

        updated = apply_updates(user, clean)
        self.db.save_session_user(updated)
        logger.info(f"Updated profile fields: {', '.join(sorted(clean))}")
        return updated

    def verify_account(self, phone_number: str, upi_id: str, current_password: str) -> User:
        """Attach a phone number and UPI ID and mark the account verified."""
        return self.update_profile(
            {"phoneNumber": phone_number, "upiId": upi_id, "isVerified": True},
            current_password,
        )

    # ========================================================================
    # Reads
    # ========================================================================

    def fetch_history(self) -> list[LedgerEntry]:
        """The user's transaction history."""
        user = self.current_user()
        with self._client() as client:
            response = _unwrap(
                client.fetch_transaction_history(user.id), "fetchTransactionHistory"
            )
        history = parse_history(response.get("history") or [])
        logger.debug(f"Fetched {len(history)} history entries")
        return history

    def fetch_friends(self) -> list[Friend]:
        """Friend summaries with the backend's balances."""
        user = self.current_user()
        with self._client() as client:
            response = _unwrap(client.fetch_friends(user.id), "fetchFriends")
        return [Friend.model_validate(f) for f in response.get("friends") or []]

    def fetch_dashboard(self) -> DashboardStats:
        """Dashboard aggregates."""
        user = self.current_user()
        with self._client() as client:
            response = _unwrap(client.fetch_dashboard(user.id), "fetchDashboardData")
        return DashboardStats.model_validate(response.get("data") or {})

    def fetch_notifications(self) -> list[Notification]:
        """Notifications, unresolved first."""
        user = self.current_user()
        with self._client() as client:
            response = _unwrap(
                client.fetch_notifications(user.id), "fetchNotifications"
            )
        notifications = [
            Notification.model_validate(n) for n in response.get("notifications") or []
        ]
        return sorted(notifications, key=lambda n: n.is_resolved)

    def search_users(self, query: str) -> list[dict[str, Any]]:
        """Search for users to connect with."""
        with self._client() as client:
            response = _unwrap(client.search_users(query), "searchUsers")
        return list(response.get("users") or [])

    def find_friend(self, name_or_id: str) -> Friend | None:
        """Find a friend by id or (case-insensitive) name."""
        needle = name_or_id.strip().lower()
        for friend in self.fetch_friends():
            if friend.id.lower() == needle or friend.name.lower() == needle:
                return friend
        return None

    # ========================================================================
    # Recording transactions
    # ========================================================================

    def _save(self, draft: PlainTransactionDraft | FriendTransactionDraft | SplitTransactionDraft):
        user = self.current_user()
        with self._client() as client:
            _unwrap(client.save_transaction(user.id, draft.to_wire()), "saveTransaction")
        logger.info(f"Saved {draft.type} transaction of {draft.amount:.2f}")

    def record_plain(self, draft: PlainTransactionDraft):
        """Record an income or expense."""
        self._save(draft)

    def record_friend(self, draft: FriendTransactionDraft):
        """Record money given, taken or paid back with a friend."""
        self._save(draft)

    def record_split(
        self,
        split: BillSplit,
        payer_id: str,
        category: str,
        subcategory: str = "",
        notes: str = "",
        mode: str = "Online",
    ) -> SplitTransactionDraft:
        """
        Submit a split bill.

        The split is checked before anything is sent: the shares must add up
        to the total within the configured tolerance and the payer must be one
        of the participants.

        Returns:
            The draft that was sent

        Raises:
            UnbalancedSplitError: If the shares don't add up or the payer is
                not a participant
        """
        tolerance = self.settings.split_balance_tolerance
        if split.total <= 0 or not split.is_balanced(tolerance):
            raise UnbalancedSplitError(split.total, split.allocated)
        if payer_id not in split.selected:
            raise UnbalancedSplitError(
                split.total,
                split.allocated,
                message=f"Payer {payer_id} is not part of the split",
            )

        draft = SplitTransactionDraft(
            amount=split.total,
            payer_id=payer_id,
            participants=[
                SplitParticipantDraft(user_id=pid, share=split.shares[pid])
                for pid in split.selected
            ],
            category=category,
            subcategory=subcategory,
            notes=notes,
            mode=mode,
        )
        self._save(draft)
        return draft

    # ========================================================================
    # Friends
    # ========================================================================

    def friend_ledger(
        self, friend: Friend, history: list[LedgerEntry] | None = None
    ) -> FriendLedger:
        """
        Drill-down view of everything with one friend.

        The balance is re-derived locally and compared with the backend's
        figure; a mismatch is logged but the backend stays authoritative.
        """
        user = self.current_user()
        if history is None:
            history = self.fetch_history()

        settled = self.settings.settled_statuses
        split_dues = self.settings.count_split_dues

        derived = net_balance(history, user.id, friend.id, settled, split_dues)
        if not agrees_with_backend(derived, friend.balance):
            logger.warning(
                f"Derived balance {derived:.2f} for {friend.name} differs from "
                f"backend balance {friend.balance:.2f}"
            )

        return FriendLedger(
            friend=friend,
            entries=filter_tab(history, user.id, friend.id, "Activity", split_dues),
            debts=filter_tab(history, user.id, friend.id, "I Owe", split_dues),
            credits=filter_tab(history, user.id, friend.id, "They Owe", split_dues),
            dues=dues(history, user.id, friend.id, settled, split_dues),
            derived_balance=derived,
        )

    def send_friend_request(self, target_username: str):
        """Ask another user to connect."""
        user = self.current_user()
        with self._client() as client:
            _unwrap(
                client.send_friend_request(user.id, target_username),
                "sendFriendRequest",
            )
        logger.info(f"Sent friend request to {target_username}")

    def remove_friend(self, friend_id: str) -> Friend:
        """
        Disconnect from a friend with no outstanding dues.

        Raises:
            OutstandingDuesError: If anything is still owed either way
            BackendAPIError: If the friend is unknown or removal fails
        """
        user = self.current_user()
        friend = next((f for f in self.fetch_friends() if f.id == friend_id), None)
        if friend is None:
            raise BackendAPIError("removeFriend", f"No friend with id {friend_id}")

        if not removal_guard(friend.balance):
            raise OutstandingDuesError(friend.name, friend.balance)

        with self._client() as client:
            _unwrap(client.remove_friend(user.id, friend.id), "removeFriend")
        logger.info(f"Removed friend {friend.name} ({friend.id})")
        return friend

    # ========================================================================
    # Notifications
    # ========================================================================

    def resolve_notification(
        self,
        notification: Notification,
        action: NotificationAction,
        amount: Decimal | float | str | None = None,
    ) -> str | None:
        """
        Act on a notification.

        Returns:
            A UPI payment link for "pay_now" (nothing is sent), else None
        """
        user = self.current_user()
        value = check_action(notification, action, amount)

        if action in LOCAL_ACTIONS:
            return upi_payment_link(notification, user.upi_id)

        with self._client() as client:
            _unwrap(
                client.handle_action(
                    user.id,
                    notification.id,
                    action,
                    notification.transaction_id or "",
                    float(value) if value is not None else None,
                ),
                "handleAction",
            )
        logger.info(f"Resolved notification {notification.id} with '{action}'")
        return None

    # ========================================================================
    # Insight
    # ========================================================================

    def generate_insight(self, stats: DashboardStats | None = None) -> str | None:
        """One-line AI insight, or None when no OpenAI key is configured."""
        if not self.settings.openai_api_key:
            logger.debug("No OpenAI key configured; skipping insight")
            return None

        user = self.current_user()
        if stats is None:
            stats = self.fetch_dashboard()

        generator = InsightGenerator(
            api_key=self.settings.openai_api_key, model=self.settings.insight_model
        )
        return generator.generate(stats, user.budget)
