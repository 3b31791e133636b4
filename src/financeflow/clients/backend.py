"""Client for the spreadsheet-backed finance web app."""

import logging
from typing import Any

import httpx

from ..models import BackendResponse

logger = logging.getLogger(__name__)

CONNECTION_ERROR = (
    "Connection to finance cloud failed. Check your internet or script URL."
)


class BackendClient:
    """
    Client for the finance backend's single RPC endpoint.

    Every call POSTs {"action": ..., **fields} and gets back
    {"success": bool, "error"?: str, ...payload}. Transport failures are
    turned into an unsuccessful response rather than raised; nothing is
    retried.
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 30.0,
        transport: httpx.BaseTransport | None = None,
    ):
        """Initialize the backend client."""
        self.base_url = base_url
        # The web app answers through a redirect to its content host
        self.client = httpx.Client(
            timeout=timeout,
            follow_redirects=True,
            transport=transport,
        )

    def close(self):
        """Close the HTTP client."""
        self.client.close()

    def __enter__(self):
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit."""
        self.close()

    def _request(self, name: str, **fields: Any) -> BackendResponse:
        """Send one action and parse the envelope."""
        body = {"action": name}
        body.update({key: value for key, value in fields.items() if value is not None})

        try:
            response = self.client.post(self.base_url, json=body)
            response.raise_for_status()
            result = BackendResponse.model_validate(response.json())
        except (httpx.HTTPError, ValueError) as e:
            logger.error(f"Backend action '{name}' failed: {e}")
            return BackendResponse(success=False, error=CONNECTION_ERROR)

        if not result.success:
            logger.info(f"Backend rejected '{name}': {result.error}")
        return result

    # ========================================================================
    # Account
    # ========================================================================

    def login(self, username_or_email: str, password: str) -> BackendResponse:
        """Sign in; payload "user"."""
        return self._request(
            "login", usernameOrEmail=username_or_email, password=password
        )

    def signup(self, username: str, email: str, password: str) -> BackendResponse:
        """Create an account; payload "user"."""
        return self._request(
            "signup", username=username, email=email, password=password
        )

    def update_profile(
        self,
        user_id: str,
        updates: dict[str, Any],
        current_password: str | None = None,
    ) -> BackendResponse:
        """Update profile fields. Sensitive fields need the current password."""
        return self._request(
            "updateProfile",
            userId=user_id,
            updates=updates,
            currentPassword=current_password,
        )

    def search_users(self, query: str) -> BackendResponse:
        """Search users by name or email; payload "users"."""
        return self._request("searchUsers", query=query)

    # ========================================================================
    # Transactions
    # ========================================================================

    def save_transaction(
        self, user_id: str, transaction: dict[str, Any]
    ) -> BackendResponse:
        """Record a plain, friend or split transaction."""
        return self._request("saveTransaction", userId=user_id, transaction=transaction)

    def fetch_dashboard(self, user_id: str) -> BackendResponse:
        """Dashboard aggregates; payload "data"."""
        return self._request("fetchDashboardData", userId=user_id)

    def fetch_transaction_history(self, user_id: str) -> BackendResponse:
        """Full transaction history; payload "history"."""
        return self._request("fetchTransactionHistory", userId=user_id)

    # ========================================================================
    # Friends & notifications
    # ========================================================================

    def fetch_friends(self, user_id: str) -> BackendResponse:
        """Friend summaries with balances; payload "friends"."""
        return self._request("fetchFriends", userId=user_id)

    def send_friend_request(self, user_id: str, target_username: str) -> BackendResponse:
        """Ask another user to connect."""
        return self._request(
            "sendFriendRequest", userId=user_id, targetUsername=target_username
        )

    def remove_friend(self, user_id: str, friend_id: str) -> BackendResponse:
        """Disconnect from a friend."""
        return self._request("removeFriend", userId=user_id, friendId=friend_id)

    def fetch_notifications(self, user_id: str) -> BackendResponse:
        """Pending actions and messages; payload "notifications"."""
        return self._request("fetchNotifications", userId=user_id)

    def handle_action(
        self,
        user_id: str,
        notification_id: str,
        action: str,
        transaction_id: str = "",
        amount: float | None = None,
    ) -> BackendResponse:
        """
        Resolve a notification, optionally with a (partial) amount.

        The script routes on the notification action itself: the "action"
        field carries e.g. "approve" rather than "handleAction".
        """
        return self._request(
            "handleAction",
            userId=user_id,
            notificationId=notification_id,
            action=action,
            transactionId=transaction_id,
            amount=amount,
        )
