"""Notification actions and the checks done before resolving one."""

from decimal import Decimal
from typing import Literal
from urllib.parse import quote

from .exceptions import InvalidActionError
from .models import ZERO, Notification, round_cents, to_decimal

NotificationAction = Literal[
    "approve",
    "reject",
    "approve_friend",
    "already_paid",
    "received",
    "not_received",
    "pay_now",
]

ACTIONS_BY_TYPE: dict[str, tuple[NotificationAction, ...]] = {
    "FriendRequest": ("approve_friend",),
    "TransactionApproval": ("approve", "reject"),
    "PaymentConfirmation": ("received", "not_received"),
}

PAYMENT_ACTIONS: tuple[NotificationAction, ...] = ("pay_now", "already_paid")

# Handled on this side only; never sent to the backend
LOCAL_ACTIONS = frozenset({"pay_now"})


def available_actions(notification: Notification) -> tuple[NotificationAction, ...]:
    """Actions the user can take on a notification."""
    if notification.is_resolved:
        return ()
    if notification.type in ACTIONS_BY_TYPE:
        return ACTIONS_BY_TYPE[notification.type]
    if notification.amount and notification.amount > ZERO:
        return PAYMENT_ACTIONS
    return ()


def check_action(
    notification: Notification,
    action: NotificationAction,
    amount: Decimal | float | str | None = None,
) -> Decimal | None:
    """
    Validate an action and work out the amount to send with it.

    "already_paid" may carry a partial amount; it defaults to the
    notification's amount and must be positive.

    Returns:
        The amount to send, or None when the action carries no amount

    Raises:
        InvalidActionError: If the action doesn't apply or the amount is bad
    """
    allowed = available_actions(notification)
    if action not in allowed:
        if notification.is_resolved:
            raise InvalidActionError(f"Notification {notification.id} is already resolved")
        raise InvalidActionError(
            f"'{action}' is not available for a {notification.type} notification"
        )

    if action != "already_paid":
        return notification.amount

    raw = amount if amount is not None else notification.amount
    try:
        value = round_cents(to_decimal(raw)) if raw is not None else ZERO
    except ArithmeticError as e:
        raise InvalidActionError(f"Invalid amount entered: {raw}") from e
    if value <= ZERO:
        raise InvalidActionError("Invalid amount entered. It must be more than zero.")
    return value


def upi_payment_link(notification: Notification, payee_upi_id: str | None) -> str:
    """Deep link that opens a UPI payment app for this notification."""
    amount = notification.amount if notification.amount is not None else ZERO
    return (
        f"upi://pay?pa={quote(payee_upi_id or 'test@bank', safe='@.')}"
        f"&pn={quote(notification.sender_name)}"
        f"&am={amount:.2f}&cu=INR"
    )
