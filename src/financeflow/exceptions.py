"""Custom exceptions for FinanceFlow."""

from decimal import Decimal


class FinanceFlowError(Exception):
    """Base exception for all FinanceFlow errors."""

    pass


class ConfigurationError(FinanceFlowError, ValueError):
    """Raised when configuration is invalid or missing."""

    pass


class NotLoggedInError(FinanceFlowError):
    """Raised when a command needs a signed-in user and there is no session."""

    def __init__(self, message: str | None = None):
        super().__init__(message or "Not logged in. Run `financeflow login` first.")


class ValidationError(FinanceFlowError):
    """Base class for requests rejected locally before reaching the backend."""

    pass


class UnbalancedSplitError(ValidationError):
    """Raised when split shares don't add up to the bill total."""

    def __init__(self, total: Decimal, allocated: Decimal, message: str | None = None):
        self.total = total
        self.allocated = allocated
        super().__init__(
            message
            or f"Split shares add up to {allocated:.2f} but the bill total is {total:.2f}"
        )


class OutstandingDuesError(ValidationError):
    """Raised when removing a friend who still has a nonzero balance."""

    def __init__(self, friend_name: str, balance: Decimal):
        self.friend_name = friend_name
        self.balance = balance
        super().__init__(
            f"Cannot remove {friend_name}: balance is {balance:.2f}. Settle first!"
        )


class ProfileUpdateError(ValidationError):
    """Raised when a profile update is malformed."""

    pass


class InvalidActionError(ValidationError):
    """Raised when a notification action is not valid for the notification."""

    pass


class APIError(FinanceFlowError):
    """Base class for API-related errors."""

    pass


class BackendAPIError(APIError):
    """Raised when the finance backend reports a failure."""

    def __init__(self, action: str, message: str):
        self.action = action
        super().__init__(message)


class OpenAIAPIError(APIError):
    """Raised when OpenAI API request fails."""

    pass
