"""Configuration management for FinanceFlow."""

from decimal import Decimal
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from .exceptions import ConfigurationError
from .ledger.aggregator import DEFAULT_SETTLED_STATUSES
from .models import TransactionStatus
from .split.allocator import DEFAULT_BALANCE_TOLERANCE


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Finance backend (spreadsheet web app URL)
    backend_url: str
    request_timeout: float = 30.0

    # OpenAI API (optional, only used for dashboard insights)
    openai_api_key: str | None = None
    insight_model: str = "gpt-4o-mini"

    # Split settings
    split_balance_tolerance: Decimal = Field(default=DEFAULT_BALANCE_TOLERANCE, gt=0)

    # Ledger settings
    settled_statuses: list[TransactionStatus] = Field(
        default_factory=lambda: sorted(DEFAULT_SETTLED_STATUSES)
    )
    count_split_dues: bool = False  # Include splits in friend balances

    # Session database path
    database_path: Path = Path.home() / ".financeflow" / "financeflow.db"

    def __init__(self, **kwargs):
        """Initialize settings and create database directory if needed."""
        super().__init__(**kwargs)
        self.database_path.parent.mkdir(parents=True, exist_ok=True)


def load_settings() -> Settings:
    """Load application settings from environment variables."""
    try:
        return Settings()
    except Exception as e:
        raise ConfigurationError(
            f"Failed to load settings. Make sure you have created a .env file "
            f"with BACKEND_URL set. See .env.example for reference.\n"
            f"Error: {e}"
        ) from e
