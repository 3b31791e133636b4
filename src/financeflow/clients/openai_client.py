"""OpenAI client for one-line spending insights."""

import logging
from decimal import Decimal

from openai import OpenAI, OpenAIError

from ..exceptions import OpenAIAPIError
from ..models import DashboardStats

logger = logging.getLogger(__name__)

FALLBACK_INSIGHT = "Keep logging your spending to unlock insights."


def first_line(text: str | None) -> str:
    """Reduce a model reply to its first non-empty line."""
    for line in (text or "").splitlines():
        stripped = line.strip().strip('"')
        if stripped:
            return stripped
    return FALLBACK_INSIGHT


class InsightGenerator:
    """GPT-based one-line insight for the dashboard."""

    def __init__(self, api_key: str, model: str = "gpt-4o-mini"):
        """Initialize the generator."""
        self.client = OpenAI(api_key=api_key)
        self.model = model

    def generate(self, stats: DashboardStats, budget: Decimal) -> str:
        """
        Generate a short, friendly insight about the user's money.

        Args:
            stats: Dashboard aggregates from the backend
            budget: Monthly spending limit (0 = not set)

        Returns:
            A single line of text
        """
        budget_text = f"{budget:.2f}" if budget > 0 else "not set"

        system_prompt = """You are a friendly personal-finance coach. Given a user's money summary, reply with ONE short sentence (max 20 words) of practical, encouraging advice. No lists, no greetings, plain language a kid could understand."""

        user_prompt = f"""Money summary (INR):
- Cash: {stats.cash:.2f}
- Online: {stats.online:.2f}
- Pending with friends: {stats.pending:.2f}
- Money in: {stats.incoming:.2f}
- Money out: {stats.outgoing:.2f}
- Lent to friends: {stats.money_given:.2f}
- Borrowed from friends: {stats.money_taken:.2f}
- Monthly budget: {budget_text}"""

        try:
            response = self.client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": system_prompt},
                    {"role": "user", "content": user_prompt},
                ],
                temperature=0.7,
                max_tokens=60,
            )
        except OpenAIError as e:
            raise OpenAIAPIError(f"Insight request failed: {e}") from e

        insight = first_line(response.choices[0].message.content)
        logger.info(f"Generated insight: {insight}")
        return insight
