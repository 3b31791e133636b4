"""Interactive pickers and confirmations for the terminal."""

import logging
from typing import Any, Generic, TypeVar

from prompt_toolkit import PromptSession
from prompt_toolkit.completion import Completer, Completion
from prompt_toolkit.document import Document

from .models import Category, Friend

logger = logging.getLogger(__name__)

T = TypeVar("T")


def fuzzy_match(query: str, text: str) -> bool:
    """
    All characters in query must appear in order in text.

    Example:
        query="rh" matches "Rahul"
        query="fdo" matches "Food > Dining Out"
    """
    query_idx = 0
    for char in text:
        if query_idx < len(query) and char == query[query_idx]:
            query_idx += 1
    return query_idx == len(query)


class ChoiceCompleter(Completer, Generic[T]):
    """Fuzzy search completer over labelled choices."""

    def __init__(self, choices: dict[str, T]):
        """Initialize the completer with label -> value choices."""
        self.choices = choices

    def get_completions(self, document: Document, complete_event: Any):
        """Get fuzzy-matched completions."""
        query = document.text.lower()

        for label in self.choices:
            if query and not fuzzy_match(query, label.lower()):
                continue
            yield Completion(
                text=label,
                start_position=-len(document.text),
                display=label,
            )

    def lookup(self, text: str) -> T | None:
        """Resolve typed text to a choice (exact label, case-insensitive)."""
        if text in self.choices:
            return self.choices[text]
        for label, value in self.choices.items():
            if label.lower() == text.strip().lower():
                return value
        return None


def _pick(completer: ChoiceCompleter[T], message: str, kind: str) -> T | None:
    """Prompt until a valid choice is typed; empty input or Ctrl+C skips."""
    session: PromptSession[str] = PromptSession(completer=completer)

    try:
        while True:
            result = session.prompt(message, complete_while_typing=True)
            if not result:
                return None

            value = completer.lookup(result)
            if value is not None:
                return value

            print(f"❌ Unknown {kind}. Pick from the list or press Tab to complete.")
    except KeyboardInterrupt:
        print("\n⏭️  Skipped")
        return None
    except EOFError:
        return None


def friend_label(friend: Friend) -> str:
    """Display label for a friend in pickers."""
    suffix = " (manual)" if friend.is_manual else ""
    return f"{friend.name}{suffix}"


def select_friend_interactive(friends: list[Friend]) -> Friend | None:
    """
    Pick a friend with fuzzy search.

    Args:
        friends: Friends to choose from

    Returns:
        The chosen friend, or None to skip
    """
    if not friends:
        print("No friends yet. Add one with 'financeflow friends add'.")
        return None

    print("\n👥 Choose a friend")
    print("   Type to search, press Enter to confirm, Ctrl+C to skip\n")

    completer = ChoiceCompleter({friend_label(f): f for f in friends})
    friend = _pick(completer, "Friend: ", "friend")
    if friend:
        logger.info(f"User selected friend: {friend.name}")
    return friend


def select_category_interactive(
    categories: list[Category], description: str
) -> tuple[str, str] | None:
    """
    Pick a category (and optional subcategory) with fuzzy search.

    Subcategories are offered as "Category > Subcategory".

    Returns:
        (category, subcategory) with "" for no subcategory, or None to skip
    """
    choices: dict[str, tuple[str, str]] = {}
    for category in categories:
        choices[category.name] = (category.name, "")
        for sub in category.subcategories:
            choices[f"{category.name} > {sub}"] = (category.name, sub)

    if not choices:
        print("No categories set up. Add one with 'financeflow profile add-category'.")
        return None

    print(f"\n📝 Categorize: {description}")
    print("   Type to search, press Enter to confirm, Ctrl+C to skip\n")

    selection = _pick(ChoiceCompleter(choices), "Category: ", "category")
    if selection:
        logger.info(f"User selected category: {' > '.join(filter(None, selection))}")
    return selection


def confirm_shared_transaction(summary: str) -> bool:
    """
    Two-step confirmation for records that affect a friend's balance.

    The first answer reviews the details; the second commits.
    """
    print(f"\n🤝 {summary}")

    response = input("   Details correct? [y/N] ").strip().lower()
    if response not in ("y", "yes"):
        return False

    response = input("   This will notify the other person. Send it? [y/N] ").strip().lower()
    return response in ("y", "yes")
