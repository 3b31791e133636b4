"""Profile update rules: sensitive fields, appearance and categories."""

import re
from typing import Any

from .exceptions import ProfileUpdateError
from .models import ZERO, Category, User, round_cents, to_decimal

THEMES = (
    "indigo",
    "rose",
    "emerald",
    "amber",
    "violet",
    "sky",
    "cyan",
    "fuchsia",
    "pink",
    "orange",
    "lime",
    "teal",
    "slate",
    "zinc",
    "neutral",
)

STYLE_PRESETS = {
    "modern": "Modern",
    "glass": "Glass",
    "void": "Void",
    "cyber": "Cyber",
    "neumorphic": "Soft 3D",
    "pastel": "Pastel",
    "midnight": "Midnight",
    "brutalist": "Brutal",
    "retro": "Retro",
    "aurora": "Aurora",
    "deepsea": "Ocean",
    "sunset": "Warm",
    "forest": "Forest",
    "monochrome": "Mono",
    "royal": "Royal",
    "paper": "Paper",
    "neon": "Glow",
    "soft": "Focus",
    "quartz": "Quartz",
    "obsidian": "Stone",
}

APP_MODES = ("light", "dark")

# Changing any of these requires the current password
SENSITIVE_KEYS = frozenset({"email", "password", "phoneNumber"})

UPDATABLE_KEYS = frozenset(
    {
        "username",
        "email",
        "password",
        "phoneNumber",
        "upiId",
        "budget",
        "photoURL",
        "theme",
        "mode",
        "stylePreset",
        "categories",
        "isVerified",
    }
)

_PHONE_RE = re.compile(r"\d{10}")
_EMAIL_RE = re.compile(r"[^@\s]+@[^@\s]+\.[^@\s]+")
_UPI_RE = re.compile(r"[\w.\-]+@[\w.\-]+")


def requires_password(updates: dict[str, Any]) -> bool:
    """Whether an update touches a sensitive field."""
    return any(key in SENSITIVE_KEYS for key in updates)


def validate_updates(
    updates: dict[str, Any], current_password: str | None = None
) -> dict[str, Any]:
    """
    Check a profile update and convert it to wire values.

    Args:
        updates: Wire-named fields to change
        current_password: Needed when a sensitive field is included

    Returns:
        JSON-ready update dict

    Raises:
        ProfileUpdateError: If a field is unknown or a value is invalid
    """
    if not updates:
        raise ProfileUpdateError("Nothing to update")

    unknown = sorted(set(updates) - UPDATABLE_KEYS)
    if unknown:
        raise ProfileUpdateError(f"Unknown profile field(s): {', '.join(unknown)}")

    if requires_password(updates) and not current_password:
        raise ProfileUpdateError(
            "Confirm your current password to change email, phone or password"
        )

    clean: dict[str, Any] = {}
    for key, value in updates.items():
        clean[key] = _validate_field(key, value)
    return clean


def _validate_field(key: str, value: Any) -> Any:
    if key in ("username", "password") and not str(value).strip():
        raise ProfileUpdateError(f"{key} cannot be empty")

    if key == "email" and not _EMAIL_RE.fullmatch(str(value)):
        raise ProfileUpdateError(f"Invalid email: {value}")

    if key == "phoneNumber" and not _PHONE_RE.fullmatch(str(value)):
        raise ProfileUpdateError("Phone number must be 10 digits")

    if key == "upiId" and not _UPI_RE.fullmatch(str(value)):
        raise ProfileUpdateError(f"Invalid UPI ID: {value} (expected name@bank)")

    if key == "theme" and value not in THEMES:
        raise ProfileUpdateError(f"Unknown theme '{value}'")

    if key == "stylePreset" and value not in STYLE_PRESETS:
        raise ProfileUpdateError(f"Unknown style preset '{value}'")

    if key == "mode" and value not in APP_MODES:
        raise ProfileUpdateError("Mode must be 'light' or 'dark'")

    if key == "budget":
        try:
            budget = round_cents(to_decimal(value))
        except ArithmeticError as e:
            raise ProfileUpdateError(f"Invalid budget: {value}") from e
        if budget < ZERO:
            raise ProfileUpdateError("Budget cannot be negative")
        return float(budget)

    if key == "categories":
        return [Category.model_validate(c).to_wire() for c in value]

    if key == "isVerified":
        return bool(value)

    return value


def apply_updates(user: User, updates: dict[str, Any]) -> User:
    """Local copy of the user after a successful update (password never kept)."""
    data = user.model_dump(by_alias=True, mode="json")
    data.update({key: value for key, value in updates.items() if key != "password"})
    return User.model_validate(data)


# ============================================================================
# Category helpers
# ============================================================================


def add_category(categories: list[Category], name: str) -> list[Category]:
    """Append a new category."""
    name = name.strip()
    if not name:
        raise ProfileUpdateError("Category name cannot be empty")
    if _find(categories, name) is not None:
        raise ProfileUpdateError(f"Category '{name}' already exists")
    return [*categories, Category(name=name)]


def add_subcategory(
    categories: list[Category], category_name: str, subcategory: str
) -> list[Category]:
    """Append a subcategory to an existing category."""
    subcategory = subcategory.strip()
    index = _find(categories, category_name)
    if index is None:
        raise ProfileUpdateError(f"No category named '{category_name}'")
    if not subcategory:
        raise ProfileUpdateError("Subcategory name cannot be empty")

    category = categories[index]
    if subcategory.lower() in (s.lower() for s in category.subcategories):
        raise ProfileUpdateError(
            f"'{subcategory}' already exists in '{category.name}'"
        )

    updated = category.model_copy(
        update={"subcategories": [*category.subcategories, subcategory]}
    )
    return [*categories[:index], updated, *categories[index + 1 :]]


def remove_category(categories: list[Category], name: str) -> list[Category]:
    """Drop a category and its subcategories."""
    index = _find(categories, name)
    if index is None:
        raise ProfileUpdateError(f"No category named '{name}'")
    return [*categories[:index], *categories[index + 1 :]]


def _find(categories: list[Category], name: str) -> int | None:
    for i, category in enumerate(categories):
        if category.name.lower() == name.strip().lower():
            return i
    return None
