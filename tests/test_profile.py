"""Tests for profile update rules and category helpers."""

from decimal import Decimal

import pytest

from financeflow.exceptions import ProfileUpdateError
from financeflow.models import Category, User
from financeflow.profile import (
    STYLE_PRESETS,
    THEMES,
    add_category,
    add_subcategory,
    apply_updates,
    remove_category,
    requires_password,
    validate_updates,
)


@pytest.fixture
def categories():
    return [
        Category(name="Food", subcategories=["Groceries", "Dining Out"]),
        Category(name="Travel"),
    ]


class TestValidateUpdates:
    """Tests for validating profile changes."""

    @pytest.mark.parametrize("key", ["email", "password", "phoneNumber"])
    def test_sensitive_fields_need_password(self, key):
        assert requires_password({key: "x"})
        with pytest.raises(ProfileUpdateError, match="current password"):
            validate_updates({key: "9876543210"})

    def test_appearance_needs_no_password(self):
        assert not requires_password({"theme": "rose", "mode": "dark"})
        assert validate_updates({"theme": "rose", "mode": "dark"}) == {
            "theme": "rose",
            "mode": "dark",
        }

    def test_vocabularies(self):
        assert len(THEMES) == 15
        assert len(STYLE_PRESETS) == 20

    @pytest.mark.parametrize(
        "updates",
        [
            {"theme": "purple"},
            {"stylePreset": "vaporwave"},
            {"mode": "dim"},
            {"budget": "-1"},
            {"budget": "lots"},
            {"upiId": "not-a-upi"},
            {"username": "  "},
            {"nickname": "Ash"},
            {},
        ],
    )
    def test_rejected(self, updates):
        with pytest.raises(ProfileUpdateError):
            validate_updates(updates)

    @pytest.mark.parametrize("phone", ["12345", "98765432101", "98765-4321"])
    def test_phone_must_be_ten_digits(self, phone):
        with pytest.raises(ProfileUpdateError, match="10 digits"):
            validate_updates({"phoneNumber": phone}, current_password="pw")

    def test_invalid_email(self):
        with pytest.raises(ProfileUpdateError, match="Invalid email"):
            validate_updates({"email": "asha-at-example"}, current_password="pw")

    def test_values_converted_for_the_wire(self, categories):
        result = validate_updates(
            {"budget": Decimal("1200.456"), "categories": categories, "isVerified": 1}
        )

        assert result == {
            "budget": 1200.46,
            "categories": [
                {"name": "Food", "subcategories": ["Groceries", "Dining Out"]},
                {"name": "Travel", "subcategories": []},
            ],
            "isVerified": True,
        }


class TestApplyUpdates:
    """Tests for the local copy after an update."""

    def test_merges_and_drops_password(self):
        user = User(id="U1", username="asha")
        updated = apply_updates(
            user, {"password": "new-secret", "phoneNumber": "9876543210", "stylePreset": "glass"}
        )

        assert updated.phone_number == "9876543210"
        assert updated.style_preset == "glass"
        assert "password" not in updated.model_dump(by_alias=True)
        assert user.phone_number is None


class TestCategories:
    """Tests for the category helpers."""

    def test_add_category(self, categories):
        result = add_category(categories, "  Bills ")

        assert [c.name for c in result] == ["Food", "Travel", "Bills"]
        assert len(categories) == 2

    def test_add_duplicate_category(self, categories):
        with pytest.raises(ProfileUpdateError, match="already exists"):
            add_category(categories, "food")

    def test_add_empty_category(self, categories):
        with pytest.raises(ProfileUpdateError):
            add_category(categories, " ")

    def test_add_subcategory(self, categories):
        result = add_subcategory(categories, "travel", "Flights")

        assert result[1].subcategories == ["Flights"]
        assert categories[1].subcategories == []

    def test_add_duplicate_subcategory(self, categories):
        with pytest.raises(ProfileUpdateError, match="already exists"):
            add_subcategory(categories, "Food", "groceries")

    def test_add_subcategory_unknown_category(self, categories):
        with pytest.raises(ProfileUpdateError, match="No category"):
            add_subcategory(categories, "Pets", "Vet")

    def test_remove_category(self, categories):
        assert [c.name for c in remove_category(categories, "FOOD")] == ["Travel"]

    def test_remove_unknown_category(self, categories):
        with pytest.raises(ProfileUpdateError):
            remove_category(categories, "Pets")
