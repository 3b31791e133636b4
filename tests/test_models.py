"""Tests for parsing backend records."""

from decimal import Decimal

import pytest
from pydantic import ValidationError

from financeflow.models import (
    BackendResponse,
    DashboardStats,
    MoneyTakenEntry,
    RepaymentEntry,
    SplitEntry,
    User,
    parse_history,
    round_cents,
    to_decimal,
)


class TestMoney:
    """Tests for money conversion."""

    def test_floats_keep_their_digits(self):
        assert to_decimal(33.33) == Decimal("33.33")
        assert to_decimal(0.1) + to_decimal(0.2) == Decimal("0.3")

    def test_round_half_up(self):
        assert round_cents(Decimal("2.675")) == Decimal("2.68")
        assert round_cents(Decimal("-2.675")) == Decimal("-2.68")


class TestParseHistory:
    """Tests for the ledger entry union."""

    def test_variants_selected_by_type(self):
        history = parse_history(
            [
                {
                    "id": "T1",
                    "type": "Money Taken",
                    "creatorId": "U1",
                    "friendId": "F1",
                    "amount": "75",
                    "timestamp": "2025-03-01T10:00:00+05:30",
                },
                {
                    "id": "T2",
                    "type": "I Paid Back",
                    "creatorId": "U1",
                    "friendId": "F1",
                    "amount": 75,
                    "timestamp": "2025-03-02T10:00:00+05:30",
                    "status": "Completed",
                },
                {
                    "id": "T3",
                    "type": "Split",
                    "creatorId": "F1",
                    "payerId": "F1",
                    "amount": 60,
                    "receiptURL": "",
                    "timestamp": "2025-03-03T10:00:00+05:30",
                    "participants": [
                        {"userId": "F1", "name": "Ravi", "share": 30, "hasPaid": True},
                        {"userId": "U1", "name": "Asha", "share": 30, "paidAmount": 12.5},
                    ],
                },
            ]
        )

        assert isinstance(history[0], MoneyTakenEntry)
        assert history[0].status == "Pending"
        assert isinstance(history[1], RepaymentEntry)
        assert isinstance(history[2], SplitEntry)
        assert history[2].receipt_url is None
        assert history[2].share_of("U1").remaining == Decimal("17.5")
        assert history[2].share_of("X") is None

    def test_unknown_type_rejected(self):
        with pytest.raises(ValidationError):
            parse_history(
                [{"id": "T1", "type": "Gift", "creatorId": "U1", "amount": 1, "timestamp": "2025-03-01"}]
            )

    def test_remaining_never_negative(self):
        entry = parse_history(
            [
                {
                    "id": "T1",
                    "type": "Money Given",
                    "creatorId": "U1",
                    "friendId": "F1",
                    "amount": 100,
                    "paidAmount": 130,
                    "timestamp": "2025-03-01T10:00:00Z",
                }
            ]
        )[0]

        assert entry.remaining == Decimal("0")


class TestBackendRecords:
    """Tests for other backend records."""

    def test_user_wire_names(self):
        user = User.model_validate(
            {
                "id": "U1",
                "username": "asha",
                "photoURL": "https://img.test/a.png",
                "upiId": "asha@okbank",
                "isVerified": True,
                "stylePreset": "glass",
                "categories": [{"name": "Food", "subcategories": ["Groceries"]}],
            }
        )

        assert user.photo_url == "https://img.test/a.png"
        assert user.find_category("food").subcategories == ["Groceries"]
        assert user.to_wire()["photoURL"] == "https://img.test/a.png"
        assert "phoneNumber" not in user.to_wire()

    def test_dashboard_liquid(self):
        stats = DashboardStats.model_validate({"cash": 1500, "online": "2500.25", "moneyGiven": ""})

        assert stats.liquid == Decimal("4000.25")
        assert stats.money_given == Decimal("0")

    def test_backend_response_payload(self):
        response = BackendResponse.model_validate({"success": True, "friends": [{"id": "F1"}]})

        assert response.get("friends") == [{"id": "F1"}]
        assert response.get("history", []) == []
        assert response.error is None
