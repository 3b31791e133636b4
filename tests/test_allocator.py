"""Tests for split bill share allocation."""

from decimal import Decimal

import pytest

from financeflow.models import BillSplit
from financeflow.split.allocator import (
    DEFAULT_BALANCE_TOLERANCE,
    compute_shares,
    is_balanced,
    new_split,
    parse_amount,
    set_manual_share,
    set_mode,
    set_total,
    toggle_participant,
)


def make_split(total: str, *friends: str, self_id: str = "me") -> BillSplit:
    """Start a split and add friends in order."""
    split = new_split(self_id, Decimal(total))
    for friend in friends:
        split = toggle_participant(split, friend)
    return split


class TestComputeShares:
    """Tests for the share computation itself."""

    def test_equal_two_way(self):
        """100 between two people is 50 each."""
        shares = compute_shares(Decimal("100"), ["A", "B"], "Equal")

        assert shares == {"A": Decimal("50.00"), "B": Decimal("50.00")}
        assert is_balanced(shares, Decimal("100"))

    def test_equal_three_way_rounds_each_share(self):
        """100 between three people is 33.33 each and still counts as balanced."""
        shares = compute_shares(Decimal("100"), ["A", "B", "C"], "Equal")

        assert all(share == Decimal("33.33") for share in shares.values())
        assert sum(shares.values()) == Decimal("99.99")
        assert is_balanced(shares, Decimal("100"))

    def test_custom_spreads_remainder_over_free(self):
        """Locking A at 50 of 90 leaves 20 each for B and C."""
        shares = compute_shares(
            Decimal("90"),
            ["A", "B", "C"],
            "Custom",
            locked=["A"],
            previous_shares={"A": Decimal("50")},
        )

        assert shares == {
            "A": Decimal("50"),
            "B": Decimal("20.00"),
            "C": Decimal("20.00"),
        }

    def test_custom_never_negative(self):
        """A lock larger than the bill leaves the others at zero."""
        shares = compute_shares(
            Decimal("50"),
            ["A", "B"],
            "Custom",
            locked=["A"],
            previous_shares={"A": Decimal("80")},
        )

        assert shares["B"] == Decimal("0.00")
        assert not is_balanced(shares, Decimal("50"))

    def test_custom_all_locked_keeps_previous(self):
        """With nobody free, the previous values come back unchanged."""
        previous = {"A": Decimal("10"), "B": Decimal("15")}
        shares = compute_shares(
            Decimal("100"), ["A", "B"], "Custom", locked=["A", "B"], previous_shares=previous
        )

        assert shares == previous

    def test_no_participants(self):
        """No participants gives no shares."""
        assert compute_shares(Decimal("100"), [], "Equal") == {}

    def test_round_half_up(self):
        """10 / 3 rounds down, 0.05 / 2 rounds half up."""
        assert compute_shares(Decimal("10"), ["A", "B", "C"], "Equal")["A"] == Decimal("3.33")
        assert compute_shares(Decimal("0.05"), ["A", "B"], "Equal")["A"] == Decimal("0.03")

    @pytest.mark.parametrize("count", [1, 2, 3, 6, 7, 9, 11])
    @pytest.mark.parametrize("total", ["100", "0.01", "999.99", "1234.56"])
    def test_equal_rounding_error_bounded(self, total, count):
        """Equal shares never drift more than half a cent per person."""
        ids = [f"P{i}" for i in range(count)]
        shares = compute_shares(Decimal(total), ids, "Equal")

        assert abs(sum(shares.values()) - Decimal(total)) <= count * Decimal("0.005")


class TestSplitTransitions:
    """Tests for the split state transitions."""

    def test_new_split_selects_only_self(self):
        """A new split bills only the initiating user."""
        split = new_split("me", Decimal("40"))

        assert split.selected == ["me"]
        assert split.shares == {"me": Decimal("40.00")}
        assert split.mode == "Equal"

    def test_toggle_self_is_noop(self):
        """The initiating user can't be removed."""
        split = make_split("100", "A")

        assert toggle_participant(split, "me") == split

    def test_toggle_adds_then_removes(self):
        """Toggling twice restores the original selection."""
        split = make_split("100", "A", "B")
        assert split.selected == ["me", "A", "B"]

        split = toggle_participant(split, "A")
        assert split.selected == ["me", "B"]
        assert split.shares["B"] == Decimal("50.00")

    def test_toggle_clears_locks(self):
        """Changing who is in the split drops manual shares."""
        split = set_manual_share(make_split("90", "A"), "A", Decimal("60"))
        split = toggle_participant(split, "B")

        assert split.locked == []
        assert split.mode == "Custom"
        assert split.shares == {
            "me": Decimal("30.00"),
            "A": Decimal("30.00"),
            "B": Decimal("30.00"),
        }

    def test_manual_share_example(self):
        """Locking A at 50 on a 90 bill with B and C gives 20 each."""
        split = BillSplit(self_id="A", total=Decimal("90"), selected=["A", "B", "C"])
        split = set_manual_share(split, "A", Decimal("50"))

        assert split.mode == "Custom"
        assert split.locked == ["A"]
        assert split.shares == {
            "A": Decimal("50.00"),
            "B": Decimal("20.00"),
            "C": Decimal("20.00"),
        }
        assert split.is_balanced(DEFAULT_BALANCE_TOLERANCE)

    def test_locked_share_survives_other_edits(self):
        """Editing B never moves A's locked value."""
        split = make_split("120", "A", "B", "C")
        split = set_manual_share(split, "A", Decimal("50"))
        split = set_manual_share(split, "B", Decimal("10"))

        assert split.shares["A"] == Decimal("50.00")
        assert split.shares["B"] == Decimal("10.00")
        assert split.shares["me"] == Decimal("30.00")
        assert split.shares["C"] == Decimal("30.00")

    def test_re_edit_moves_to_newest_lock(self):
        """Editing an already locked participant makes it the newest lock."""
        split = make_split("100", "A", "B")
        split = set_manual_share(split, "A", Decimal("10"))
        split = set_manual_share(split, "B", Decimal("20"))
        split = set_manual_share(split, "A", Decimal("15"))

        assert split.locked == ["B", "A"]

    def test_earliest_lock_released_when_everyone_locked(self):
        """Locking the last free participant releases the earliest lock."""
        split = make_split("100", "A")
        split = set_manual_share(split, "me", Decimal("30"))
        split = set_manual_share(split, "A", Decimal("60"))

        assert split.locked == ["A"]
        assert split.shares == {"me": Decimal("40.00"), "A": Decimal("60.00")}

    def test_always_someone_free(self):
        """After any manual edit at least one participant absorbs the remainder."""
        split = make_split("200", "A", "B")
        for pid, value in [("A", 10), ("B", 20), ("me", 30), ("A", 40), ("B", 50)]:
            split = set_manual_share(split, pid, Decimal(value))
            assert len(split.locked) < len(split.selected)

    def test_only_self_selected(self):
        """A manual edit on a solo split is released and self gets the total."""
        split = set_manual_share(new_split("me", Decimal("75")), "me", Decimal("10"))

        assert split.locked == []
        assert split.shares == {"me": Decimal("75.00")}

    def test_manual_share_for_unselected_ignored(self):
        """Shares for people not in the split are ignored."""
        split = make_split("100", "A")

        assert set_manual_share(split, "Z", Decimal("5")) == split

    def test_negative_manual_share_floored(self):
        """Negative input is treated as zero."""
        split = set_manual_share(make_split("100", "A"), "A", Decimal("-20"))

        assert split.shares["A"] == Decimal("0.00")
        assert split.shares["me"] == Decimal("100.00")

    def test_manual_share_accepts_text(self):
        """Values typed by the user are parsed."""
        split = set_manual_share(make_split("100", "A"), "A", "12.5")

        assert split.shares["A"] == Decimal("12.50")
        assert split.shares["me"] == Decimal("87.50")

    def test_set_total_keeps_locks(self):
        """Changing the total re-spreads only over free participants."""
        split = set_manual_share(make_split("100", "A", "B"), "A", Decimal("40"))
        split = set_total(split, Decimal("140"))

        assert split.shares["A"] == Decimal("40.00")
        assert split.shares["me"] == Decimal("50.00")
        assert split.shares["B"] == Decimal("50.00")

    def test_set_total_floors_negative(self):
        """A negative total becomes zero."""
        split = set_total(make_split("100", "A"), Decimal("-5"))

        assert split.total == Decimal("0")
        assert split.shares == {"me": Decimal("0.00"), "A": Decimal("0.00")}

    def test_equal_mode_drops_locks(self):
        """Switching back to Equal discards manual shares."""
        split = set_manual_share(make_split("90", "A", "B"), "A", Decimal("50"))
        split = set_mode(split, "Equal")

        assert split.locked == []
        assert split.shares == {
            "me": Decimal("30.00"),
            "A": Decimal("30.00"),
            "B": Decimal("30.00"),
        }

    def test_transitions_do_not_mutate_input(self):
        """Each transition returns a new state."""
        split = make_split("100", "A")
        before = split.model_copy(deep=True)

        set_manual_share(split, "A", Decimal("70"))
        toggle_participant(split, "B")
        set_total(split, Decimal("10"))

        assert split == before

    def test_self_always_selected(self):
        """BillSplit puts the initiating user first even if omitted."""
        split = BillSplit(self_id="me", selected=["A"])

        assert split.selected == ["me", "A"]


class TestUnparseableInput:
    """Half-typed or invalid amounts count as zero instead of raising."""

    @pytest.mark.parametrize("value", ["", "   ", None, "abc", "12a", "NaN", "Infinity", float("nan")])
    def test_parse_amount_zero(self, value):
        assert parse_amount(value) == Decimal("0")

    def test_parse_amount_numbers(self):
        assert parse_amount(" 12.50 ") == Decimal("12.50")
        assert parse_amount(33.33) == Decimal("33.33")
        assert parse_amount(7) == Decimal("7")

    @pytest.mark.parametrize("value", ["", "abc", "NaN"])
    def test_manual_share(self, value):
        """A cleared or garbage share locks the participant at zero."""
        split = set_manual_share(make_split("90", "A", "B"), "me", value)

        assert split.locked == ["me"]
        assert split.shares == {
            "me": Decimal("0.00"),
            "A": Decimal("45.00"),
            "B": Decimal("45.00"),
        }

    @pytest.mark.parametrize("value", ["", "12a", "NaN"])
    def test_set_total(self, value):
        split = set_total(make_split("90", "A"), value)

        assert split.total == Decimal("0")
        assert split.shares == {"me": Decimal("0.00"), "A": Decimal("0.00")}

    def test_new_split_blank_total(self):
        assert new_split("me", "").shares == {"me": Decimal("0.00")}
