"""Tests for score ledger semantics."""

import pytest

from conftest import make_record
from familypoints.domain.entities import REDEMPTION_PREFIX, RecordKind
from familypoints.domain.errors import (
    InsufficientPointsError,
    NotFoundError,
    ValidationError,
)
from familypoints.domain.ledger import (
    calculate_score,
    is_redemption,
    records_for_child,
    scores_by_child,
)


class TestCalculateScore:
    """Tests for deriving scores from the ledger."""

    def test_sums_only_matching_child(self):
        records = [
            make_record("r1", "child_1", 10),
            make_record("r2", "child_1", -3),
            make_record("r3", "child_2", 5),
        ]

        assert calculate_score("child_1", records) == 7
        assert calculate_score("child_2", records) == 5

    def test_unknown_child_scores_zero(self):
        assert calculate_score("nobody", [make_record("r1")]) == 0
        assert calculate_score("child_1", []) == 0

    def test_negative_totals_are_not_clamped(self):
        records = [make_record("r1", points_change=5), make_record("r2", points_change=-30)]
        assert calculate_score("child_1", records) == -25

    def test_scores_by_child_matches_calculate_score(self):
        records = [
            make_record("r1", "child_1", 10),
            make_record("r2", "child_2", -4),
            make_record("r3", "child_1", 20),
        ]
        totals = scores_by_child(records)

        assert totals == {"child_1": 30, "child_2": -4}
        for child_id, total in totals.items():
            assert calculate_score(child_id, records) == total


class TestLogBehavior:
    """Tests for behavior logging."""

    def test_positive_item_adds_points(self, ledger_service, seed_state):
        # item_1 is "Chores", POSITIVE, 10 points
        state, record = ledger_service.log_behavior(seed_state, "child_1", "item_1", "parent_1")

        assert record.points_change == 10
        assert record.child_name == "Ethan"
        assert record.item_name == "Chores"
        assert record.created_by_name == "Mom & Dad"
        assert record.kind == RecordKind.BEHAVIOR
        assert state.records == (record,)

    def test_negative_item_subtracts_points(self, ledger_service, seed_state):
        # item_5 is "Messy school bag", NEGATIVE, 10 points
        _, record = ledger_service.log_behavior(seed_state, "child_1", "item_5", "parent_1")

        assert record.points_change == -10

    def test_note_is_kept(self, ledger_service, seed_state):
        _, record = ledger_service.log_behavior(
            seed_state, "child_2", "item_4", "parent_1", note="Up at 6am"
        )
        assert record.note == "Up at 6am"

    def test_input_snapshot_is_unchanged(self, ledger_service, seed_state):
        ledger_service.log_behavior(seed_state, "child_1", "item_1", "parent_1")
        assert seed_state.records == ()

    def test_unknown_item(self, ledger_service, seed_state):
        with pytest.raises(NotFoundError, match="Score item"):
            ledger_service.log_behavior(seed_state, "child_1", "missing", "parent_1")

    def test_parent_cannot_receive_points(self, ledger_service, seed_state):
        with pytest.raises(ValidationError, match="not a child"):
            ledger_service.log_behavior(seed_state, "parent_1", "item_1", "parent_1")


class TestRedeemReward:
    """Tests for reward redemption."""

    def _with_points(self, ledger_service, state, times):
        for _ in range(times):
            # item_2 is "Great grades", worth 20
            state, _ = ledger_service.log_behavior(state, "child_1", "item_2", "parent_1")
        return state

    def test_redemption_subtracts_cost(self, ledger_service, seed_state):
        state = self._with_points(ledger_service, seed_state, 3)

        # reward_1 costs 50
        state, record = ledger_service.redeem_reward(state, "child_1", "reward_1", "parent_1")

        assert record.points_change == -50
        assert record.item_name == f"{REDEMPTION_PREFIX}Switch time (30 min)"
        assert is_redemption(record)
        assert calculate_score("child_1", state.records) == 10

    def test_insufficient_points_rejected(self, ledger_service, seed_state):
        state = self._with_points(ledger_service, seed_state, 1)

        with pytest.raises(InsufficientPointsError, match="costs 50"):
            ledger_service.redeem_reward(state, "child_1", "reward_1", "parent_1")

    def test_exact_balance_allowed(self, ledger_service, seed_state):
        state = self._with_points(ledger_service, seed_state, 1)

        # reward_3 costs 20
        state, _ = ledger_service.redeem_reward(state, "child_1", "reward_3", "parent_1")
        assert calculate_score("child_1", state.records) == 0

    def test_legacy_prefix_is_a_redemption(self):
        record = make_record("r1", points_change=-20, item_name="兌換：吃零食")
        assert is_redemption(record)
        assert not is_redemption(make_record("r2"))


class TestRecordsForChild:
    """Tests for history filtering."""

    def test_filters_by_child_and_days_newest_first(self):
        records = [
            make_record("old", "child_1", days_ago=40),
            make_record("mid", "child_1", days_ago=10),
            make_record("new", "child_1", days_ago=1),
            make_record("other", "child_2", days_ago=1),
        ]

        result = records_for_child(records, child_id="child_1", days=30)

        assert [r.id for r in result] == ["new", "mid"]

    def test_no_filters_returns_everything(self):
        records = [make_record("a", days_ago=2), make_record("b", "child_2", days_ago=1)]
        assert [r.id for r in records_for_child(records)] == ["b", "a"]
