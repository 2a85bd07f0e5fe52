"""Score ledger domain service.

The ledger is the only source of truth for scores: a child's score is the sum
of `points_change` over their records and is recomputed on every read.
"""

from collections import defaultdict
from dataclasses import replace
from typing import Iterable, Optional

from familypoints.domain.catalog import find_reward_item, find_score_item, find_user
from familypoints.domain.entities import (
    REDEMPTION_PREFIX,
    AppState,
    RecordKind,
    ScoreRecord,
    User,
)
from familypoints.domain.errors import (
    InsufficientPointsError,
    ValidationError,
    insufficient_points,
    not_a_child,
)
from familypoints.utils.clock import cutoff_ms, new_id, now_ms

REDEMPTION_NOTE = "Reward redemption"


def calculate_score(child_id: str, records: Iterable[ScoreRecord]) -> int:
    """Sum the point changes of every record belonging to `child_id`."""
    return sum(r.points_change for r in records if r.child_id == child_id)


def scores_by_child(records: Iterable[ScoreRecord]) -> dict[str, int]:
    """Return the score of every child that appears in `records`."""
    totals: dict[str, int] = defaultdict(int)
    for record in records:
        totals[record.child_id] += record.points_change
    return dict(totals)


def is_redemption(record: ScoreRecord) -> bool:
    """Return True if `record` was produced by redeeming a reward."""
    return record.kind == RecordKind.REDEMPTION


def records_for_child(
    records: Iterable[ScoreRecord],
    child_id: Optional[str] = None,
    days: Optional[int] = None,
    now: Optional[int] = None,
) -> list[ScoreRecord]:
    """Filter the ledger for a history view, newest first.

    Args:
        records: Ledger entries
        child_id: Only keep this child's entries (all children if None)
        days: Only keep entries from the last `days` days
        now: Reference time in epoch milliseconds (defaults to the current time)
    """
    cutoff = cutoff_ms(days, now) if days else None
    selected = [
        r
        for r in records
        if (child_id is None or r.child_id == child_id)
        and (cutoff is None or r.timestamp >= cutoff)
    ]
    return sorted(selected, key=lambda r: r.timestamp, reverse=True)


class LedgerService:
    """Service for appending behavior and redemption entries to the ledger."""

    def _require_child(self, state: AppState, child_id: str) -> User:
        child = find_user(state, child_id)
        if not child.is_child:
            raise ValidationError(not_a_child(child_id))
        return child

    def _append(self, state: AppState, record: ScoreRecord) -> AppState:
        return replace(state, records=state.records + (record,))

    def log_behavior(
        self,
        state: AppState,
        child_id: str,
        item_id: str,
        created_by_id: str,
        note: Optional[str] = None,
        timestamp: Optional[int] = None,
    ) -> tuple[AppState, ScoreRecord]:
        """Record a behavior event for a child.

        The delta is +points for a POSITIVE item and -points for a NEGATIVE one.

        Returns:
            Tuple of (new snapshot, created record)

        Raises:
            NotFoundError: If the child, item or creator doesn't exist
            ValidationError: If `child_id` is not a child
        """
        child = self._require_child(state, child_id)
        item = find_score_item(state, item_id)
        creator = find_user(state, created_by_id)

        record = ScoreRecord(
            id=new_id(),
            child_id=child.id,
            child_name=child.name,
            item_id=item.id,
            item_name=item.label,
            points_change=item.signed_points,
            timestamp=now_ms() if timestamp is None else timestamp,
            created_by_id=creator.id,
            created_by_name=creator.name,
            note=note or None,
        )
        return self._append(state, record), record

    def redeem_reward(
        self,
        state: AppState,
        child_id: str,
        reward_id: str,
        created_by_id: str,
        timestamp: Optional[int] = None,
    ) -> tuple[AppState, ScoreRecord]:
        """Spend a child's points on a reward.

        The record always carries -cost and its item name is prefixed with
        REDEMPTION_PREFIX so the history can tell it apart from behavior logs.

        Returns:
            Tuple of (new snapshot, created record)

        Raises:
            NotFoundError: If the child, reward or creator doesn't exist
            ValidationError: If `child_id` is not a child
            InsufficientPointsError: If the child's score is below the cost
        """
        child = self._require_child(state, child_id)
        reward = find_reward_item(state, reward_id)
        creator = find_user(state, created_by_id)

        score = calculate_score(child.id, state.records)
        if score < reward.points:
            raise InsufficientPointsError(insufficient_points(child.name, score, reward.points))

        record = ScoreRecord(
            id=new_id(),
            child_id=child.id,
            child_name=child.name,
            item_id=reward.id,
            item_name=f"{REDEMPTION_PREFIX}{reward.label}",
            points_change=-reward.points,
            timestamp=now_ms() if timestamp is None else timestamp,
            created_by_id=creator.id,
            created_by_name=creator.name,
            note=REDEMPTION_NOTE,
        )
        return self._append(state, record), record
